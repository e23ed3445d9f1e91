# cryptic_chest/app/schemas/user.py
from pydantic import BaseModel, Field
from typing import Optional


# Sent by the registration form
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=4, max_length=72)


# Never includes the password hash
class UserResponse(BaseModel):
    id: str
    name: str
    email: str

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenPayload(BaseModel):
    sub: Optional[str] = None


class PasswordConfirmation(BaseModel):
    password: str
