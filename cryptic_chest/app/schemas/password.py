# cryptic_chest/app/schemas/password.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PasswordCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    url: Optional[str] = None
    username: str
    password: str
    category: Optional[str] = None
    notes: Optional[str] = None
    favorite: bool = False


class PasswordUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    favorite: Optional[bool] = None


# password holds the decrypted secret
class PasswordResponse(BaseModel):
    id: str
    user_id: str
    name: str
    url: Optional[str] = None
    username: str
    password: str
    category: Optional[str] = None
    notes: Optional[str] = None
    favorite: bool = False
    created_at: datetime
    updated_at: datetime


class DeleteAllResponse(BaseModel):
    message: str
    count: int
