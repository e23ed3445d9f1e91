# cryptic_chest/app/schemas/generator.py
from pydantic import BaseModel, Field

# Upper bound for passwords requested over HTTP
MAX_REQUEST_LENGTH = 1024


class PasswordOptions(BaseModel):
    length: int = Field(16, ge=1)
    include_uppercase: bool = True
    include_lowercase: bool = True
    include_numbers: bool = True
    include_symbols: bool = True


class PasswordRequest(PasswordOptions):
    length: int = Field(16, ge=1, le=MAX_REQUEST_LENGTH)


class GeneratedPassword(BaseModel):
    password: str


class StrengthRequest(BaseModel):
    password: str


class StrengthResponse(BaseModel):
    score: int
    label: str
