# cryptic_chest/app/schemas/backup.py
"""
Backup payload schemas.

Field names inside a backup file are camelCase so files written by
earlier releases of the web client restore unchanged:

    {"passwords": [{"id", "userId", "name", "url", "username", "password",
                    "category", "notes", "favorite", "createdAt",
                    "updatedAt"}, ...],
     "timestamp": <epoch ms>}

The password field of every record is plaintext inside the payload.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BackupRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    name: str
    url: Optional[str] = None
    username: str
    password: str
    category: Optional[str] = None
    notes: Optional[str] = None
    favorite: bool = False
    # Epoch milliseconds
    created_at: Optional[int] = None
    updated_at: Optional[int] = None


class BackupPayload(BaseModel):
    passwords: List[BackupRecord]
    timestamp: int


class BackupCreateRequest(BaseModel):
    recovery_phrase: str = Field(..., min_length=1)


class RecoveryPhraseResponse(BaseModel):
    recovery_phrase: str


class RestoreResponse(BaseModel):
    restored: int
    message: str
