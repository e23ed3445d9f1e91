# cryptic_chest/app/models/user.py
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from cryptic_chest.app.db.base import Base


def new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    __tablename__ = "users"

    # Opaque string id; the per-user envelope key is derived from it
    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Login only. Never used to encrypt credentials.
    hashed_password = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
