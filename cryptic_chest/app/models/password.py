# cryptic_chest/app/models/password.py
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Boolean, ForeignKey, DateTime
from cryptic_chest.app.db.base import Base
from cryptic_chest.app.models.user import new_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Password(Base):
    __tablename__ = "passwords"

    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String(32), ForeignKey("users.id"), index=True, nullable=False)

    name = Column(String(200), nullable=False)
    url = Column(String(2048), nullable=True)
    username = Column(String(255), nullable=False)

    # Always the output of security.encryption.encrypt() under the owner's
    # derived key. Plaintext never reaches this column.
    password = Column(Text, nullable=False)

    category = Column(String(100), nullable=True, index=True)
    notes = Column(Text, nullable=True)
    favorite = Column(Boolean, default=False, nullable=False)

    # Set in Python: SQLite CURRENT_TIMESTAMP only has second resolution
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
