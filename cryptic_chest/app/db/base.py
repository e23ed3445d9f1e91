# cryptic_chest/app/db/base.py
"""
Declarative base shared by the users and passwords tables.

Session objects live in db/session.py and are re-exported here so
models and endpoints only need a single import site.
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


from cryptic_chest.app.db.session import (  # noqa: E402
    engine,
    AsyncSessionLocal,
    get_db,
)

__all__ = [
    "Base",
    "engine",
    "AsyncSessionLocal",
    "get_db",
]
