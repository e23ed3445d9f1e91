# cryptic_chest/app/services/passwords.py
"""
Credential storage.

PasswordRepository talks to the database and only ever sees encrypted
secrets. PasswordService sits in front of it: it encrypts on write,
decrypts on read and keeps decrypted lists in a PasswordCache.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cryptic_chest.app.core.exceptions import AccessDeniedError
from cryptic_chest.app.models.password import Password
from cryptic_chest.app.schemas.password import PasswordCreate, PasswordResponse, PasswordUpdate
from cryptic_chest.app.security.encryption import decrypt, derive_user_key, encrypt
from cryptic_chest.app.services.cache import PasswordCache

logger = logging.getLogger(__name__)

# Columns a client may write; id, owner and timestamps are managed here
WRITABLE_FIELDS = ("name", "url", "username", "password", "category", "notes", "favorite")

SEARCH_FIELDS = ("name", "url", "username", "category", "notes")


class PasswordStore(Protocol):
    """Storage operations the backup codec depends on."""

    async def list_for_user(self, user_id: str) -> List[Password]: ...

    async def create(self, user_id: str, data: Dict[str, Any]) -> Password: ...

    async def delete(self, password_id: str) -> bool: ...


class PasswordRepository:
    """
    SQLAlchemy implementation of PasswordStore.

    Each write commits immediately, so a multi-step operation that fails
    half-way leaves the completed steps in place.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: str) -> List[Password]:
        result = await self.db.execute(
            select(Password)
            .where(Password.user_id == user_id)
            .order_by(Password.created_at, Password.id)
        )
        return list(result.scalars().all())

    async def get(self, password_id: str) -> Optional[Password]:
        return await self.db.get(Password, password_id)

    async def create(self, user_id: str, data: Dict[str, Any]) -> Password:
        fields = {key: data[key] for key in WRITABLE_FIELDS if key in data}
        if fields.get("favorite") is None:
            fields["favorite"] = False

        item = Password(**fields, user_id=user_id)
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        return item

    async def update(self, password_id: str, data: Dict[str, Any]) -> Optional[Password]:
        item = await self.get(password_id)
        if item is None:
            return None

        for key, value in data.items():
            if key in WRITABLE_FIELDS:
                setattr(item, key, value)

        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        return item

    async def delete(self, password_id: str) -> bool:
        item = await self.get(password_id)
        if item is None:
            return False

        await self.db.delete(item)
        await self.db.commit()
        return True

    async def delete_all_for_user(self, user_id: str) -> int:
        result = await self.db.execute(delete(Password).where(Password.user_id == user_id))
        await self.db.commit()
        return result.rowcount or 0

    async def search(self, user_id: str, query: str) -> List[Password]:
        if not query:
            return await self.list_for_user(user_id)

        conditions = [getattr(Password, field).icontains(query, autoescape=True) for field in SEARCH_FIELDS]
        result = await self.db.execute(
            select(Password)
            .where(Password.user_id == user_id, or_(*conditions))
            .order_by(Password.created_at, Password.id)
        )
        return list(result.scalars().all())

    async def filter_by_category(self, user_id: str, category: str) -> List[Password]:
        if not category:
            return await self.list_for_user(user_id)

        result = await self.db.execute(
            select(Password)
            .where(Password.user_id == user_id, Password.category == category)
            .order_by(Password.created_at, Password.id)
        )
        return list(result.scalars().all())


def to_response(item: Password, key: str) -> PasswordResponse:
    return PasswordResponse(
        id=item.id,
        user_id=item.user_id,
        name=item.name,
        url=item.url,
        username=item.username,
        password=decrypt(item.password, key),
        category=item.category,
        notes=item.notes,
        favorite=bool(item.favorite),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


class PasswordService:
    """Encrypting, caching front for a PasswordRepository."""

    def __init__(self, repository: PasswordRepository, cache: PasswordCache):
        self.repository = repository
        self.cache = cache

    def _decrypt_all(self, items: List[Password], user_id: str) -> List[PasswordResponse]:
        key = derive_user_key(user_id)
        return [to_response(item, key) for item in items]

    async def _owned_item(self, user_id: str, password_id: str, operation: str) -> Optional[Password]:
        """
        Look up a record for its owner.

        Returns:
            The record, or None if it does not exist

        Raises:
            AccessDeniedError: the record belongs to another user
        """
        item = await self.repository.get(password_id)
        if item is None:
            return None
        if item.user_id != user_id:
            logger.warning("User %s denied %s on password %s", user_id, operation, password_id)
            raise AccessDeniedError("Unauthorized access to this password", operation=operation)
        return item

    async def list_passwords(self, user_id: str) -> List[PasswordResponse]:
        cached = self.cache.get(user_id)
        if cached is not None:
            return cached

        version = self.cache.version(user_id)
        passwords = self._decrypt_all(await self.repository.list_for_user(user_id), user_id)
        self.cache.set(user_id, passwords, version=version)
        return passwords

    async def get_password(self, user_id: str, password_id: str) -> Optional[PasswordResponse]:
        item = await self._owned_item(user_id, password_id, "get_password")
        if item is None:
            return None
        return to_response(item, derive_user_key(user_id))

    async def add_password(self, user_id: str, password_in: PasswordCreate) -> PasswordResponse:
        key = derive_user_key(user_id)
        data = password_in.model_dump()
        data["password"] = encrypt(data["password"], key)

        item = await self.repository.create(user_id, data)
        self.cache.invalidate(user_id)
        logger.info("Stored password %s for user %s", item.id, user_id)
        return to_response(item, key)

    async def update_password(
            self, user_id: str, password_id: str, password_in: PasswordUpdate
    ) -> Optional[PasswordResponse]:
        if await self._owned_item(user_id, password_id, "update_password") is None:
            return None

        key = derive_user_key(user_id)
        data = password_in.model_dump(exclude_unset=True)
        # Required columns cannot be cleared
        for field in ("name", "username", "password", "favorite"):
            if field in data and data[field] is None:
                del data[field]
        if "password" in data:
            data["password"] = encrypt(data["password"], key)

        item = await self.repository.update(password_id, data)
        self.cache.invalidate(user_id)
        if item is None:
            return None
        return to_response(item, key)

    async def delete_password(self, user_id: str, password_id: str) -> bool:
        if await self._owned_item(user_id, password_id, "delete_password") is None:
            return False

        deleted = await self.repository.delete(password_id)
        self.cache.invalidate(user_id)
        return deleted

    async def delete_all(self, user_id: str) -> int:
        count = await self.repository.delete_all_for_user(user_id)
        self.cache.invalidate(user_id)
        logger.info("Deleted %d passwords for user %s", count, user_id)
        return count

    async def search(self, user_id: str, query: str) -> List[PasswordResponse]:
        return self._decrypt_all(await self.repository.search(user_id, query), user_id)

    async def filter_by_category(self, user_id: str, category: str) -> List[PasswordResponse]:
        return self._decrypt_all(await self.repository.filter_by_category(user_id, category), user_id)
