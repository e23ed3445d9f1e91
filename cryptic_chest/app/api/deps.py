# cryptic_chest/app/api/deps.py
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from cryptic_chest.app.core.config import settings
from cryptic_chest.app.db.base import get_db
from cryptic_chest.app.models.user import User
from cryptic_chest.app.schemas.user import TokenPayload
from cryptic_chest.app.security import jwt
from cryptic_chest.app.services.backup import BackupService
from cryptic_chest.app.services.cache import PasswordCache
from cryptic_chest.app.services.passwords import PasswordRepository, PasswordService

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login"
)


async def get_current_user(
        db: AsyncSession = Depends(get_db),
        token: str = Depends(reusable_oauth2)
) -> User:
    try:
        payload = jwt.decode_access_token(token)
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed: Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not token_data.sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed: Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await db.get(User, token_data.sub)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user


def get_password_cache(request: Request) -> PasswordCache:
    return request.app.state.password_cache


def get_password_repository(db: AsyncSession = Depends(get_db)) -> PasswordRepository:
    return PasswordRepository(db)


def get_password_service(
        repository: PasswordRepository = Depends(get_password_repository),
        cache: PasswordCache = Depends(get_password_cache),
) -> PasswordService:
    return PasswordService(repository, cache)


def get_backup_service(
        repository: PasswordRepository = Depends(get_password_repository),
) -> BackupService:
    return BackupService(repository)
