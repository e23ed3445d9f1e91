# cryptic_chest/app/api/v1/endpoints/auth.py
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cryptic_chest.app.api import deps
from cryptic_chest.app.core.config import settings
from cryptic_chest.app.db.base import get_db
from cryptic_chest.app.models.user import User
from cryptic_chest.app.schemas.user import PasswordConfirmation, Token, UserCreate, UserResponse
from cryptic_chest.app.security import hashing, jwt
from cryptic_chest.app.services.cache import PasswordCache
from cryptic_chest.app.services.passwords import PasswordService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    email = user_in.email.strip().lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalars().first():
        raise HTTPException(status_code=400, detail="User already exists")

    new_user = User(
        name=user_in.name,
        email=email,
        hashed_password=hashing.get_password_hash(user_in.password),
    )
    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)
    logger.info("Registered user %s", new_user.id)
    return new_user


@router.post("/login", response_model=Token)
async def login(form_data: OAuth2PasswordRequestForm = Depends(), db: AsyncSession = Depends(get_db)):
    # OAuth2 form field "username" carries the email address
    result = await db.execute(select(User).where(User.email == form_data.username.strip().lower()))
    user = result.scalars().first()

    if not user or not hashing.verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = jwt.create_access_token(
        data={"sub": user.id},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(deps.get_current_user)):
    return current_user


@router.post("/logout")
async def logout(
        current_user: User = Depends(deps.get_current_user),
        cache: PasswordCache = Depends(deps.get_password_cache),
):
    # Tokens are stateless; logging out only drops decrypted data
    cache.invalidate(current_user.id)
    return {"message": "Logged out"}


@router.delete("/me")
async def delete_account(
        confirmation: PasswordConfirmation,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
        service: PasswordService = Depends(deps.get_password_service),
):
    if not hashing.verify_password(confirmation.password, current_user.hashed_password):
        raise HTTPException(status_code=401, detail="Password is incorrect")

    count = await service.delete_all(current_user.id)
    await db.delete(current_user)
    await db.commit()
    logger.info("Deleted account %s with %d passwords", current_user.id, count)
    return {"message": "Account deleted successfully", "count": count}
