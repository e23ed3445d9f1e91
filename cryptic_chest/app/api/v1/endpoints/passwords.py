# cryptic_chest/app/api/v1/endpoints/passwords.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from cryptic_chest.app.api import deps
from cryptic_chest.app.models.user import User
from cryptic_chest.app.schemas.password import (
    DeleteAllResponse,
    PasswordCreate,
    PasswordResponse,
    PasswordUpdate,
)
from cryptic_chest.app.schemas.user import PasswordConfirmation
from cryptic_chest.app.security import hashing
from cryptic_chest.app.services.passwords import PasswordService

router = APIRouter()


@router.get("/", response_model=List[PasswordResponse])
async def read_passwords(
        current_user: User = Depends(deps.get_current_user),
        service: PasswordService = Depends(deps.get_password_service),
):
    return await service.list_passwords(current_user.id)


@router.post("/", response_model=PasswordResponse, status_code=status.HTTP_201_CREATED)
async def create_password(
        password_in: PasswordCreate,
        current_user: User = Depends(deps.get_current_user),
        service: PasswordService = Depends(deps.get_password_service),
):
    return await service.add_password(current_user.id, password_in)


# Static paths are declared before /{password_id}
@router.get("/search", response_model=List[PasswordResponse])
async def search_passwords(
        query: str = "",
        current_user: User = Depends(deps.get_current_user),
        service: PasswordService = Depends(deps.get_password_service),
):
    return await service.search(current_user.id, query)


@router.get("/category/{category}", response_model=List[PasswordResponse])
async def filter_by_category(
        category: str,
        current_user: User = Depends(deps.get_current_user),
        service: PasswordService = Depends(deps.get_password_service),
):
    return await service.filter_by_category(current_user.id, category)


@router.delete("/user/{user_id}", response_model=DeleteAllResponse)
async def delete_all_user_passwords(
        user_id: str,
        confirmation: PasswordConfirmation,
        current_user: User = Depends(deps.get_current_user),
        service: PasswordService = Depends(deps.get_password_service),
):
    if user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Cannot reset another user's passwords")
    if not hashing.verify_password(confirmation.password, current_user.hashed_password):
        raise HTTPException(status_code=401, detail="Password is incorrect")

    count = await service.delete_all(current_user.id)
    return {"message": "All passwords deleted successfully", "count": count}


@router.get("/{password_id}", response_model=PasswordResponse)
async def read_password(
        password_id: str,
        current_user: User = Depends(deps.get_current_user),
        service: PasswordService = Depends(deps.get_password_service),
):
    # Records of other users raise AccessDeniedError (403)
    password = await service.get_password(current_user.id, password_id)
    if password is None:
        raise HTTPException(status_code=404, detail="Password not found")
    return password


@router.put("/{password_id}", response_model=PasswordResponse)
async def update_password(
        password_id: str,
        password_in: PasswordUpdate,
        current_user: User = Depends(deps.get_current_user),
        service: PasswordService = Depends(deps.get_password_service),
):
    password = await service.update_password(current_user.id, password_id, password_in)
    if password is None:
        raise HTTPException(status_code=404, detail="Password not found")
    return password


@router.delete("/{password_id}")
async def delete_password(
        password_id: str,
        current_user: User = Depends(deps.get_current_user),
        service: PasswordService = Depends(deps.get_password_service),
):
    if not await service.delete_password(current_user.id, password_id):
        raise HTTPException(status_code=404, detail="Password not found")
    return {"message": "Password deleted successfully"}
