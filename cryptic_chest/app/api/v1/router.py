# cryptic_chest/app/api/v1/router.py
from fastapi import APIRouter
from cryptic_chest.app.api.v1.endpoints import auth, backup, generator, passwords

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(passwords.router, prefix="/passwords", tags=["passwords"])
api_router.include_router(generator.router, prefix="/generator", tags=["generator"])
api_router.include_router(backup.router, prefix="/backup", tags=["backup"])
