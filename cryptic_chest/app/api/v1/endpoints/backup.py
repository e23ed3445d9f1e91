# cryptic_chest/app/api/v1/endpoints/backup.py
"""
Backup endpoints.

- GET  /backup/recovery-phrase - New phrase to show the user once
- POST /backup/                - Download a backup wrapped with a phrase
- POST /backup/restore         - Replace the vault with a backup file

The phrase is never stored; the client keeps it long enough to
request the backup and display it.
"""
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status

from cryptic_chest.app.api import deps
from cryptic_chest.app.models.user import User
from cryptic_chest.app.schemas.backup import BackupCreateRequest, RecoveryPhraseResponse, RestoreResponse
from cryptic_chest.app.security.recovery import generate_recovery_phrase, normalize_phrase
from cryptic_chest.app.services.backup import BackupService, backup_filename
from cryptic_chest.app.services.cache import PasswordCache

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/recovery-phrase", response_model=RecoveryPhraseResponse)
async def new_recovery_phrase(current_user: User = Depends(deps.get_current_user)):
    return {"recovery_phrase": generate_recovery_phrase()}


@router.post("/")
async def create_backup(
        request: BackupCreateRequest,
        current_user: User = Depends(deps.get_current_user),
        service: BackupService = Depends(deps.get_backup_service),
):
    blob = await service.create_backup(current_user.id, normalize_phrase(request.recovery_phrase))
    # Served as application/json even though the blob is not JSON
    return Response(
        content=blob,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'},
    )


@router.post("/restore", response_model=RestoreResponse)
async def restore_backup(
        file: UploadFile = File(...),
        recovery_phrase: str = Form(...),
        current_user: User = Depends(deps.get_current_user),
        service: BackupService = Depends(deps.get_backup_service),
        cache: PasswordCache = Depends(deps.get_password_cache),
):
    raw = await file.read()
    try:
        blob = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to read file",
        )

    try:
        restored = await service.restore_from_backup(blob, normalize_phrase(recovery_phrase), current_user.id)
    finally:
        # Partially applied restores must not be served from cache either
        cache.invalidate(current_user.id)

    return {"restored": restored, "message": "Backup restored successfully"}
