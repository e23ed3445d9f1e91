# cryptic_chest/app/services/backup.py
"""
Backup export and restore.

create_backup:
1. Read every record of the user from the store
2. Decrypt each secret with the user's derived key
3. Serialize {"passwords": [...], "timestamp": <epoch ms>} as JSON
4. Wrap with the recovery phrase

restore_from_backup:
1. Unwrap with the supplied phrase and validate the payload
   (nothing has been touched if any of this fails)
2. Delete every existing record of the user, one at a time
3. Re-encrypt each restored secret for the restoring user and create it

Steps 2 and 3 run sequentially and are not transactional. If the store
fails part-way the error propagates and the vault is left as far as it
got; the caller has to reconcile by hand.
"""
import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from cryptic_chest.app.core.config import settings
from cryptic_chest.app.core.exceptions import FormatError
from cryptic_chest.app.models.password import Password
from cryptic_chest.app.schemas.backup import BackupPayload, BackupRecord
from cryptic_chest.app.security.encryption import decrypt, derive_user_key, encrypt
from cryptic_chest.app.security.recovery import decrypt_backup_data, encrypt_backup_data
from cryptic_chest.app.services.passwords import PasswordStore

logger = logging.getLogger(__name__)


def to_epoch_ms(value: Optional[datetime]) -> Optional[int]:
    if value is None:
        return None
    # SQLite hands back naive datetimes; they are stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def backup_filename(today: Optional[date] = None) -> str:
    """Download name for a backup file, e.g. cryptic-chest-backup-2024-05-01.json"""
    today = today or datetime.now(timezone.utc).date()
    return f"{settings.BACKUP_FILE_PREFIX}-backup-{today.isoformat()}.json"


def parse_backup_records(data: str) -> List[BackupRecord]:
    """
    Parse and validate the JSON text of a backup payload.

    Raises:
        FormatError: not JSON, "passwords" is not a list, or a record
            is missing required fields
    """
    try:
        payload = json.loads(data)
    except ValueError as exc:
        raise FormatError("Backup payload is not valid JSON", operation="restore_from_backup") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("passwords"), list):
        raise FormatError("Invalid backup data", operation="restore_from_backup")

    try:
        return [BackupRecord.model_validate(entry) for entry in payload["passwords"]]
    except ValidationError as exc:
        raise FormatError(
            f"Invalid password record in backup: {exc.error_count()} error(s)",
            operation="restore_from_backup",
        ) from exc


class BackupService:
    def __init__(self, store: PasswordStore):
        self.store = store

    def _to_backup_record(self, item: Password, key: str) -> BackupRecord:
        return BackupRecord(
            id=item.id,
            user_id=item.user_id,
            name=item.name,
            url=item.url,
            username=item.username,
            password=decrypt(item.password, key),
            category=item.category,
            notes=item.notes,
            favorite=bool(item.favorite),
            created_at=to_epoch_ms(item.created_at),
            updated_at=to_epoch_ms(item.updated_at),
        )

    async def create_backup(self, user_id: str, recovery_phrase: str) -> str:
        """
        Export every credential of a user as a phrase-wrapped blob.

        Args:
            user_id: Owner whose records are exported
            recovery_phrase: Phrase the blob is wrapped with

        Returns:
            Backup blob text, ready to be written to a .json download

        Raises:
            KeyMismatchError, FormatError: a stored record cannot be decrypted
        """
        key = derive_user_key(user_id)
        items = await self.store.list_for_user(user_id)

        payload = BackupPayload(
            passwords=[self._to_backup_record(item, key) for item in items],
            timestamp=now_ms(),
        )
        data = json.dumps(payload.model_dump(by_alias=True))

        logger.info("Created backup of %d passwords for user %s", len(items), user_id)
        return encrypt_backup_data(data, recovery_phrase)

    async def restore_from_backup(self, blob: str, recovery_phrase: str, user_id: str) -> int:
        """
        Replace a user's credentials with the contents of a backup.

        Records are always restored into user_id, whatever owner the
        backup file names.

        Args:
            blob: Backup file contents
            recovery_phrase: Phrase the backup was created with
            user_id: Identity performing the restore

        Returns:
            Number of records created

        Raises:
            RecoveryPhraseError: phrase does not match (no records touched)
            FormatError: blob or payload malformed (no records touched)
        """
        records = parse_backup_records(decrypt_backup_data(blob, recovery_phrase))
        key = derive_user_key(user_id)

        existing = await self.store.list_for_user(user_id)
        for item in existing:
            await self.store.delete(item.id)
        logger.info("Cleared %d existing passwords for user %s before restore", len(existing), user_id)

        for record in records:
            data: Dict[str, Any] = record.model_dump(
                include={"name", "url", "username", "category", "notes", "favorite"}
            )
            data["password"] = encrypt(record.password, key)
            await self.store.create(user_id, data)

        logger.info("Restored %d passwords for user %s", len(records), user_id)
        return len(records)
