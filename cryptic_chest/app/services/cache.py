# cryptic_chest/app/services/cache.py
"""
In-memory cache of decrypted credential lists.

One instance per application (created in the lifespan hook and stored
on app.state). Entries are dropped on every mutation of a user's
records and on logout, so plaintext only lives as long as the session
keeps reading it.

Every invalidation bumps the user's version. A reader takes the version
before it queries the store and hands it back to set(); if the entry was
invalidated in between, the list it read is already stale and is not
stored.
"""
import logging
from typing import Dict, List, Optional, Tuple

from cryptic_chest.app.schemas.password import PasswordResponse

logger = logging.getLogger(__name__)

CacheVersion = Tuple[int, int]


class PasswordCache:
    def __init__(self) -> None:
        self._entries: Dict[str, List[PasswordResponse]] = {}
        self._versions: Dict[str, int] = {}
        # Bumped by clear(), which invalidates every user at once
        self._generation = 0

    def version(self, user_id: str) -> CacheVersion:
        return self._generation, self._versions.get(user_id, 0)

    def get(self, user_id: str) -> Optional[List[PasswordResponse]]:
        entries = self._entries.get(user_id)
        if entries is None:
            return None
        return list(entries)

    def set(
            self,
            user_id: str,
            passwords: List[PasswordResponse],
            version: Optional[CacheVersion] = None,
    ) -> bool:
        """
        Store a decrypted list for a user.

        Args:
            user_id: Owner of the list
            passwords: Decrypted records
            version: Value of version() taken before the list was read

        Returns:
            False if the entry was invalidated since version was taken
        """
        if version is not None and version != self.version(user_id):
            logger.debug("Discarded stale password list for user %s", user_id)
            return False
        self._entries[user_id] = list(passwords)
        return True

    def invalidate(self, user_id: str) -> None:
        self._versions[user_id] = self._versions.get(user_id, 0) + 1
        if self._entries.pop(user_id, None) is not None:
            logger.debug("Dropped cached passwords for user %s", user_id)

    def clear(self) -> None:
        self._generation += 1
        self._versions.clear()
        self._entries.clear()

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
