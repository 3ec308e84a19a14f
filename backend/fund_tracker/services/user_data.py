"""Per-user data access on top of a key-value store."""

import logging
from typing import Any

from fund_tracker.services.auth import UserSession
from fund_tracker.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class UserDataService:
    """Namespaces every key under the signed-in user's prefix."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get_data(self, user: UserSession, key: str, default: Any = None) -> Any:
        return await self.store.get(user.storage_key(key), default)

    async def save_data(self, user: UserSession, key: str, value: Any) -> None:
        await self.store.set(user.storage_key(key), value)

    async def clear_user_data(self, user: UserSession) -> int:
        """Delete every key belonging to `user`. Returns how many were removed."""
        keys = await self.store.keys(user.key_prefix)
        for key in keys:
            await self.store.delete(key)
        logger.info(f"Cleared {len(keys)} keys for user {user.user_id}")
        return len(keys)
