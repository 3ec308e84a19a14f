"""Key-value persistence strategies.

The portfolio layer only sees the KeyValueStore contract. Which backend is
active is decided once, in build_store():

    LocalKeyValueStore     kv_entry table via SQLAlchemy (SQLite by default)
    RemoteKeyValueStore    remote config store over HTTP
    FallbackKeyValueStore  remote first, local as the durable fallback
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fund_tracker.config import HTTP_TIMEOUT, REMOTE_STORE_TOKEN, REMOTE_STORE_URL
from fund_tracker.models.kv import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """get/set contract shared by every persistence backend."""

    @abstractmethod
    async def get(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def keys(self, prefix: str = "") -> list[str]:
        ...


class LocalKeyValueStore(KeyValueStore):
    """JSON values in the kv_entry table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, key: str, default: Any = None) -> Any:
        async with self._session_factory() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                return default
            try:
                return json.loads(entry.value)
            except ValueError as e:
                logger.error(f"Corrupt JSON stored under {key}: {e}")
                return default

    async def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        async with self._session_factory() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=payload))
            else:
                entry.value = payload
            await session.commit()

    async def delete(self, key: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            await session.commit()

    async def keys(self, prefix: str = "") -> list[str]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(KeyValueEntry.key).where(
                    KeyValueEntry.key.startswith(prefix, autoescape=True)
                )
            )
            return list(result.scalars().all())


class RemoteKeyValueStore(KeyValueStore):
    """Remote config store speaking the item/items REST shape.

    GET   {base}/item/{key}  -> value, 404 when missing
    GET   {base}/items       -> {key: value, ...}
    PATCH {base}/items       {"items": [{"operation": "upsert"|"delete", ...}]}

    Errors propagate; FallbackKeyValueStore decides what to swallow.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self._base_url}{path}"
        if self._client is not None:
            return await self._client.request(method, url, headers=self._headers, **kwargs)
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
            return await client.request(method, url, headers=self._headers, **kwargs)

    async def get(self, key: str, default: Any = None) -> Any:
        resp = await self._request("GET", f"/item/{key}")
        if resp.status_code == 404:
            return default
        resp.raise_for_status()
        return resp.json()

    async def _patch(self, items: list[dict[str, Any]]) -> None:
        resp = await self._request("PATCH", "/items", json={"items": items})
        resp.raise_for_status()

    async def set(self, key: str, value: Any) -> None:
        await self._patch([{"operation": "upsert", "key": key, "value": value}])

    async def delete(self, key: str) -> None:
        await self._patch([{"operation": "delete", "key": key}])

    async def keys(self, prefix: str = "") -> list[str]:
        resp = await self._request("GET", "/items")
        resp.raise_for_status()
        return [k for k in resp.json() if k.startswith(prefix)]


class FallbackKeyValueStore(KeyValueStore):
    """Try `primary` first, always keep `fallback` in sync for offline use.

    A key whose primary write or delete failed is read from `fallback` until
    the next successful primary write, so a stale primary copy never shadows
    the newer local one.
    """

    def __init__(self, primary: KeyValueStore, fallback: KeyValueStore):
        self.primary = primary
        self.fallback = fallback
        self._stale_keys: set[str] = set()

    async def get(self, key: str, default: Any = None) -> Any:
        if key in self._stale_keys:
            return await self.fallback.get(key, default)
        try:
            value = await self.primary.get(key)
            if value is not None:
                return value
        except Exception as e:
            logger.error(f"Primary store read failed for {key}, using fallback: {e}")
        return await self.fallback.get(key, default)

    async def set(self, key: str, value: Any) -> None:
        try:
            await self.primary.set(key, value)
            self._stale_keys.discard(key)
        except Exception as e:
            logger.error(f"Primary store write failed for {key}: {e}")
            self._stale_keys.add(key)
        await self.fallback.set(key, value)

    async def delete(self, key: str) -> None:
        try:
            await self.primary.delete(key)
            self._stale_keys.discard(key)
        except Exception as e:
            logger.error(f"Primary store delete failed for {key}: {e}")
            self._stale_keys.add(key)
        await self.fallback.delete(key)

    async def keys(self, prefix: str = "") -> list[str]:
        found = set(await self.fallback.keys(prefix))
        try:
            found.update(
                k for k in await self.primary.keys(prefix) if k not in self._stale_keys
            )
        except Exception as e:
            logger.error(f"Primary store key listing failed: {e}")
        return sorted(found)


def build_store(session_factory: async_sessionmaker[AsyncSession]) -> KeyValueStore:
    """Local store, fronted by the remote store when REMOTE_STORE_URL is set."""
    local = LocalKeyValueStore(session_factory)
    if not REMOTE_STORE_URL:
        return local
    logger.info(f"Using remote key-value store at {REMOTE_STORE_URL}")
    return FallbackKeyValueStore(
        RemoteKeyValueStore(REMOTE_STORE_URL, REMOTE_STORE_TOKEN), local
    )
