"""Shared FastAPI dependencies: key-value store, session and services."""

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fund_tracker.models.database import async_session_factory, get_db
from fund_tracker.services.auth import UserSession, auth_service
from fund_tracker.services.kv_store import KeyValueStore, build_store
from fund_tracker.services.portfolio import PortfolioService
from fund_tracker.services.user_data import UserDataService

_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    global _store
    if _store is None:
        _store = build_store(async_session_factory)
    return _store


async def get_user_session(
    x_user_id: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> UserSession:
    """Resolve the X-User-Id header to the signed-in user."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="User not logged in")
    user = await auth_service.get_user(db, x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not logged in")
    return UserSession.for_user(user)


def get_portfolio_service(store: KeyValueStore = Depends(get_store)) -> PortfolioService:
    return PortfolioService(UserDataService(store))
