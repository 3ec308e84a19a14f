"""Background task scheduler for the daily NAV refresh."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from fund_tracker.config import NAV_REFRESH_HOUR, NAV_REFRESH_MINUTE
from fund_tracker.models.database import async_session_factory
from fund_tracker.services.auth import UserSession, auth_service
from fund_tracker.services.kv_store import KeyValueStore
from fund_tracker.services.portfolio import PortfolioService
from fund_tracker.services.user_data import UserDataService

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def refresh_all_fund_navs(store: KeyValueStore) -> int:
    """Refresh NAV quotes for every holding with a scheme code, for all users."""
    service = PortfolioService(UserDataService(store))
    async with async_session_factory() as session:
        users = await auth_service.list_users(session)

    updated = 0
    for user in users:
        try:
            updated += await service.refresh_all_navs(UserSession.for_user(user))
        except Exception as e:
            logger.error(f"Failed to refresh NAVs for user {user.id}: {e}")
    logger.info(f"Refreshed NAV for {updated} holdings across {len(users)} users")
    return updated


def start_scheduler(store: KeyValueStore):
    """Start the background scheduler."""
    scheduler.add_job(
        refresh_all_fund_navs,
        trigger=CronTrigger(
            hour=NAV_REFRESH_HOUR, minute=NAV_REFRESH_MINUTE, day_of_week="mon-fri"
        ),
        args=[store],
        id="refresh_all_fund_navs",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, NAV refresh at {NAV_REFRESH_HOUR:02d}:{NAV_REFRESH_MINUTE:02d}"
    )


def stop_scheduler():
    """Stop the background scheduler."""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
