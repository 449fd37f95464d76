"""Agency Portal — Scheduler Jobs.

APScheduler nightly job that re-syncs every client with an ad account,
using the all-time window.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlmodel import Session, select

from app.config import settings
from app.core.errors import PortalError
from app.database import engine
from app.models.account_models import ClientAccount, UserRole
from app.models.campaign_models import DatePreset
from app.sync.pipeline import load_credentials, run_sync
from app.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def sync_all_clients(session: Session) -> int:
    """Sync each client with an ad account. Returns the number that succeeded."""
    try:
        credentials = load_credentials(session)
    except PortalError as e:
        logger.warning(f"Nightly sync skipped: {e}")
        return 0

    clients = session.exec(
        select(ClientAccount).where(
            ClientAccount.role == UserRole.CLIENT,
            ClientAccount.ad_account_id.is_not(None),  # type: ignore
        )
    ).all()

    client_ids = [client.id for client in clients]
    succeeded = 0
    for client_id in client_ids:
        try:
            await run_sync(session, client_id, credentials, DatePreset.MAXIMUM)
            succeeded += 1
        except Exception as e:
            session.rollback()
            logger.error(f"Nightly sync failed: {e}", extra={"client_id": client_id})
    logger.info(f"Nightly sync finished: {succeeded}/{len(client_ids)} clients")
    return succeeded


async def nightly_sync_job():
    logger.info("Scheduled nightly sync starting...")
    with Session(engine) as session:
        await sync_all_clients(session)


def start_scheduler():
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        nightly_sync_job,
        "cron",
        hour=settings.sync_hour,
        minute=0,
        id="nightly_sync",
        replace_existing=True,
        misfire_grace_time=3600,
    )
    scheduler.start()
    logger.info(f"Scheduler started. Nightly sync at {settings.sync_hour}:00 UTC")


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
