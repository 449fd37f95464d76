"""Agency Portal — Bulk Campaign Purge.

Deletes every campaign of every client, one page per transaction, so the
collection never has to be loaded at once and no transaction exceeds the
store's per-batch write limit.
"""

import asyncio
import math

from sqlalchemy import func
from sqlmodel import Session, select

from app.config import settings
from app.core.errors import PurgeInterrupted
from app.core.logging import get_logger
from app.models.campaign_models import Campaign, PurgeResult

logger = get_logger("sync.purge")

STORE_BATCH_LIMIT = 500


async def purge_campaigns(
    session: Session,
    batch_size: int | None = None,
    pause_seconds: float | None = None,
) -> PurgeResult:
    """Delete all campaigns in bounded batches.

    The loop stops on the first page shorter than `batch_size`. It is also
    capped at ceil(initial_count / batch_size) + 1 iterations, so rows
    inserted concurrently cannot keep it running.
    """
    batch_size = batch_size or settings.purge_batch_size
    if pause_seconds is None:
        pause_seconds = settings.purge_pause_seconds
    if not 0 < batch_size <= STORE_BATCH_LIMIT:
        raise ValueError(
            f"batch_size must be between 1 and {STORE_BATCH_LIMIT}, got {batch_size}"
        )

    initial = session.exec(select(func.count()).select_from(Campaign)).one()
    max_iterations = math.ceil(initial / batch_size) + 1
    result = PurgeResult()

    for _ in range(max_iterations):
        page = session.exec(select(Campaign).order_by(Campaign.id).limit(batch_size)).all()
        if not page:
            break
        try:
            for campaign in page:
                session.delete(campaign)
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(
                f"Purge batch failed after {result.deleted} deletions: {e}",
                extra={"count": result.deleted},
            )
            raise PurgeInterrupted(result.deleted, result.batches, e) from e

        result.deleted += len(page)
        result.batches += 1
        logger.info(
            f"Purge batch {result.batches}: {len(page)} deleted",
            extra={"count": result.deleted},
        )
        if len(page) < batch_size:
            break
        if pause_seconds:
            await asyncio.sleep(pause_seconds)

    logger.info(f"Purge complete: {result.deleted} campaigns in {result.batches} batches")
    return result
