"""Background worker that purges expired idempotency records."""

import logging

from ..core.config import settings
from ..core.database import async_session_factory
from ..services.idempotency_service import IdempotencyService
from .base import BaseWorker

logger = logging.getLogger(__name__)


class IdempotencyCleanupWorker(BaseWorker):
    """Deletes stored booking responses whose replay window has passed."""

    def __init__(self, interval_seconds: int = settings.idempotency_cleanup_interval_seconds):
        super().__init__(name="IdempotencyCleanup", interval_seconds=interval_seconds)

    async def process(self) -> int:
        async with async_session_factory() as db:
            try:
                deleted = await IdempotencyService(db).cleanup_expired_records()
            except Exception:
                await db.rollback()
                raise

        if deleted:
            logger.info(
                "Expired idempotency records purged",
                extra={"deleted_count": deleted, "worker": self.name}
            )
        return deleted
