"""Background workers for the agency booking service."""

from .idempotency_cleanup_worker import IdempotencyCleanupWorker

__all__ = ["IdempotencyCleanupWorker"]
