"""Redis-backed mutual exclusion for scheduled jobs."""

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

import redis
from redis.exceptions import LockError

from src.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

LOW_STOCK_LOCK_NAME = "inventory:low-stock:run"

_sync_redis: redis.Redis | None = None


class RunInProgressError(Exception):
    """Raised when another run already holds the job lock."""


def get_sync_redis() -> redis.Redis:
    """Get the shared synchronous Redis client."""
    global _sync_redis
    if _sync_redis is None:
        _sync_redis = redis.from_url(settings.redis_url)
    return _sync_redis


@contextmanager
def job_lock(name: str, timeout: int) -> Iterator[None]:
    """Hold a non-blocking Redis lock for the duration of the block.

    The lock expires after ``timeout`` seconds so a crashed worker cannot wedge
    the job forever.

    Raises:
        RunInProgressError: if the lock is already held
    """
    lock = get_sync_redis().lock(name, timeout=timeout)
    if not lock.acquire(blocking=False):
        raise RunInProgressError(f"Job lock {name} is held by another run")

    try:
        yield
    finally:
        try:
            lock.release()
        except LockError:
            # Expired before we finished; another run may already own it.
            logger.warning(f"Job lock {name} expired before release")


def low_stock_run_lock() -> AbstractContextManager[None]:
    """Lock guarding the low-stock evaluator."""
    return job_lock(LOW_STOCK_LOCK_NAME, settings.low_stock_lock_timeout_seconds)
