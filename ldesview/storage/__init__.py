"""
Storage backends for stream views.

The adapter is selected based on the STORAGE_ADAPTER configuration setting.
"""
import structlog
from .base import (
    BucketSource,
    EventSource,
    FragmentationDirectory,
    StorageAdapter,
    StreamDirectory,
)
from .memory import InMemoryStorage
from .redis_store import RedisStorage
from .seed import load_seed, load_seed_file
from ..config import Settings

log = structlog.get_logger()


def create_storage(settings: Settings) -> StorageAdapter:
    """
    Create the storage adapter based on configuration.

    Returns:
        StorageAdapter instance based on STORAGE_ADAPTER setting
    """
    if settings.STORAGE_ADAPTER == "redis":
        if not settings.REDIS_URL:
            log.warning(
                "adapter.fallback",
                requested="redis",
                actual="memory",
                reason="REDIS_URL not configured"
            )
        else:
            log.info("adapter.selected", type="redis", url=str(settings.REDIS_URL))
            return RedisStorage(
                redis_url=str(settings.REDIS_URL),
                key_prefix=settings.REDIS_KEY_PREFIX,
                batch_size=settings.REDIS_BATCH_SIZE,
            )

    log.info("adapter.selected", type="memory")
    storage = InMemoryStorage()
    if settings.SEED_FILE:
        load_seed_file(storage, settings.SEED_FILE)
    return storage


__all__ = [
    "BucketSource",
    "EventSource",
    "FragmentationDirectory",
    "InMemoryStorage",
    "RedisStorage",
    "StorageAdapter",
    "StreamDirectory",
    "create_storage",
    "load_seed",
    "load_seed_file",
]
