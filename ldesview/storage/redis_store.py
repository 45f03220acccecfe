"""Redis storage adapter.

Layout (all keys under ``{prefix}:``):

- ``stream:name:{name}``       JSON stream record, one per name or alias
- ``stream:id:{source}``       canonical name of a source
- ``fragmentations:{source}``  hash of fragmentation name -> JSON record
- ``events:{source}``          sorted set of JSON events scored by epoch microseconds
- ``bucket:{source}:{frag}:{value}``  sorted set of the bucket's events
- ``buckets:{source}:{frag}``  hash of bucket value -> JSON bucket
"""
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Iterable
import structlog
import orjson
from redis.asyncio import Redis
from redis.exceptions import RedisError
from .base import StorageAdapter
from ..models import Bucket, Event, EventStream, Fragmentation
from ..config import get_settings

log = structlog.get_logger()

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def timestamp_score(ts: datetime) -> int:
    """Exact epoch microseconds, used as sorted set score."""
    return (ts.astimezone(timezone.utc) - EPOCH) // timedelta(microseconds=1)


class RedisStorage(StorageAdapter):
    """Redis implementation of the storage interfaces.

    Event reads page through sorted sets ``batch_size`` entries at a
    time, so a consumer that stops early never loads the rest.
    """

    def __init__(
        self,
        redis_url: str | None = None,
        key_prefix: str | None = None,
        batch_size: int | None = None,
    ):
        """
        Initialize Redis storage adapter.

        Args:
            redis_url: Redis connection URL (defaults to settings.REDIS_URL)
            key_prefix: Namespace for all keys (defaults to settings.REDIS_KEY_PREFIX)
            batch_size: Entries fetched per round trip (defaults to settings.REDIS_BATCH_SIZE)
        """
        settings = get_settings()
        self.redis_url = redis_url or str(settings.REDIS_URL)
        self.key_prefix = key_prefix or settings.REDIS_KEY_PREFIX
        self.batch_size = batch_size or settings.REDIS_BATCH_SIZE
        self._client: Redis | None = None

    def _get_client(self) -> Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = Redis.from_url(
                self.redis_url,
                decode_responses=False,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
        return self._client

    def _key(self, *parts: str) -> str:
        return ":".join((self.key_prefix, *parts))

    async def resolve_stream_by_name(self, name: str) -> EventStream | None:
        raw = await self._get_client().get(self._key("stream", "name", name))
        if raw is None:
            return None
        return EventStream(**orjson.loads(raw))

    async def resolve_stream_by_identity(self, source_uri: str) -> EventStream | None:
        name = await self._get_client().get(self._key("stream", "id", source_uri))
        if name is None:
            return None
        return await self.resolve_stream_by_name(name.decode())

    async def resolve_fragmentation(self, source_uri: str, name: str) -> Fragmentation | None:
        raw = await self._get_client().hget(self._key("fragmentations", source_uri), name)
        if raw is None:
            return None
        return Fragmentation(**orjson.loads(raw))

    def stream_from(self, source_uri: str, since: datetime | None = None) -> AsyncIterator[Event]:
        return self._scan_events(self._key("events", source_uri), since)

    def stream_from_bucket(
        self,
        source_uri: str,
        fragmentation_name: str,
        bucket: str,
        since: datetime | None = None,
    ) -> AsyncIterator[Event]:
        return self._scan_events(self._key("bucket", source_uri, fragmentation_name, bucket), since)

    def root_buckets(self, source_uri: str, fragmentation_name: str) -> AsyncIterator[Bucket]:
        return self._scan_buckets(source_uri, fragmentation_name, parent=None)

    def child_buckets(
        self, source_uri: str, fragmentation_name: str, bucket: str
    ) -> AsyncIterator[Bucket]:
        return self._scan_buckets(source_uri, fragmentation_name, parent=bucket)

    async def _scan_events(self, key: str, since: datetime | None) -> AsyncIterator[Event]:
        client = self._get_client()
        low = timestamp_score(since) if since else "-inf"
        last = None
        while True:
            try:
                if last is None:
                    batch = await client.zrangebyscore(key, low, "+inf", start=0, num=self.batch_size)
                else:
                    # Resume after the last member seen; its rank moves when
                    # events land before it between batches.
                    rank = await client.zrank(key, last)
                    if rank is None:
                        return
                    batch = await client.zrange(key, rank + 1, rank + self.batch_size)
            except RedisError as e:
                log.error("redis.scan_failed", key=key, error=str(e))
                raise
            for raw in batch:
                yield Event(**orjson.loads(raw))
            if len(batch) < self.batch_size:
                return
            last = batch[-1]

    async def _scan_buckets(
        self, source_uri: str, fragmentation_name: str, parent: str | None
    ) -> AsyncIterator[Bucket]:
        entries = await self._get_client().hgetall(self._key("buckets", source_uri, fragmentation_name))
        buckets = (Bucket(**orjson.loads(raw)) for raw in entries.values())
        for bucket in sorted((b for b in buckets if b.parent == parent), key=lambda b: b.value):
            yield bucket

    async def save_stream(self, stream: EventStream) -> EventStream:
        """Register a stream under its name and make that name canonical."""
        client = self._get_client()
        await client.set(self._key("stream", "name", stream.name), orjson.dumps(stream.model_dump()))
        await client.set(self._key("stream", "id", stream.source_uri), stream.name)
        log.info("stream.registered", stream=stream.name, source_uri=stream.source_uri, adapter="redis")
        return stream

    async def save_fragmentation(self, fragmentation: Fragmentation) -> Fragmentation:
        await self._get_client().hset(
            self._key("fragmentations", fragmentation.source_uri),
            fragmentation.name,
            orjson.dumps(fragmentation.model_dump(mode="json")),
        )
        return fragmentation

    async def save_bucket(self, source_uri: str, fragmentation_name: str, bucket: Bucket) -> Bucket:
        await self._get_client().hset(
            self._key("buckets", source_uri, fragmentation_name),
            bucket.value,
            orjson.dumps(bucket.model_dump()),
        )
        return bucket

    async def append_event(self, event: Event, buckets: Iterable[tuple[str, str]] = ()) -> Event:
        """
        Store an event, optionally assigning it to buckets.

        Args:
            event: The event to store
            buckets: (fragmentation name, bucket value) pairs
        """
        client = self._get_client()
        member = orjson.dumps(event.model_dump(mode="json"))
        score = timestamp_score(event.timestamp)
        await client.zadd(self._key("events", event.source_uri), {member: score})
        for fragmentation_name, value in buckets:
            await client.zadd(self._key("bucket", event.source_uri, fragmentation_name, value), {member: score})
        return event

    async def health_check(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if Redis is accessible, False otherwise
        """
        try:
            return bool(await self._get_client().ping())
        except Exception as e:
            log.warning("redis.health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
