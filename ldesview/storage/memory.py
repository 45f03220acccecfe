"""In-memory storage adapter."""
from bisect import bisect_left, insort
from datetime import datetime
from typing import AsyncIterator, Iterable
import structlog
from .base import StorageAdapter
from ..models import Bucket, Event, EventStream, Fragmentation

log = structlog.get_logger()


def _by_timestamp(event: Event) -> datetime:
    return event.timestamp


class InMemoryStorage(StorageAdapter):
    """
    In-memory implementation of the storage interfaces.

    Writes are synchronous helpers for development and tests; bucket
    assignment is supplied by the caller.
    """

    def __init__(self):
        self._streams: dict[str, EventStream] = {}
        self._canonical: dict[str, str] = {}
        self._fragmentations: dict[tuple[str, str], Fragmentation] = {}
        self._events: dict[str, list[Event]] = {}
        self._bucket_events: dict[tuple[str, str, str], list[Event]] = {}
        self._buckets: dict[tuple[str, str], dict[str, Bucket]] = {}

    def add_stream(self, stream: EventStream) -> EventStream:
        """Register a stream; its name becomes the canonical one."""
        self._streams[stream.name] = stream
        self._canonical[stream.source_uri] = stream.name
        log.info("stream.registered", stream=stream.name, source_uri=stream.source_uri, adapter="memory")
        return stream

    def rename_stream(self, source_uri: str, new_name: str) -> EventStream:
        """Give a stream a new canonical name, keeping the old one as alias."""
        current = self._streams[self._canonical[source_uri]]
        renamed = current.model_copy(update={"name": new_name})
        self._streams[new_name] = renamed
        self._canonical[source_uri] = new_name
        log.info("stream.renamed", source_uri=source_uri, old=current.name, new=new_name, adapter="memory")
        return renamed

    def add_fragmentation(self, fragmentation: Fragmentation) -> Fragmentation:
        self._fragmentations[(fragmentation.source_uri, fragmentation.name)] = fragmentation
        return fragmentation

    def add_bucket(self, source_uri: str, fragmentation_name: str, bucket: Bucket) -> Bucket:
        self._buckets.setdefault((source_uri, fragmentation_name), {})[bucket.value] = bucket
        return bucket

    def append_event(self, event: Event, buckets: Iterable[tuple[str, str]] = ()) -> Event:
        """
        Store an event, optionally assigning it to buckets.

        Args:
            event: The event to store
            buckets: (fragmentation name, bucket value) pairs
        """
        insort(self._events.setdefault(event.source_uri, []), event, key=_by_timestamp)
        for fragmentation_name, value in buckets:
            key = (event.source_uri, fragmentation_name, value)
            insort(self._bucket_events.setdefault(key, []), event, key=_by_timestamp)
        return event

    async def resolve_stream_by_name(self, name: str) -> EventStream | None:
        return self._streams.get(name)

    async def resolve_stream_by_identity(self, source_uri: str) -> EventStream | None:
        name = self._canonical.get(source_uri)
        if name is None:
            return None
        return self._streams.get(name)

    async def resolve_fragmentation(self, source_uri: str, name: str) -> Fragmentation | None:
        return self._fragmentations.get((source_uri, name))

    async def stream_from(self, source_uri: str, since: datetime | None = None) -> AsyncIterator[Event]:
        for event in self._scan(self._events.get(source_uri, []), since):
            yield event

    async def stream_from_bucket(
        self,
        source_uri: str,
        fragmentation_name: str,
        bucket: str,
        since: datetime | None = None,
    ) -> AsyncIterator[Event]:
        events = self._bucket_events.get((source_uri, fragmentation_name, bucket), [])
        for event in self._scan(events, since):
            yield event

    async def root_buckets(self, source_uri: str, fragmentation_name: str) -> AsyncIterator[Bucket]:
        for bucket in self._sorted_buckets(source_uri, fragmentation_name, parent=None):
            yield bucket

    async def child_buckets(
        self, source_uri: str, fragmentation_name: str, bucket: str
    ) -> AsyncIterator[Bucket]:
        for child in self._sorted_buckets(source_uri, fragmentation_name, parent=bucket):
            yield child

    async def health_check(self) -> bool:
        """In-memory adapter is always healthy."""
        return True

    @staticmethod
    def _scan(events: list[Event], since: datetime | None) -> Iterable[Event]:
        start = bisect_left(events, since, key=_by_timestamp) if since else 0
        return events[start:]

    def _sorted_buckets(self, source_uri: str, fragmentation_name: str, parent: str | None) -> list[Bucket]:
        buckets = self._buckets.get((source_uri, fragmentation_name), {})
        return sorted(
            (b for b in buckets.values() if b.parent == parent),
            key=lambda b: b.value,
        )
