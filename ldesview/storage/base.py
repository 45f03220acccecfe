"""Read interfaces over the stream storage backends."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncIterator
from ..models import Bucket, Event, EventStream, Fragmentation


class StreamDirectory(ABC):
    """Looks streams up by name or by canonical identity."""

    @abstractmethod
    async def resolve_stream_by_name(self, name: str) -> EventStream | None:
        """
        Find the stream registered under ``name``.

        Aliases resolve too: the returned entity carries the requested
        name and the stream's source identifier.
        """
        pass

    @abstractmethod
    async def resolve_stream_by_identity(self, source_uri: str) -> EventStream | None:
        """Return the stream under its current canonical name."""
        pass


class FragmentationDirectory(ABC):
    """Looks fragmentations up within a stream."""

    @abstractmethod
    async def resolve_fragmentation(self, source_uri: str, name: str) -> Fragmentation | None:
        """Return the fragmentation, whatever its status, or None."""
        pass


class EventSource(ABC):
    """
    Lazy, timestamp-ascending event retrieval.

    Implementations return async generators so consumers can stop
    early and ``aclose()`` them without draining the stream.
    """

    @abstractmethod
    def stream_from(self, source_uri: str, since: datetime | None = None) -> AsyncIterator[Event]:
        """Events of a stream with ``timestamp >= since``."""
        pass

    @abstractmethod
    def stream_from_bucket(
        self,
        source_uri: str,
        fragmentation_name: str,
        bucket: str,
        since: datetime | None = None,
    ) -> AsyncIterator[Event]:
        """Events assigned to one bucket with ``timestamp >= since``."""
        pass


class BucketSource(ABC):
    """Lazy retrieval of fragmentation buckets, ordered by value."""

    @abstractmethod
    def root_buckets(self, source_uri: str, fragmentation_name: str) -> AsyncIterator[Bucket]:
        pass

    @abstractmethod
    def child_buckets(
        self, source_uri: str, fragmentation_name: str, bucket: str
    ) -> AsyncIterator[Bucket]:
        pass


class StorageAdapter(StreamDirectory, FragmentationDirectory, EventSource, BucketSource):
    """A backend providing every read interface."""

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the backend is healthy and accessible.

        Returns:
            True if backend is healthy, False otherwise
        """
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
