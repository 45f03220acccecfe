"""Stream name and fragmentation resolution."""
import structlog
from ..errors import InvalidOrDisabledFragmentation, InvalidStreamName
from ..models import EventStream, Fragmentation
from ..storage.base import FragmentationDirectory, StreamDirectory

log = structlog.get_logger()


class NameResolver:
    """Maps requested stream names to streams and their canonical names."""

    def __init__(self, streams: StreamDirectory):
        self._streams = streams

    async def resolve(self, name: str) -> EventStream:
        """
        Resolve a requested name, aliases included.

        Raises:
            InvalidStreamName: no stream is known under ``name``
        """
        stream = await self._streams.resolve_stream_by_name(name)
        if stream is None:
            log.info("stream.unknown", stream=name)
            raise InvalidStreamName(name)
        return stream

    async def canonical(self, stream: EventStream) -> EventStream:
        """
        Return the stream under its current canonical name.

        Raises:
            InvalidStreamName: the stream's identity no longer resolves
        """
        canonical = await self._streams.resolve_stream_by_identity(stream.source_uri)
        if canonical is None:
            log.warning("stream.orphaned_alias", stream=stream.name, source_uri=stream.source_uri)
            raise InvalidStreamName(stream.name)
        return canonical


class FragmentationGate:
    """Admits only fragmentations that exist and are enabled."""

    def __init__(self, fragmentations: FragmentationDirectory):
        self._fragmentations = fragmentations

    async def resolve(self, stream: EventStream, name: str) -> Fragmentation:
        """
        Raises:
            InvalidOrDisabledFragmentation: unknown or disabled, indistinguishably
        """
        fragmentation = await self._fragmentations.resolve_fragmentation(stream.source_uri, name)
        if fragmentation is None or not fragmentation.enabled:
            log.info(
                "fragmentation.rejected",
                stream=stream.name,
                fragmentation=name,
                exists=fragmentation is not None,
            )
            raise InvalidOrDisabledFragmentation(stream.name, name)
        return fragmentation
