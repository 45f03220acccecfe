"""
Per-request view resolution.

Resolve name -> [redirect | continue] -> resolve fragmentation ->
[reject | continue] -> page events -> build relations -> assemble.
Every step is a single pass; typed errors propagate to the HTTP layer.
"""
from typing import Any
import structlog
from pydantic import BaseModel, ConfigDict
from .pager import EventPager, Page
from .relations import RelationBuilder
from .resolver import FragmentationGate, NameResolver
from .views import ViewAssembler
from ..models import EventStream
from ..storage.base import StorageAdapter
from ..urls import collection_url, parse_timestamp, view_url, with_since

log = structlog.get_logger()


class Redirect(BaseModel):
    """Permanent redirect to the canonically named address."""
    model_config = ConfigDict(frozen=True)

    location: str


class View(BaseModel):
    """A rendered view document."""
    model_config = ConfigDict(frozen=True)

    document: dict[str, Any]
    page: Page | None = None


class LdesViewService:
    """Resolves stream, fragmentation and bucket views against storage."""

    def __init__(self, storage: StorageAdapter, pager: EventPager | None = None, metrics=None):
        """
        Args:
            storage: Backend providing the directories and sources
            pager: Page size policy (defaults to 250 soft / 2000 hard)
            metrics: Optional Metrics instance for page and redirect counters
        """
        self._storage = storage
        self._names = NameResolver(storage)
        self._gate = FragmentationGate(storage)
        self._pager = pager or EventPager()
        self._metrics = metrics

    async def stream_view(self, base_url: str, name: str, since: str | None = None) -> Redirect | View:
        """Page through a whole stream."""
        resolved = await self._resolve_stream(base_url, name, since)
        if isinstance(resolved, Redirect):
            return resolved

        address = view_url(base_url, resolved.name)
        cursor = parse_timestamp(since) if since else None
        page = await self._pager.page(self._storage.stream_from(resolved.source_uri, cursor))
        relations = []
        if page.has_more:
            relations.append(RelationBuilder.continuation_relation(address, resolved, page.cursor))

        assembler = ViewAssembler(collection_url(base_url, resolved.name), with_since(address, since))
        self._record_page("stream", page)
        return View(document=assembler.content_view(page.events, relations), page=page)

    async def fragmentation_view(self, base_url: str, name: str, fragmentation_name: str) -> Redirect | View:
        """List the root buckets of a fragmentation."""
        resolved = await self._resolve_stream(base_url, name, None, fragmentation_name)
        if isinstance(resolved, Redirect):
            return resolved

        fragmentation = await self._gate.resolve(resolved, fragmentation_name)
        builder = RelationBuilder(base_url)
        relations = await builder.bucket_relations(
            resolved.name,
            fragmentation,
            self._storage.root_buckets(resolved.source_uri, fragmentation.name),
        )

        assembler = ViewAssembler(
            collection_url(base_url, resolved.name),
            view_url(base_url, resolved.name, fragmentation.name),
        )
        log.debug("view.listing", stream=resolved.name, fragmentation=fragmentation.name, buckets=len(relations))
        return View(document=assembler.listing_view(relations))

    async def bucket_view(
        self,
        base_url: str,
        name: str,
        fragmentation_name: str,
        bucket: str,
        since: str | None = None,
    ) -> Redirect | View:
        """Page through the events of one bucket."""
        resolved = await self._resolve_stream(base_url, name, since, fragmentation_name, bucket)
        if isinstance(resolved, Redirect):
            return resolved

        fragmentation = await self._gate.resolve(resolved, fragmentation_name)
        address = view_url(base_url, resolved.name, fragmentation.name, bucket)
        cursor = parse_timestamp(since) if since else None
        page = await self._pager.page(
            self._storage.stream_from_bucket(resolved.source_uri, fragmentation.name, bucket, cursor)
        )

        builder = RelationBuilder(base_url)
        relations = await builder.bucket_relations(
            resolved.name,
            fragmentation,
            self._storage.child_buckets(resolved.source_uri, fragmentation.name, bucket),
        )
        if page.has_more:
            relations.append(RelationBuilder.continuation_relation(address, resolved, page.cursor))

        assembler = ViewAssembler(collection_url(base_url, resolved.name), with_since(address, since))
        self._record_page("bucket", page)
        return View(document=assembler.content_view(page.events, relations), page=page)

    async def _resolve_stream(
        self,
        base_url: str,
        name: str,
        since: str | None,
        fragmentation_name: str | None = None,
        bucket: str | None = None,
    ) -> EventStream | Redirect:
        stream = await self._names.resolve(name)
        canonical = await self._names.canonical(stream)
        if canonical.name == name:
            return canonical

        location = with_since(view_url(base_url, canonical.name, fragmentation_name, bucket), since)
        view = "stream" if fragmentation_name is None else "fragmentation" if bucket is None else "bucket"
        log.info("view.redirect", requested=name, canonical=canonical.name, location=location)
        if self._metrics is not None:
            self._metrics.record_redirect(view)
        return Redirect(location=location)

    def _record_page(self, view: str, page: Page) -> None:
        log.info(
            "view.page",
            view=view,
            events=len(page.events),
            completion=page.completion.value,
        )
        if self._metrics is not None:
            self._metrics.record_page(view, page.completion.value, len(page.events))
