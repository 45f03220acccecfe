"""Navigation relations for fragmentation and continuation links."""
from contextlib import aclosing
from datetime import datetime
from typing import Any, AsyncIterator
from pydantic import BaseModel, ConfigDict
from ..models import Bucket, EventStream, Fragmentation, FragmentationKind
from ..urls import bucket_url, format_timestamp, with_since
from ..vocab import (
    EQUAL_TO_RELATION,
    GEOSPATIALLY_CONTAINS_RELATION,
    GREATER_OR_EQUAL_RELATION,
    PREFIX_RELATION,
    SUBSTRING_RELATION,
    TREE_NODE,
    TREE_PATH,
    TREE_REMAINING_ITEMS,
    TREE_VALUE,
    XSD_DATETIME,
)

_RELATION_TYPES: dict[FragmentationKind, str] = {
    FragmentationKind.SUBSTRING: SUBSTRING_RELATION,
    FragmentationKind.PREFIX: PREFIX_RELATION,
    FragmentationKind.EQUALITY: EQUAL_TO_RELATION,
    FragmentationKind.RANGE: GREATER_OR_EQUAL_RELATION,
    FragmentationKind.GEOSPATIAL: GEOSPATIALLY_CONTAINS_RELATION,
}


class RelationStrategy(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: FragmentationKind

    def relation_type(self) -> str:
        return _RELATION_TYPES[self.kind]


def strategy_for(fragmentation: Fragmentation) -> RelationStrategy:
    return RelationStrategy(kind=fragmentation.kind)


class Relation(BaseModel):
    """A typed edge from the current view to another view."""
    model_config = ConfigDict(frozen=True)

    type: str
    node: str
    path: tuple[str, ...]
    value: str
    value_type: str
    remaining_items: int | None = None

    def to_jsonld(self) -> dict[str, Any]:
        node: dict[str, Any] = {"@id": self.node}
        if self.remaining_items is not None:
            node[TREE_REMAINING_ITEMS] = self.remaining_items
        return {
            "@type": self.type,
            TREE_NODE: node,
            TREE_PATH: [{"@id": p} for p in self.path],
            TREE_VALUE: {"@value": self.value, "@type": self.value_type},
        }


class RelationBuilder:
    """Builds outbound relations for one view."""

    def __init__(self, base_url: str):
        self.base_url = base_url

    def bucket_relation(self, stream_name: str, fragmentation: Fragmentation, bucket: Bucket) -> Relation:
        return Relation(
            type=strategy_for(fragmentation).relation_type(),
            node=bucket_url(self.base_url, stream_name, fragmentation.name, bucket.value),
            path=tuple(fragmentation.path),
            value=bucket.value,
            value_type=bucket.data_type,
            remaining_items=bucket.count,
        )

    async def bucket_relations(
        self,
        stream_name: str,
        fragmentation: Fragmentation,
        buckets: AsyncIterator[Bucket],
    ) -> list[Relation]:
        """One relation per bucket, in source order."""
        relations = []
        async with aclosing(buckets) as source:
            async for bucket in source:
                relations.append(self.bucket_relation(stream_name, fragmentation, bucket))
        return relations

    @staticmethod
    def continuation_relation(view_address: str, stream: EventStream, cursor: datetime) -> Relation:
        """
        Link to the next page of ``view_address``.

        Args:
            view_address: The current view's address without query string
            stream: Stream whose time property orders the events
            cursor: Inclusive lower bound of the next page
        """
        since = format_timestamp(cursor)
        return Relation(
            type=GREATER_OR_EQUAL_RELATION,
            node=with_since(view_address, since),
            path=tuple(stream.time_property),
            value=since,
            value_type=XSD_DATETIME,
        )
