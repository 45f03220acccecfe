"""Assembly of the hypermedia documents."""
from typing import Any, Iterable
from .jsonld import from_statements
from .relations import Relation
from ..models import Event
from ..vocab import TREE_MEMBER, TREE_RELATION, TREE_VIEW


class ViewAssembler:
    """Composes view documents from resolved addresses, events and relations."""

    def __init__(self, collection_address: str, view_address: str):
        self.collection_address = collection_address
        self.view_address = view_address

    def content_view(self, events: Iterable[Event], relations: list[Relation]) -> dict[str, Any]:
        """A stream or bucket page: members, payload and relations."""
        events = list(events)
        members: list[dict[str, str]] = []
        seen: set[str] = set()
        for event in events:
            if event.id not in seen:
                seen.add(event.id)
                members.append({"@id": event.id})

        payload = from_statements(st for event in events for st in event.data)
        collection = {
            "@id": self.collection_address,
            TREE_VIEW: self.view_address,
            TREE_MEMBER: members,
        }
        return self._document(relations, [collection, *payload])

    def listing_view(self, relations: list[Relation]) -> dict[str, Any]:
        """A fragmentation view: root-bucket relations only."""
        collection = {
            "@id": self.collection_address,
            TREE_VIEW: self.view_address,
        }
        return self._document(relations, [collection])

    def _document(self, relations: list[Relation], included: list[dict[str, Any]]) -> dict[str, Any]:
        return {
            "@id": self.view_address,
            TREE_RELATION: [r.to_jsonld() for r in relations],
            "@included": included,
        }
