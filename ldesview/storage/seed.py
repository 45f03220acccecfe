"""Load a JSON fixture into the in-memory adapter.

The fixture holds four lists::

    {
      "streams": [{"source_uri": ..., "name": ..., "time_property": [...], "aliases": [...]}],
      "fragmentations": [{"source_uri": ..., "name": ..., "kind": ..., "path": [...], "status": ...}],
      "buckets": [{"source_uri": ..., "fragmentation": ..., "value": ..., "count": ..., "parent": ...}],
      "events": [{"id": ..., "source_uri": ..., "timestamp": ..., "data": [...], "buckets": [[frag, value]]}]
    }
"""
from pathlib import Path
import structlog
import orjson
from .memory import InMemoryStorage
from ..models import Bucket, Event, EventStream, Fragmentation

log = structlog.get_logger()


def load_seed(storage: InMemoryStorage, data: dict) -> InMemoryStorage:
    """Populate ``storage`` from an already-decoded fixture."""
    for entry in data.get("streams", []):
        entry = dict(entry)
        aliases = entry.pop("aliases", [])
        for alias in aliases:
            storage.add_stream(EventStream(**{**entry, "name": alias}))
        storage.add_stream(EventStream(**entry))

    for entry in data.get("fragmentations", []):
        storage.add_fragmentation(Fragmentation(**entry))

    for entry in data.get("buckets", []):
        entry = dict(entry)
        source_uri = entry.pop("source_uri")
        fragmentation_name = entry.pop("fragmentation")
        storage.add_bucket(source_uri, fragmentation_name, Bucket(**entry))

    events = data.get("events", [])
    for entry in events:
        entry = dict(entry)
        assignments = [tuple(pair) for pair in entry.pop("buckets", [])]
        storage.append_event(Event(**entry), buckets=assignments)

    log.info(
        "storage.seeded",
        streams=len(data.get("streams", [])),
        fragmentations=len(data.get("fragmentations", [])),
        events=len(events),
    )
    return storage


def load_seed_file(storage: InMemoryStorage, path: str | Path) -> InMemoryStorage:
    """Populate ``storage`` from a JSON fixture on disk."""
    return load_seed(storage, orjson.loads(Path(path).read_bytes()))
