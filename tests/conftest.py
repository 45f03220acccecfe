"""Shared fixtures: a small in-memory stream and a client over it."""
from datetime import datetime, timezone
import pytest
from fastapi.testclient import TestClient
from ldesview.config import Settings
from ldesview.main import create_app
from ldesview.models import (
    Bucket,
    EntityStatus,
    Event,
    EventStream,
    Fragmentation,
    FragmentationKind,
    Statement,
    Term,
)
from ldesview.storage import InMemoryStorage
from ldesview.urls import format_timestamp
from ldesview.vocab import XSD_DATETIME

SOURCE = "https://example.org/sources/temps"
RESULT_TIME = "http://www.w3.org/ns/sosa/resultTime"
LOCATION = "https://example.org/ns#location"


def ts(hour: int = 10, minute: int = 0, second: int = 0, microsecond: int = 0) -> datetime:
    return datetime(2020, 1, 1, hour, minute, second, microsecond, tzinfo=timezone.utc)


def make_event(index: int, timestamp: datetime, source_uri: str = SOURCE) -> Event:
    subject = f"https://example.org/observations/{index}"
    return Event(
        id=subject,
        source_uri=source_uri,
        timestamp=timestamp,
        data=[
            Statement(
                subject=Term(value=subject),
                predicate=Term(value=RESULT_TIME),
                object=Term(value=format_timestamp(timestamp), kind="literal", datatype=XSD_DATETIME),
            )
        ],
    )


async def async_iter(items):
    for item in items:
        yield item


@pytest.fixture
def storage() -> InMemoryStorage:
    store = InMemoryStorage()
    store.add_stream(EventStream(source_uri=SOURCE, name="temps", time_property=[RESULT_TIME]))
    store.add_fragmentation(
        Fragmentation(
            source_uri=SOURCE,
            name="byLocation",
            kind=FragmentationKind.SUBSTRING,
            path=[LOCATION],
        )
    )
    store.add_fragmentation(
        Fragmentation(
            source_uri=SOURCE,
            name="byYear",
            kind=FragmentationKind.RANGE,
            status=EntityStatus.DISABLED,
            path=[RESULT_TIME],
        )
    )
    store.add_bucket(SOURCE, "byLocation", Bucket(value="gh", count=3))
    store.add_bucket(SOURCE, "byLocation", Bucket(value="ab", count=2))
    store.add_bucket(SOURCE, "byLocation", Bucket(value="ghe", count=1, parent="gh"))
    return store


def make_client(storage: InMemoryStorage, **overrides) -> TestClient:
    settings = Settings(**overrides)
    return TestClient(create_app(settings, storage=storage), follow_redirects=False)


@pytest.fixture
def client(storage) -> TestClient:
    return make_client(storage)
