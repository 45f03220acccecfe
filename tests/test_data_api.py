"""HTTP tests for stream, fragmentation and bucket views."""
from urllib.parse import parse_qs, urlsplit
from conftest import LOCATION, RESULT_TIME, SOURCE, make_client, make_event, ts
from ldesview.vocab import (
    GREATER_OR_EQUAL_RELATION,
    SUBSTRING_RELATION,
    TREE_MEMBER,
    TREE_NODE,
    TREE_PATH,
    TREE_RELATION,
    TREE_REMAINING_ITEMS,
    TREE_VALUE,
    TREE_VIEW,
    XSD_DATETIME,
)

BASE = "http://testserver"


def members(doc: dict) -> list[str]:
    return [m["@id"] for m in doc["@included"][0][TREE_MEMBER]]


def continuations(doc: dict) -> list[dict]:
    return [r for r in doc[TREE_RELATION] if r["@type"] == GREATER_OR_EQUAL_RELATION]


def since_of(relation: dict) -> str:
    return parse_qs(urlsplit(relation[TREE_NODE]["@id"]).query)["since"][0]


class TestStreamView:
    """Stream-level pagination."""

    def test_small_stream_is_exhausted(self, storage, client):
        for i in range(3):
            storage.append_event(make_event(i, ts(minute=i)))

        r = client.get("/data/temps")

        assert r.status_code == 200
        assert r.headers["content-type"] == "application/ld+json; charset=utf-8"
        doc = r.json()
        assert doc["@id"] == f"{BASE}/data/temps"
        assert doc[TREE_RELATION] == []
        collection = doc["@included"][0]
        assert collection["@id"] == f"{BASE}/data/temps"
        assert collection[TREE_VIEW] == f"{BASE}/data/temps"
        assert members(doc) == [f"https://example.org/observations/{i}" for i in range(3)]
        assert {node["@id"] for node in doc["@included"][1:]} == set(members(doc))

    def test_full_page_has_one_continuation(self, storage):
        for i in range(10):
            storage.append_event(make_event(i, ts(minute=i)))
        client = make_client(storage, PAGE_SOFT_LIMIT=4, PAGE_HARD_LIMIT=8)

        doc = client.get("/data/temps").json()

        assert len(members(doc)) == 4
        [relation] = continuations(doc)
        assert relation[TREE_VALUE] == {"@value": "2020-01-01T10:04:00.000Z", "@type": XSD_DATETIME}
        assert relation[TREE_PATH] == [{"@id": RESULT_TIME}]
        assert relation[TREE_NODE]["@id"].startswith(f"{BASE}/data/temps?since=")
        assert since_of(relation) == "2020-01-01T10:04:00.000Z"

    def test_walking_pages_delivers_each_event_once(self, storage):
        minutes = [0, 1, 1, 1, 2, 3, 3, 4, 5, 5, 5, 5, 6]
        for i, minute in enumerate(minutes):
            storage.append_event(make_event(i, ts(minute=minute)))
        client = make_client(storage, PAGE_SOFT_LIMIT=3, PAGE_HARD_LIMIT=10)

        seen = []
        url = "/data/temps"
        cursor = None
        while url:
            doc = client.get(url).json()
            page = members(doc)
            stamps = [int(m.rsplit("/", 1)[1]) for m in page]
            if cursor is not None:
                assert all(ts(minute=minutes[i]) >= cursor for i in stamps)
            seen.extend(page)
            nxt = continuations(doc)
            url = None
            if nxt:
                since = since_of(nxt[0])
                cursor = ts(minute=int(since[14:16]))
                url = f"/data/temps?since={since}"

        assert len(seen) == len(minutes)
        assert len(set(seen)) == len(minutes)

    def test_tied_run_over_soft_limit(self, storage, client):
        storage.append_event(make_event(0, ts(minute=0)))
        for i in range(1, 301):
            storage.append_event(make_event(i, ts(minute=1)))

        doc = client.get("/data/temps").json()

        assert len(members(doc)) == 301
        assert continuations(doc) == []

    def test_tied_run_over_soft_limit_with_more(self, storage, client):
        storage.append_event(make_event(0, ts(minute=0)))
        for i in range(1, 301):
            storage.append_event(make_event(i, ts(minute=1)))
        storage.append_event(make_event(301, ts(minute=2)))

        doc = client.get("/data/temps").json()

        assert len(members(doc)) == 301
        [relation] = continuations(doc)
        assert relation[TREE_VALUE]["@value"] == "2020-01-01T10:02:00.000Z"

    def test_hard_cap_truncates_without_continuation(self, storage):
        for i in range(12):
            storage.append_event(make_event(i, ts(minute=0)))
        storage.append_event(make_event(12, ts(minute=1)))
        client = make_client(storage, PAGE_SOFT_LIMIT=2, PAGE_HARD_LIMIT=10)

        doc = client.get("/data/temps").json()

        assert len(members(doc)) == 10
        assert continuations(doc) == []

    def test_since_is_echoed_in_view_address(self, storage, client):
        storage.append_event(make_event(0, ts(minute=0)))
        storage.append_event(make_event(1, ts(minute=5)))

        doc = client.get("/data/temps", params={"since": "2020-01-01T10:05:00.000Z"}).json()

        assert doc["@id"] == f"{BASE}/data/temps?since=2020-01-01T10%3A05%3A00.000Z"
        assert members(doc) == ["https://example.org/observations/1"]

    def test_malformed_since(self, client):
        r = client.get("/data/temps", params={"since": "soon"})

        assert r.status_code == 400
        assert r.json()["error"] == "InvalidCursor"

    def test_unknown_stream(self, client):
        r = client.get("/data/nope")

        assert r.status_code == 404
        body = r.json()
        assert body["error"] == "InvalidStreamName"
        assert body["path"] == "/data/nope"


class TestRedirects:
    """Aliases redirect permanently to the canonical name."""

    def test_stream_alias(self, storage, client):
        storage.rename_stream(SOURCE, "temperatures")

        r = client.get("/data/temps", params={"since": "2020-01-01T10:00:00.000Z"})

        assert r.status_code == 301
        assert r.headers["location"] == f"{BASE}/data/temperatures?since=2020-01-01T10%3A00%3A00.000Z"

    def test_fragmentation_alias(self, storage, client):
        storage.rename_stream(SOURCE, "temperatures")

        r = client.get("/data/temps/byLocation")

        assert r.status_code == 301
        assert r.headers["location"] == f"{BASE}/data/temperatures/byLocation"

    def test_bucket_alias_keeps_segments_and_cursor(self, storage, client):
        storage.rename_stream(SOURCE, "temperatures")

        r = client.get("/data/temps/byLocation/gh", params={"since": "2020-01-01T10:00:00Z"})

        assert r.status_code == 301
        assert r.headers["location"] == (
            f"{BASE}/data/temperatures/byLocation/gh?since=2020-01-01T10%3A00%3A00Z"
        )

    def test_canonical_name_is_served(self, storage, client):
        storage.rename_stream(SOURCE, "temperatures")

        r = client.get("/data/temperatures")

        assert r.status_code == 200
        assert r.json()["@id"] == f"{BASE}/data/temperatures"

    def test_configured_base_url(self, storage):
        storage.rename_stream(SOURCE, "temperatures")
        client = make_client(storage, BASE_URL="https://ldes.example.org")

        r = client.get("/data/temps")

        assert r.headers["location"] == "https://ldes.example.org/data/temperatures"


class TestFragmentationView:
    """Root-bucket listings."""

    def test_root_buckets(self, client):
        r = client.get("/data/temps/byLocation")

        assert r.status_code == 200
        doc = r.json()
        assert doc["@id"] == f"{BASE}/data/temps/byLocation"
        assert doc["@included"] == [{"@id": f"{BASE}/data/temps", TREE_VIEW: f"{BASE}/data/temps/byLocation"}]
        nodes = [rel[TREE_NODE] for rel in doc[TREE_RELATION]]
        assert nodes == [
            {"@id": f"{BASE}/data/temps/byLocation/ab", TREE_REMAINING_ITEMS: 2},
            {"@id": f"{BASE}/data/temps/byLocation/gh", TREE_REMAINING_ITEMS: 3},
        ]
        assert {rel["@type"] for rel in doc[TREE_RELATION]} == {SUBSTRING_RELATION}
        assert doc[TREE_RELATION][0][TREE_PATH] == [{"@id": LOCATION}]

    def test_disabled_and_unknown_look_alike(self, client):
        disabled = client.get("/data/temps/byYear")
        unknown = client.get("/data/temps/byMonth")

        assert disabled.status_code == unknown.status_code == 404
        assert disabled.json()["error"] == unknown.json()["error"] == "InvalidOrDisabledFragmentation"
        assert set(disabled.json()) == set(unknown.json())

    def test_relation_order_is_stable(self, client):
        first = client.get("/data/temps/byLocation").json()
        second = client.get("/data/temps/byLocation").json()

        assert first[TREE_RELATION] == second[TREE_RELATION]


class TestBucketView:
    """Bucket content pages."""

    def test_bucket_events_and_children(self, storage, client):
        storage.append_event(make_event(0, ts(minute=0)), buckets=[("byLocation", "gh")])
        storage.append_event(make_event(1, ts(minute=1)), buckets=[("byLocation", "ab")])

        doc = client.get("/data/temps/byLocation/gh").json()

        assert doc["@id"] == f"{BASE}/data/temps/byLocation/gh"
        assert members(doc) == ["https://example.org/observations/0"]
        [child] = doc[TREE_RELATION]
        assert child[TREE_NODE]["@id"] == f"{BASE}/data/temps/byLocation/ghe"

    def test_bucket_continuation(self, storage):
        for i in range(6):
            storage.append_event(make_event(i, ts(minute=i)), buckets=[("byLocation", "ab")])
        client = make_client(storage, PAGE_SOFT_LIMIT=4, PAGE_HARD_LIMIT=8)

        doc = client.get("/data/temps/byLocation/ab").json()

        [relation] = continuations(doc)
        assert relation[TREE_NODE]["@id"] == (
            f"{BASE}/data/temps/byLocation/ab?since=2020-01-01T10%3A04%3A00.000Z"
        )

    def test_disabled_fragmentation_bucket(self, client):
        r = client.get("/data/temps/byYear/2020")

        assert r.status_code == 404
        assert "location" not in r.headers
        assert r.json()["error"] == "InvalidOrDisabledFragmentation"

    def test_bucket_value_with_slash(self, storage, client):
        storage.append_event(make_event(0, ts()), buckets=[("byLocation", "a/b")])

        doc = client.get("/data/temps/byLocation/a%2Fb").json()

        assert doc["@id"] == f"{BASE}/data/temps/byLocation/a%2Fb"
        assert members(doc) == ["https://example.org/observations/0"]
