"""Addressing helpers for the /data views."""
from datetime import datetime, timezone
from urllib.parse import quote, urlencode
from .errors import InvalidCursor


def _segment(value: str) -> str:
    return quote(value, safe="")


def collection_url(base: str, stream_name: str) -> str:
    return f"{base.rstrip('/')}/data/{_segment(stream_name)}"


def fragmentation_url(base: str, stream_name: str, fragmentation_name: str) -> str:
    return f"{collection_url(base, stream_name)}/{_segment(fragmentation_name)}"


def bucket_url(base: str, stream_name: str, fragmentation_name: str, bucket: str) -> str:
    return f"{fragmentation_url(base, stream_name, fragmentation_name)}/{_segment(bucket)}"


def view_url(
    base: str,
    stream_name: str,
    fragmentation_name: str | None = None,
    bucket: str | None = None,
) -> str:
    """Address of a stream, fragmentation or bucket view, without query."""
    if fragmentation_name is None:
        return collection_url(base, stream_name)
    if bucket is None:
        return fragmentation_url(base, stream_name, fragmentation_name)
    return bucket_url(base, stream_name, fragmentation_name, bucket)


def with_since(url: str, since: str | None) -> str:
    if not since:
        return url
    return f"{url}?{urlencode({'since': since})}"


def format_timestamp(ts: datetime) -> str:
    """
    Render a timestamp as UTC ISO 8601.

    Millisecond precision unless the value carries sub-millisecond
    detail, in which case microseconds are kept so the cursor never
    lands before the event it points at.
    """
    ts = ts.astimezone(timezone.utc)
    timespec = "milliseconds" if ts.microsecond % 1000 == 0 else "microseconds"
    return ts.isoformat(timespec=timespec).replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    """Parse a ``since`` value; naive values are taken as UTC."""
    try:
        ts = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        raise InvalidCursor(raw) from None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)
