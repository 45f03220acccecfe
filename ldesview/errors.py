"""Typed errors raised while resolving and paging views."""


class LdesViewError(Exception):
    """Base exception for view resolution errors."""

    status_code = 500
    error = "LdesViewError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidStreamName(LdesViewError):
    """Raised when a stream name does not resolve to any stream."""

    status_code = 404
    error = "InvalidStreamName"

    def __init__(self, name: str):
        super().__init__(f"Stream {name!r} does not exist")
        self.name = name


class InvalidOrDisabledFragmentation(LdesViewError):
    """Raised for unknown fragmentations and disabled ones alike."""

    status_code = 404
    error = "InvalidOrDisabledFragmentation"

    def __init__(self, stream_name: str, name: str):
        super().__init__(f"Fragmentation {name!r} does not exist on stream {stream_name!r}")
        self.stream_name = stream_name
        self.name = name


class InvalidCursor(LdesViewError):
    """Raised when ``since`` is not an ISO 8601 timestamp."""

    status_code = 400
    error = "InvalidCursor"

    def __init__(self, raw: str):
        super().__init__(f"'since' must be an ISO 8601 timestamp, got {raw!r}")
        self.raw = raw


class EventOrderViolation(LdesViewError):
    """Raised when storage yields an event older than its predecessor."""

    status_code = 500
    error = "EventOrderViolation"
