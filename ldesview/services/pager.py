"""Cursor pagination over lazily produced, time-ordered events."""
from contextlib import aclosing
from datetime import datetime
from enum import Enum
from typing import AsyncIterator
import structlog
from pydantic import BaseModel, ConfigDict, Field
from ..errors import EventOrderViolation
from ..models import Event

log = structlog.get_logger()

DEFAULT_SOFT_LIMIT = 250
DEFAULT_HARD_LIMIT = 2000


class PageCompletion(str, Enum):
    """Why a page stopped."""
    MORE_AVAILABLE = "more_available"
    HARD_CAPPED = "hard_capped"
    EXHAUSTED = "exhausted"


class Page(BaseModel):
    """
    One bounded slice of a stream.

    ``cursor`` is set only when more events are available: it is the
    timestamp of the first event this page did not deliver, so a
    follow-up request with ``since=cursor`` resumes without repeating
    or skipping anything.
    """
    model_config = ConfigDict(frozen=True)

    events: list[Event] = Field(default_factory=list)
    completion: PageCompletion = PageCompletion.EXHAUSTED
    cursor: datetime | None = None

    @property
    def has_more(self) -> bool:
        return self.completion == PageCompletion.MORE_AVAILABLE

    @property
    def last_timestamp(self) -> datetime | None:
        return self.events[-1].timestamp if self.events else None


class EventPager:
    """
    Cuts pages out of an ascending event source.

    A page is full once it holds ``soft_limit`` events and the next
    event starts a new timestamp. Events sharing a timestamp are never
    split across pages, since an inclusive ``since`` cursor pointing
    into such a run would return the same events forever. Runs are
    only cut at ``hard_limit``, and a hard-capped page offers no
    continuation.
    """

    def __init__(self, soft_limit: int = DEFAULT_SOFT_LIMIT, hard_limit: int = DEFAULT_HARD_LIMIT):
        if soft_limit < 1:
            raise ValueError("soft_limit must be at least 1")
        if hard_limit <= soft_limit:
            raise ValueError("hard_limit must be greater than soft_limit")
        self.soft_limit = soft_limit
        self.hard_limit = hard_limit

    async def page(self, source: AsyncIterator[Event]) -> Page:
        """
        Pull the next page from ``source``.

        The source is closed on return, whether it was drained or not.
        """
        events: list[Event] = []
        completion = PageCompletion.EXHAUSTED
        cursor = None
        async with aclosing(source) as stream:
            async for event in stream:
                last = events[-1].timestamp if events else None
                if last is not None and event.timestamp < last:
                    log.error("page.order_violation", event_id=event.id, previous=last.isoformat())
                    raise EventOrderViolation(
                        f"Event {event.id} at {event.timestamp.isoformat()} precedes {last.isoformat()}"
                    )

                if len(events) >= self.soft_limit and event.timestamp != last:
                    completion = PageCompletion.MORE_AVAILABLE
                    cursor = event.timestamp
                    break

                events.append(event)
                if len(events) >= self.hard_limit:
                    completion = PageCompletion.HARD_CAPPED
                    log.warning(
                        "page.hard_capped",
                        hard_limit=self.hard_limit,
                        timestamp=event.timestamp.isoformat(),
                    )
                    break

        return Page(events=events, completion=completion, cursor=cursor)
