"""Stream, fragmentation, event and bucket models."""
from datetime import datetime, timezone
from enum import Enum
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .vocab import XSD_STRING


class EntityStatus(str, Enum):
    """Lifecycle status of a fragmentation."""
    ENABLED = "ENABLED"
    DISABLED = "DISABLED"


class FragmentationKind(str, Enum):
    """Supported bucketing strategies."""
    SUBSTRING = "substring"
    PREFIX = "prefix"
    EQUALITY = "equality"
    RANGE = "range"
    GEOSPATIAL = "geospatial"


class EventStream(BaseModel):
    """A stream as known under one of its names."""
    model_config = ConfigDict(frozen=True)

    source_uri: str = Field(..., description="Canonical source identifier")
    name: str = Field(..., description="Human-facing stream name")
    time_property: list[str] = Field(
        default_factory=list,
        description="Property path expressing temporal ordering"
    )


class Fragmentation(BaseModel):
    """A named partitioning scheme over a stream's events."""
    model_config = ConfigDict(frozen=True)

    source_uri: str
    name: str
    status: EntityStatus = EntityStatus.ENABLED
    kind: FragmentationKind
    path: list[str] = Field(default_factory=list, description="Property path buckets partition on")

    @property
    def enabled(self) -> bool:
        return self.status == EntityStatus.ENABLED


class Term(BaseModel):
    """An IRI, blank node or literal."""
    model_config = ConfigDict(frozen=True)

    value: str
    kind: Literal["iri", "blank", "literal"] = "iri"
    datatype: str | None = None
    language: str | None = None


class Statement(BaseModel):
    """A triple, or a quad when ``graph`` is set."""
    model_config = ConfigDict(frozen=True)

    subject: Term
    predicate: Term
    object: Term
    graph: Term | None = None


class Event(BaseModel):
    """An immutable member of a stream."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Member identifier")
    source_uri: str
    timestamp: datetime
    data: list[Statement] = Field(default_factory=list)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class Bucket(BaseModel):
    """One node of a fragmentation tree."""
    model_config = ConfigDict(frozen=True)

    value: str
    data_type: str = XSD_STRING
    count: int = Field(default=0, ge=0, description="Remaining items below this bucket")
    parent: str | None = None
