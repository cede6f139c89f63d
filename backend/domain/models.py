"""Framework-agnostic domain models for TextDiff Analyzer.

Stores and the diff engine work on these dataclasses only. Pydantic DTOs in
models.py are the API shape, with mappers at the boundary.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TextSource(str, Enum):
    MANUAL = "manual"
    TRANSCRIBED = "transcribed"


class SegmentKind(str, Enum):
    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


@dataclass
class TextSet:
    """A named text variant. Only the name may change after creation."""
    id: str
    name: str
    content: str
    source: TextSource = TextSource.MANUAL
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(cls, name: str, content: str, source: TextSource = TextSource.MANUAL) -> "TextSet":
        return cls(id=new_id(), name=name, content=content, source=TextSource(source))


@dataclass(frozen=True)
class DiffSegment:
    """One classified token of an alignment."""
    kind: SegmentKind
    token: str


@dataclass(frozen=True)
class DiffStats:
    """Token counts of a diff result."""
    equal: int = 0
    inserted: int = 0
    deleted: int = 0


@dataclass
class CandidateDiff:
    """A selected text set aligned against the base."""
    text_set: TextSet
    segments: list[DiffSegment] = field(default_factory=list)
    stats: DiffStats = field(default_factory=DiffStats)


@dataclass
class Comparison:
    """All selected text sets of a group compared with the base."""
    base: TextSet
    candidates: list[CandidateDiff] = field(default_factory=list)
    ignore_punctuation: bool = False
    diff_enabled: bool = True
    group_id: Optional[str] = None
