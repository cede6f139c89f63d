from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_source(value):
    # Older exports call transcribed sets "audio"
    if isinstance(value, str):
        value = value.strip().lower()
        if value == "audio":
            return "transcribed"
    if value not in ("manual", "transcribed"):
        raise ValueError(f"unknown text set source: {value!r}")
    return value


def _parse_timestamp(value):
    # Snapshots carry ISO-8601 strings; epoch numbers are not accepted
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be an ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


class TextSetDTO(BaseModel):
    """A text set as exported in snapshots and returned by the API"""
    id: str
    name: str
    content: str
    source: str
    timestamp: datetime

    @field_validator("source", mode="before")
    @classmethod
    def check_source(cls, value):
        return _normalize_source(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def check_timestamp(cls, value):
        return _parse_timestamp(value)


class GroupDTO(BaseModel):
    """A diff group in the snapshot format (camelCase keys on the wire)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    text_sets: List[TextSetDTO] = Field(alias="textSets")
    selected_sets: List[str] = Field(alias="selectedSets")


class StateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    groups: List[GroupDTO]
    active_group_id: str = Field(alias="activeGroupId")


class DiffSegmentDTO(BaseModel):
    kind: str
    token: str


class DiffStatsDTO(BaseModel):
    equal: int
    inserted: int
    deleted: int


class CandidateDiffDTO(BaseModel):
    """One selected text set compared with the base."""
    text_set: TextSetDTO
    diff: List[DiffSegmentDTO] = []
    stats: DiffStatsDTO


class ComparisonDTO(BaseModel):
    group_id: str
    base: TextSetDTO
    comparisons: List[CandidateDiffDTO] = []
    ignore_punctuation: bool = False
    diff_enabled: bool = True


class ComparisonResponse(BaseModel):
    """Null comparison means nothing is selected."""
    comparison: Optional[ComparisonDTO] = None


# Requests

class CreateTextSetRequest(BaseModel):
    name: str = Field(min_length=1)
    content: str = Field(min_length=1)
    source: str = "manual"

    @field_validator("name", "content")
    @classmethod
    def check_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("source")
    @classmethod
    def check_request_source(cls, value: str) -> str:
        return _normalize_source(value)


class TranscriptRequest(BaseModel):
    """Result of an external transcription, turned into a text set."""
    filename: str = Field(min_length=1)
    content: str = Field(min_length=1)
    parameters: str = ""
    streaming: bool = True


class RenameRequest(BaseModel):
    name: str


class ReorderRequest(BaseModel):
    ids: List[str]


class MoveRequest(BaseModel):
    index: int = Field(ge=0)


class SelectRequest(BaseModel):
    included: bool = True


class SelectionRequest(BaseModel):
    ids: List[str]


class ActiveGroupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group_id: str = Field(alias="groupId")
