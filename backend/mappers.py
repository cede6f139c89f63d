"""Domain <-> DTO mappers.

Converts between the domain dataclasses and the Pydantic DTOs used for the
snapshot format and API responses.
"""

from domain.models import (
    CandidateDiff, Comparison, DiffSegment, DiffStats, TextSet, TextSource,
)
from models import (
    CandidateDiffDTO, ComparisonDTO, DiffSegmentDTO, DiffStatsDTO,
    GroupDTO, StateResponse, TextSetDTO,
)


def text_set_to_dto(ts: TextSet) -> TextSetDTO:
    return TextSetDTO(
        id=ts.id,
        name=ts.name,
        content=ts.content,
        source=ts.source.value,
        timestamp=ts.created_at,
    )


def dto_to_text_set(dto: TextSetDTO) -> TextSet:
    return TextSet(
        id=dto.id,
        name=dto.name,
        content=dto.content,
        source=TextSource(dto.source),
        created_at=dto.timestamp,
    )


def group_to_dto(group) -> GroupDTO:
    """Convert a DiffGroup; selected ids are listed in text set order."""
    return GroupDTO(
        id=group.id,
        name=group.name,
        text_sets=[text_set_to_dto(ts) for ts in group.text_sets],
        selected_sets=[ts.id for ts in group.text_sets if ts.id in group.selected_ids],
    )


def state_to_dto(store) -> StateResponse:
    return StateResponse(
        groups=[group_to_dto(g) for g in store.groups],
        active_group_id=store.active_group_id,
    )


def segment_to_dto(seg: DiffSegment) -> DiffSegmentDTO:
    return DiffSegmentDTO(kind=seg.kind.value, token=seg.token)


def stats_to_dto(stats: DiffStats) -> DiffStatsDTO:
    return DiffStatsDTO(equal=stats.equal, inserted=stats.inserted, deleted=stats.deleted)


def candidate_to_dto(candidate: CandidateDiff) -> CandidateDiffDTO:
    return CandidateDiffDTO(
        text_set=text_set_to_dto(candidate.text_set),
        diff=[segment_to_dto(seg) for seg in candidate.segments],
        stats=stats_to_dto(candidate.stats),
    )


def comparison_to_dto(comparison: Comparison) -> ComparisonDTO:
    return ComparisonDTO(
        group_id=comparison.group_id or "",
        base=text_set_to_dto(comparison.base),
        comparisons=[candidate_to_dto(c) for c in comparison.candidates],
        ignore_punctuation=comparison.ignore_punctuation,
        diff_enabled=comparison.diff_enabled,
    )
