"""GroupStore - independent diff groups and the active-group pointer.

At least one group always exists. Each group owns a TextSetStore; text sets
from different groups are never compared with each other.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from pydantic import ValidationError

from domain.errors import GroupNotFound, MalformedSnapshot
from domain.models import TextSet, TextSource, new_id
from mappers import group_to_dto, dto_to_text_set
from models import GroupDTO
from stores.text_sets import TextSetStore

logger = logging.getLogger(__name__)

DEFAULT_GROUP_NAME = "Default Group"


@dataclass
class DiffGroup:
    id: str
    name: str
    sets: TextSetStore = field(default_factory=TextSetStore)

    @property
    def text_sets(self) -> List[TextSet]:
        return self.sets.text_sets

    @property
    def selected_ids(self) -> frozenset:
        return self.sets.selected_ids

    @property
    def base(self) -> Optional[TextSet]:
        return self.sets.base


class GroupStore:
    def __init__(self, default_group_name: str = DEFAULT_GROUP_NAME):
        first = DiffGroup(id=new_id(), name=default_group_name)
        self._groups: dict[str, DiffGroup] = {first.id: first}
        self._order: list[str] = [first.id]
        self._active_id = first.id

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[DiffGroup]:
        return iter(self.groups)

    @property
    def groups(self) -> List[DiffGroup]:
        return [self._groups[gid] for gid in self._order]

    @property
    def active_group_id(self) -> str:
        return self._active_id

    @property
    def active_group(self) -> DiffGroup:
        return self._groups[self._active_id]

    def get(self, group_id: str) -> Optional[DiffGroup]:
        return self._groups.get(group_id)

    def require(self, group_id: str) -> DiffGroup:
        group = self._groups.get(group_id)
        if group is None:
            raise GroupNotFound(group_id)
        return group

    # Group CRUD

    def add_group(self) -> DiffGroup:
        group = DiffGroup(id=new_id(), name=f"Group {len(self._order) + 1}")
        self._groups[group.id] = group
        self._order.append(group.id)
        self._active_id = group.id
        logger.info(f"Added group {group.id} ({group.name!r}), now active")
        return group

    def remove_group(self, group_id: str) -> bool:
        if group_id not in self._groups:
            return False
        if len(self._order) <= 1:
            logger.info("Refusing to remove the last remaining group")
            return False
        del self._groups[group_id]
        self._order.remove(group_id)
        if self._active_id == group_id:
            self._active_id = self._order[0]
            logger.info(f"Removed active group {group_id}, activated {self._active_id}")
        else:
            logger.info(f"Removed group {group_id}")
        return True

    def rename_group(self, group_id: str, new_name: str) -> bool:
        group = self._groups.get(group_id)
        name = (new_name or "").strip()
        if group is None or not name:
            return False
        group.name = name
        return True

    def set_active(self, group_id: str) -> bool:
        if group_id not in self._groups:
            return False
        self._active_id = group_id
        return True

    def select_set(self, group_id: str, text_set_id: str, included: bool) -> bool:
        group = self._groups.get(group_id)
        if group is None:
            return False
        return group.sets.select(text_set_id, included)

    def produce_text_set(
        self,
        group_id: str,
        content: str,
        source: TextSource = TextSource.TRANSCRIBED,
        name: Optional[str] = None,
    ) -> TextSet:
        """Add a text set built from an external result, e.g. a transcript."""
        group = self.require(group_id)
        if not name:
            name = f"Transcript {len(group.sets) + 1}"
        return group.sets.add(name=name, content=content, source=source)

    # Import / export

    def snapshot(self) -> list[dict[str, Any]]:
        """Serializable copy of every group, in order."""
        return [group_to_dto(g).model_dump(mode="json", by_alias=True) for g in self.groups]

    def restore(self, data: Any, active_group_id: Optional[str] = None) -> None:
        """Replace all state with a snapshot.

        Either everything is applied or nothing is. The active pointer falls
        back to the first restored group when active_group_id is missing or
        does not name a restored group.

        Raises:
            MalformedSnapshot: data is not a non-empty array of valid groups.
        """
        if not isinstance(data, list):
            raise MalformedSnapshot("Snapshot must be a JSON array of groups")
        if not data:
            raise MalformedSnapshot("Snapshot contains no groups")

        try:
            dtos = [GroupDTO.model_validate(item) for item in data]
        except ValidationError as e:
            raise MalformedSnapshot(f"Invalid snapshot: {e.error_count()} validation error(s)") from e

        group_ids = [dto.id for dto in dtos]
        if len(set(group_ids)) != len(group_ids):
            raise MalformedSnapshot("Snapshot contains duplicate group ids")

        groups = []
        for dto in dtos:
            set_ids = [ts.id for ts in dto.text_sets]
            if len(set(set_ids)) != len(set_ids):
                raise MalformedSnapshot(f"Group {dto.id} contains duplicate text set ids")
            dangling = set(dto.selected_sets) - set(set_ids)
            if dangling:
                logger.warning(f"Group {dto.id}: dropping {len(dangling)} selections of missing text sets")
            sets = TextSetStore([dto_to_text_set(ts) for ts in dto.text_sets], dto.selected_sets)
            groups.append(DiffGroup(id=dto.id, name=dto.name, sets=sets))

        self._groups = {g.id: g for g in groups}
        self._order = group_ids
        if active_group_id in self._groups:
            self._active_id = active_group_id
        else:
            self._active_id = group_ids[0]
        logger.info(f"Restored {len(groups)} groups, active={self._active_id}")
