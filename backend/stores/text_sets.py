"""TextSetStore - the ordered text variants of one group and their selection.

Text sets are kept in a dict keyed by id, with a separate list of ids for
display order. The base is whatever sits at position 0; it is never stored
as a flag.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Union

from domain.errors import InvalidReorder
from domain.models import TextSet, TextSource

logger = logging.getLogger(__name__)


class TextSetStore:
    def __init__(self, text_sets: Iterable[TextSet] = (), selected: Iterable[str] = ()):
        self._items: dict[str, TextSet] = {}
        self._order: list[str] = []
        self._selected: set[str] = set()
        for ts in text_sets:
            self._items[ts.id] = ts
            self._order.append(ts.id)
        self._selected = {sid for sid in selected if sid in self._items}

    # Read views

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[TextSet]:
        return iter(self.text_sets)

    def __contains__(self, text_set_id: object) -> bool:
        return text_set_id in self._items

    @property
    def text_sets(self) -> List[TextSet]:
        return [self._items[tid] for tid in self._order]

    @property
    def ids(self) -> List[str]:
        return list(self._order)

    @property
    def base(self) -> Optional[TextSet]:
        """The text set at position 0, or None when the store is empty."""
        return self._items[self._order[0]] if self._order else None

    @property
    def selected_ids(self) -> frozenset:
        return frozenset(self._selected)

    @property
    def selected_text_sets(self) -> List[TextSet]:
        """Selected text sets in stored order."""
        return [self._items[tid] for tid in self._order if tid in self._selected]

    def get(self, text_set_id: str) -> Optional[TextSet]:
        return self._items.get(text_set_id)

    # Mutations

    def add(self, name: str, content: str, source: TextSource = TextSource.MANUAL) -> TextSet:
        ts = TextSet.create(name=name, content=content, source=source)
        self._items[ts.id] = ts
        self._order.append(ts.id)
        logger.info(f"Added text set {ts.id} ({ts.source.value}, {len(content)} chars)")
        return ts

    def remove(self, text_set_id: str) -> bool:
        if text_set_id not in self._items:
            return False
        del self._items[text_set_id]
        self._order.remove(text_set_id)
        self._selected.discard(text_set_id)
        logger.info(f"Removed text set {text_set_id}")
        return True

    def reorder(self, new_sequence: Iterable[Union[TextSet, str]]) -> None:
        """Replace the stored order. Position 0 becomes the base.

        Raises:
            InvalidReorder: new_sequence is not a permutation of the current ids.
        """
        new_order = [item.id if isinstance(item, TextSet) else item for item in new_sequence]
        if len(new_order) != len(self._order) or set(new_order) != set(self._order):
            raise InvalidReorder(
                f"Expected a permutation of {len(self._order)} text set ids, got {len(new_order)}"
            )
        self._order = new_order

    def move(self, text_set_id: str, target_index: int) -> bool:
        """Take a text set out and re-insert it at target_index."""
        if text_set_id not in self._items:
            return False
        target_index = max(0, min(target_index, len(self._order) - 1))
        self._order.remove(text_set_id)
        self._order.insert(target_index, text_set_id)
        return True

    def rename(self, text_set_id: str, new_name: str) -> bool:
        ts = self._items.get(text_set_id)
        name = (new_name or "").strip()
        if ts is None or not name:
            return False
        ts.name = name
        return True

    def clear(self) -> None:
        self._items.clear()
        self._order.clear()
        self._selected.clear()
        logger.info("Cleared all text sets")

    # Selection

    def select(self, text_set_id: str, included: bool = True) -> bool:
        """Add or remove a text set from the selection. Unknown ids are ignored."""
        if text_set_id not in self._items:
            return False
        if included:
            self._selected.add(text_set_id)
        else:
            self._selected.discard(text_set_id)
        return True

    def set_selection(self, text_set_ids: Iterable[str]) -> None:
        self._selected = {tid for tid in text_set_ids if tid in self._items}

    def select_all(self) -> None:
        self._selected = set(self._order)

    def select_none(self) -> None:
        self._selected.clear()
