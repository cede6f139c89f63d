"""CompareGroupUseCase - diffs every selected text set of a group against the base.

The base is the first selected text set in stored order. Alignments are
memoized on (base content, candidate content, ignore_punctuation,
diff_enabled, lookahead), so asking again for an unchanged selection does
not re-run the engine.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from diff_engine import DEFAULT_LOOKAHEAD, diff, summarize
from domain.models import CandidateDiff, Comparison, DiffSegment, DiffStats
from stores.groups import GroupStore
from tokenizer import tokenize

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 512


def content_key(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


@dataclass
class CompareRequest:
    """Parameters for comparing one group."""
    group_id: str
    ignore_punctuation: bool = False
    diff_enabled: bool = True


class DiffCache:
    """Bounded memo of alignments. Emptied wholesale when full."""

    def __init__(self, max_entries: int = DEFAULT_CACHE_SIZE):
        self.max_entries = max_entries
        self._entries: dict[tuple, tuple[DiffSegment, ...]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_compute(self, key: tuple, compute: Callable[[], list[DiffSegment]]) -> list[DiffSegment]:
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            logger.debug(f"Diff cache hit ({self.hits} hits, {self.misses} misses)")
            return list(cached)

        self.misses += 1
        segments = compute()
        if len(self._entries) >= self.max_entries:
            logger.debug(f"Diff cache full at {len(self._entries)} entries, clearing")
            self._entries.clear()
        self._entries[key] = tuple(segments)
        return segments

    def clear(self) -> None:
        self._entries.clear()


class CompareGroupUseCase:
    def __init__(
        self,
        store: GroupStore,
        cache: Optional[DiffCache] = None,
        lookahead: int = DEFAULT_LOOKAHEAD,
    ):
        self._store = store
        self._cache = cache if cache is not None else DiffCache()
        self._lookahead = lookahead

    def execute(self, req: CompareRequest) -> Optional[Comparison]:
        """Compare a group's selection. Returns None when nothing is selected.

        Raises:
            GroupNotFound: req.group_id does not name a group.
        """
        group = self._store.require(req.group_id)
        selected = group.sets.selected_text_sets
        if not selected:
            return None

        base = selected[0]
        comparison = Comparison(
            base=base,
            ignore_punctuation=req.ignore_punctuation,
            diff_enabled=req.diff_enabled,
            group_id=group.id,
        )

        for candidate in selected[1:]:
            if req.diff_enabled:
                segments = self._diff(base.content, candidate.content, req.ignore_punctuation)
                stats = summarize(segments)
            else:
                segments, stats = [], DiffStats()
            comparison.candidates.append(CandidateDiff(text_set=candidate, segments=segments, stats=stats))

        logger.info(
            f"Compared {len(comparison.candidates)} text sets against base {base.id} "
            f"in group {group.id} (ignore_punctuation={req.ignore_punctuation}, diff={req.diff_enabled})"
        )
        return comparison

    def _diff(self, base: str, candidate: str, ignore_punctuation: bool) -> list[DiffSegment]:
        key = (content_key(base), content_key(candidate), ignore_punctuation, True, self._lookahead)

        def compute() -> list[DiffSegment]:
            return diff(
                tokenize(base, ignore_punctuation),
                tokenize(candidate, ignore_punctuation),
                lookahead=self._lookahead,
            )

        return self._cache.get_or_compute(key, compute)
