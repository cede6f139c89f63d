"""Token-level diff engine.

Greedy alignment with a bounded forward lookahead. This is not a minimal
edit-distance diff: after a mismatch it looks a few tokens ahead for a
resynchronization point and takes the first one it finds, preferring to
treat compare tokens as insertions before treating base tokens as deletions.
Every token of both inputs ends up in exactly one segment, so the base can be
rebuilt from Equal+Delete segments and the candidate from Equal+Insert.
"""

from typing import Iterable, List, Sequence

from domain.models import DiffSegment, DiffStats, SegmentKind
from tokenizer import tokenize


# Resynchronization window. Tunable, kept at 4 for compatibility with
# existing exported comparisons.
DEFAULT_LOOKAHEAD = 4


def _find(tokens: Sequence[str], target: str, start: int, stop: int) -> int:
    for k in range(start, min(stop, len(tokens))):
        if tokens[k] == target:
            return k
    return -1


def diff(
    base: Sequence[str],
    compare: Sequence[str],
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> List[DiffSegment]:
    """Align two token sequences.

    Args:
        base: Tokens of the base text set.
        compare: Tokens of the candidate text set.
        lookahead: How many tokens past the cursor to search for a resync.

    Returns:
        Ordered segments. Empty base gives all Insert, empty compare gives
        all Delete, both empty gives [].
    """
    segments: List[DiffSegment] = []
    i, j = 0, 0
    n, m = len(base), len(compare)

    while i < n or j < m:
        if i >= n:
            segments.extend(DiffSegment(SegmentKind.INSERT, tok) for tok in compare[j:])
            j = m
        elif j >= m:
            segments.extend(DiffSegment(SegmentKind.DELETE, tok) for tok in base[i:])
            i = n
        elif base[i] == compare[j]:
            segments.append(DiffSegment(SegmentKind.EQUAL, base[i]))
            i += 1
            j += 1
        else:
            # Base token shows up a little later in compare: the gap was inserted
            k = _find(compare, base[i], j + 1, j + lookahead + 1)
            if k != -1:
                segments.extend(DiffSegment(SegmentKind.INSERT, tok) for tok in compare[j:k])
                segments.append(DiffSegment(SegmentKind.EQUAL, base[i]))
                i += 1
                j = k + 1
                continue

            # Compare token shows up a little later in base: the gap was deleted
            k = _find(base, compare[j], i + 1, i + lookahead + 1)
            if k != -1:
                segments.extend(DiffSegment(SegmentKind.DELETE, tok) for tok in base[i:k])
                segments.append(DiffSegment(SegmentKind.EQUAL, base[k]))
                i = k + 1
                j += 1
                continue

            # Substitution
            segments.append(DiffSegment(SegmentKind.DELETE, base[i]))
            segments.append(DiffSegment(SegmentKind.INSERT, compare[j]))
            i += 1
            j += 1

    return segments


def diff_texts(
    base: str,
    compare: str,
    ignore_punctuation: bool = False,
    lookahead: int = DEFAULT_LOOKAHEAD,
) -> List[DiffSegment]:
    """Tokenize two texts and diff them."""
    return diff(
        tokenize(base, ignore_punctuation),
        tokenize(compare, ignore_punctuation),
        lookahead=lookahead,
    )


def summarize(segments: Iterable[DiffSegment]) -> DiffStats:
    """Count equal, inserted and deleted tokens."""
    counts = {kind: 0 for kind in SegmentKind}
    for seg in segments:
        counts[seg.kind] += 1
    return DiffStats(
        equal=counts[SegmentKind.EQUAL],
        inserted=counts[SegmentKind.INSERT],
        deleted=counts[SegmentKind.DELETE],
    )
