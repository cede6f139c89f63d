"""Word tokenization and normalization for token-level diffs.

Tokens are whitespace-delimited. When punctuation is ignored the text is
case-folded and stripped of everything that is not a letter, digit or
whitespace before splitting.
"""

import re
from typing import List

# Anything that is not a word character or whitespace, plus underscore
# (which \w would otherwise keep).
_PUNCTUATION = re.compile(r"[^\w\s]|_")


def normalize(text: str) -> str:
    """Lower-case the text and remove punctuation, keeping whitespace intact."""
    return _PUNCTUATION.sub("", text.lower())


def tokenize(text: str, ignore_punctuation: bool = False) -> List[str]:
    """Split text into tokens on runs of whitespace.

    Args:
        text: Raw text set content.
        ignore_punctuation: Normalize with normalize() before splitting.

    Returns:
        Ordered list of non-empty tokens. Empty or all-whitespace text gives [].
    """
    if ignore_punctuation:
        text = normalize(text)
    return text.split()
