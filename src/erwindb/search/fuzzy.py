"""Fuzzy title filtering built on rapidfuzz."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from rapidfuzz import fuzz
from rapidfuzz.distance import Indel

logger: logging.Logger = logging.getLogger(name=__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FuzzyMatch:
    """One matching item: its position in the input, score and matched chars."""

    index: int
    score: float
    match_indices: list[int] = field(default_factory=list)


def match_positions(pattern: str, text: str) -> list[int] | None:
    """Find where the characters of pattern occur, in order, inside text.

    Args:
        pattern: Search pattern
        text: Candidate text

    Returns:
        Character positions in text, or None when pattern is not a
        case-insensitive subsequence of text
    """
    pattern_chars = [c.lower() for c in pattern]
    text_chars = [c.lower() for c in text]
    positions: list[int] = []
    for op in Indel.opcodes(pattern_chars, text_chars):
        if op.tag == "equal":
            positions.extend(range(op.dest_start, op.dest_end))
    if len(positions) != len(pattern_chars):
        return None
    return positions


def fuzzy_filter(
    items: Sequence[T], pattern: str, key: Callable[[T], str]
) -> list[FuzzyMatch]:
    """Filter items whose key contains the pattern as a subsequence.

    Args:
        items: Items to search
        pattern: Search pattern; empty matches nothing
        key: Function returning the text to match for an item

    Returns:
        Matches ordered by score, best first; ties keep input order
    """
    if not pattern:
        return []

    matches: list[FuzzyMatch] = []
    for index, item in enumerate(items):
        text = key(item)
        positions = match_positions(pattern=pattern, text=text)
        if positions is None:
            continue
        score = fuzz.WRatio(pattern, text, processor=str.lower)
        matches.append(FuzzyMatch(index=index, score=score, match_indices=positions))

    matches.sort(key=lambda m: m.score, reverse=True)
    logger.debug(msg=f"Fuzzy filter '{pattern}': {len(matches)} of {len(items)} matched")
    return matches
