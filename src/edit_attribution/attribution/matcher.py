"""Line-to-insertion matching heuristic."""

from __future__ import annotations

from enum import Enum

# Minimum trimmed lengths (exclusive) before looser comparisons apply.
CASE_INSENSITIVE_MIN_LENGTH = 5
SUBSTRING_MIN_LENGTH = 15


class MatchKind(str, Enum):
    EXACT = "exact"
    CASE_INSENSITIVE = "case_insensitive"
    SUBSTRING = "substring"


def split_insertion(text: str) -> list[str]:
    """Trimmed sub-lines of an inserted span."""
    return [line.strip() for line in text.split("\n")]


def _compare(candidate: str, sub_line: str) -> MatchKind | None:
    if candidate == sub_line:
        return MatchKind.EXACT
    if len(candidate) > CASE_INSENSITIVE_MIN_LENGTH and candidate.lower() == sub_line.lower():
        return MatchKind.CASE_INSENSITIVE
    if (
        len(candidate) > SUBSTRING_MIN_LENGTH
        and len(sub_line) > SUBSTRING_MIN_LENGTH
        and (sub_line in candidate or candidate in sub_line)
    ):
        return MatchKind.SUBSTRING
    return None


def match_line(candidate: str, sub_lines: list[str]) -> MatchKind | None:
    """Return the strongest kind any sub-line satisfies, or None.

    *candidate* must already be trimmed.
    """
    found: set[MatchKind] = set()
    for sub_line in sub_lines:
        kind = _compare(candidate, sub_line)
        if kind is MatchKind.EXACT:
            return kind
        if kind is not None:
            found.add(kind)
    for kind in MatchKind:
        if kind in found:
            return kind
    return None
