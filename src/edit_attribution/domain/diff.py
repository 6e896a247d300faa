"""Positional line diff between two revisions of a file.

Lines are compared index by index; there is no alignment step, so a line
inserted near the top of a file shows up as a run of modified lines followed
by a trailing addition.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class AddedLine:
    line_number: int
    content: str


@dataclass(frozen=True)
class RemovedLine:
    line_number: int
    content: str


@dataclass(frozen=True)
class ModifiedLine:
    line_number: int
    old_content: str
    new_content: str


@dataclass(frozen=True)
class DiffStatistics:
    total_old_lines: int
    total_new_lines: int
    lines_added: int
    lines_removed: int
    lines_modified: int
    lines_unchanged: int
    net_line_change: int
    char_difference: int


@dataclass(frozen=True)
class DiffResult:
    statistics: DiffStatistics
    added: tuple[AddedLine, ...]
    removed: tuple[RemovedLine, ...]
    modified: tuple[ModifiedLine, ...]

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed or self.modified)

    def to_dict(self) -> dict[str, Any]:
        return {
            "statistics": asdict(self.statistics),
            "added": [asdict(a) for a in self.added],
            "removed": [asdict(r) for r in self.removed],
            "modified": [asdict(m) for m in self.modified],
        }


def split_lines(text: str) -> list[str]:
    # No "\r\n" or trailing-newline normalization: "a\n" is ["a", ""].
    return text.split("\n")


def line_count(text: str) -> int:
    return len(split_lines(text))


def diff(old_text: str, new_text: str) -> DiffResult:
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)

    added: list[AddedLine] = []
    removed: list[RemovedLine] = []
    modified: list[ModifiedLine] = []

    for i in range(max(len(old_lines), len(new_lines))):
        has_old = i < len(old_lines)
        has_new = i < len(new_lines)
        if has_new and not has_old:
            added.append(AddedLine(i + 1, new_lines[i]))
        elif has_old and not has_new:
            removed.append(RemovedLine(i + 1, old_lines[i]))
        elif old_lines[i] != new_lines[i]:
            modified.append(ModifiedLine(i + 1, old_lines[i], new_lines[i]))

    statistics = DiffStatistics(
        total_old_lines=len(old_lines),
        total_new_lines=len(new_lines),
        lines_added=len(added),
        lines_removed=len(removed),
        lines_modified=len(modified),
        lines_unchanged=min(len(old_lines), len(new_lines)) - len(modified),
        net_line_change=len(new_lines) - len(old_lines),
        char_difference=len(new_text) - len(old_text),
    )
    return DiffResult(
        statistics=statistics,
        added=tuple(added),
        removed=tuple(removed),
        modified=tuple(modified),
    )
