"""Attribute changed lines to tracked insertions or manual editing.

Usage (from session.py):
    result = diff(baseline, content)
    report = attribute(result, tracker.snapshot(file_id))
    provider.emit_attribution(file_id, result, report)
"""

from __future__ import annotations

import logging
from typing import Sequence

from edit_attribution.attribution.matcher import MatchKind, match_line, split_insertion
from edit_attribution.attribution.record import AttributionReport, MatchedLine
from edit_attribution.domain.diff import DiffResult
from edit_attribution.runtime.tracker import InsertionEvent

logger = logging.getLogger(__name__)


def candidate_lines(result: DiffResult) -> list[tuple[int, str]]:
    """Added lines plus the new side of modified lines, blank lines dropped.

    Removed lines are never candidates: their content is gone.
    """
    candidates = [(a.line_number, a.content) for a in result.added]
    candidates.extend((m.line_number, m.new_content) for m in result.modified)
    candidates.sort(key=lambda c: c[0])
    return [c for c in candidates if c[1].strip()]


def attribute(result: DiffResult, insertions: Sequence[InsertionEvent]) -> AttributionReport:
    """Classify every candidate line as tool-attributed or manual.

    - A line is tool-attributed when at least one insertion matches it.
    - One insertion may explain many lines and vice versa; every match
      bumps that insertion's usage counter.
    """
    candidates = candidate_lines(result)
    if not insertions:
        return AttributionReport(tool_attributed_count=0, manual_count=len(candidates))

    insertion_lines = [split_insertion(e.text) for e in insertions]
    usage = [0] * len(insertions)
    matches: list[MatchedLine] = []
    manual = 0

    for line_number, content in candidates:
        trimmed = content.strip()
        first_kind: MatchKind | None = None
        hits = 0
        for idx, sub_lines in enumerate(insertion_lines):
            kind = match_line(trimmed, sub_lines)
            if kind is None:
                continue
            usage[idx] += 1
            hits += 1
            if first_kind is None:
                first_kind = kind

        if first_kind is None:
            manual += 1
            continue
        matches.append(MatchedLine(line_number, content, first_kind, hits))

    logger.debug(
        "attributed %d/%d candidate line(s) against %d insertion(s)",
        len(matches),
        len(candidates),
        len(insertions),
    )
    return AttributionReport(
        tool_attributed_count=len(matches),
        manual_count=manual,
        matched_details=tuple(m.detail() for m in matches),
        matches=tuple(matches),
        insertion_usage=tuple(usage),
    )
