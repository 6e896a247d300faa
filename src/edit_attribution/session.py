"""Change/save event pipeline tying the tracker, diff and attribution together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable

from edit_attribution.adapters.baseline import BaselineSource
from edit_attribution.attribution import attribute
from edit_attribution.attribution.record import AttributionReport
from edit_attribution.domain.diff import DiffResult, diff
from edit_attribution.providers import Provider
from edit_attribution.runtime.tracker import InsertionEvent, InsertionTracker

logger = logging.getLogger(__name__)

DEFAULT_FILE_TYPES = (".py",)


@dataclass(frozen=True)
class SaveOutcome:
    file_id: str
    diff: DiffResult
    report: AttributionReport


class AttributionSession:
    """Host-facing shell around one process-wide InsertionTracker."""

    def __init__(
        self,
        tracker: InsertionTracker,
        baseline: BaselineSource,
        provider: Provider | None = None,
        *,
        file_types: Iterable[str] | None = DEFAULT_FILE_TYPES,
    ) -> None:
        self.tracker = tracker
        self.baseline = baseline
        self.provider = provider
        # None or empty tracks every file.
        self.file_types = tuple(t.lower() for t in file_types or ())
        self.provider_failures = 0

    def is_tracked(self, file_id: str) -> bool:
        if not self.file_types:
            return True
        return PurePath(file_id).suffix.lower() in self.file_types

    def on_file_changed(
        self,
        file_id: str,
        text: str,
        line_number: int,
        replaced_length: int = 0,
    ) -> InsertionEvent | None:
        if not self.is_tracked(file_id):
            return None
        if replaced_length:
            # Replacements are not insertions.
            return None
        return self.tracker.record(file_id, text, line_number)

    def on_file_saved(self, file_id: str, content: str) -> SaveOutcome | None:
        if not self.is_tracked(file_id):
            logger.debug("ignoring save of untracked file %s", file_id)
            return None

        baseline = self.baseline.get_baseline_content(file_id)
        if baseline is None:
            logger.debug("no baseline for %s; skipping attribution", file_id)
            return None

        result = diff(baseline, content)
        report = attribute(result, self.tracker.snapshot(file_id))
        logger.info(
            "%s: +%d -%d ~%d; %s",
            file_id,
            result.statistics.lines_added,
            result.statistics.lines_removed,
            result.statistics.lines_modified,
            report.summary(),
        )

        if self.provider is not None:
            try:
                self.provider.emit_attribution(file_id, result, report)
            except Exception:
                self.provider_failures += 1
                logger.warning("emit_attribution failed", exc_info=True)

        return SaveOutcome(file_id=file_id, diff=result, report=report)
