"""Attribution report schema."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from edit_attribution.attribution.matcher import MatchKind

DETAIL_CONTENT_CAP = 60


@dataclass(frozen=True)
class MatchedLine:
    line_number: int
    content: str
    kind: MatchKind
    insertion_count: int  # retained insertions that explain this line

    def detail(self) -> str:
        text = self.content.strip()
        if len(text) > DETAIL_CONTENT_CAP:
            text = text[:DETAIL_CONTENT_CAP] + "..."
        return f"Line {self.line_number}: {text}"


@dataclass(frozen=True)
class AttributionReport:
    tool_attributed_count: int
    manual_count: int
    matched_details: tuple[str, ...] = ()
    matches: tuple[MatchedLine, ...] = ()
    insertion_usage: tuple[int, ...] = field(default=())

    @property
    def total(self) -> int:
        return self.tool_attributed_count + self.manual_count

    @property
    def percentage(self) -> int:
        if self.total == 0:
            return 0
        # Half-up rounding; round() would send 50.5 to 50.
        return math.floor(100 * self.tool_attributed_count / self.total + 0.5)

    def summary(self) -> str:
        return (
            f"Tool-attributed: {self.tool_attributed_count} lines ({self.percentage}%) "
            f"| Manual: {self.manual_count} lines"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool_attributed_count": self.tool_attributed_count,
            "manual_count": self.manual_count,
            "percentage": self.percentage,
            "matched_details": list(self.matched_details),
            "matches": [
                {
                    "line_number": m.line_number,
                    "content": m.content,
                    "kind": m.kind.value,
                    "insertion_count": m.insertion_count,
                }
                for m in self.matches
            ],
        }
