"""Provider interface for attribution output."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from edit_attribution.attribution.record import AttributionReport
    from edit_attribution.domain.diff import DiffResult


@runtime_checkable
class Provider(Protocol):
    def emit_attribution(
        self,
        file_id: str,
        diff_result: "DiffResult",
        report: "AttributionReport",
    ) -> None: ...
    def flush(self) -> None: ...
    def shutdown(self) -> None: ...
