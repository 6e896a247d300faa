"""Console provider rendering diffs and attribution summaries with rich."""

from __future__ import annotations

from pathlib import PurePath

from rich.console import Console
from rich.markup import escape

from edit_attribution.attribution.record import AttributionReport
from edit_attribution.domain.diff import DiffResult

_RULE_WIDTH = 80


class ConsoleProvider:
    def __init__(self, console: Console | None = None, *, show_lines: bool = True) -> None:
        self._console = console or Console(stderr=True)
        self._show_lines = show_lines

    def emit_attribution(self, file_id: str, diff_result: DiffResult, report: AttributionReport) -> None:
        out = self._console
        stats = diff_result.statistics
        name = PurePath(file_id).name or file_id
        sign = "+" if stats.net_line_change >= 0 else ""

        out.print("=" * _RULE_WIDTH, highlight=False)
        out.print(f"[bold]CHANGES IN: {escape(name)}[/bold]")
        out.print("=" * _RULE_WIDTH, highlight=False)
        out.print(
            f"Lines: {stats.total_old_lines} -> {stats.total_new_lines} ({sign}{stats.net_line_change})",
            highlight=False,
        )
        out.print(
            f"Added: {stats.lines_added} | Removed: {stats.lines_removed} | Modified: {stats.lines_modified}",
            highlight=False,
        )

        if self._show_lines:
            self._print_lines(diff_result)

        out.print()
        color = "green" if report.tool_attributed_count else "dim"
        out.print(f"[{color}]{escape(report.summary())}[/{color}]")
        for detail in report.matched_details:
            out.print(f"  [cyan]*[/cyan] {escape(detail)}", highlight=False)
        out.print("=" * _RULE_WIDTH, highlight=False)

    def _print_lines(self, diff_result: DiffResult) -> None:
        out = self._console
        if diff_result.added:
            out.print("\n[green]ADDED LINES:[/green]")
            for line in diff_result.added:
                out.print(f"  [{line.line_number}] + {escape(line.content)}", highlight=False)
        if diff_result.removed:
            out.print("\n[red]REMOVED LINES:[/red]")
            for line in diff_result.removed:
                out.print(f"  [{line.line_number}] - {escape(line.content)}", highlight=False)
        if diff_result.modified:
            out.print("\n[yellow]MODIFIED LINES:[/yellow]")
            for line in diff_result.modified:
                out.print(f"  [{line.line_number}]", highlight=False)
                out.print(f"    - {escape(line.old_content)}", highlight=False)
                out.print(f"    + {escape(line.new_content)}", highlight=False)

    def flush(self) -> None:
        self._console.file.flush()

    def shutdown(self) -> None:
        pass
