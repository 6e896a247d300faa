"""OTLP provider using OpenTelemetry SDK."""

from __future__ import annotations

from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from edit_attribution.attribution.record import AttributionReport
from edit_attribution.domain.diff import DiffResult


class OTLPProvider:
    def __init__(self, endpoint: str, headers: dict[str, str] | None = None) -> None:
        resource = Resource.create({"service.name": "edit-attribution"})
        exporter = OTLPSpanExporter(endpoint=endpoint, headers=headers or {})
        provider = TracerProvider(resource=resource)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        self._provider = provider
        self._tracer = provider.get_tracer("edit-attribution")

    def emit_attribution(self, file_id: str, diff_result: DiffResult, report: AttributionReport) -> None:
        stats = diff_result.statistics
        attrs: dict[str, str | int] = {
            "file.path": file_id,
            "diff.lines.old": stats.total_old_lines,
            "diff.lines.new": stats.total_new_lines,
            "diff.lines.added": stats.lines_added,
            "diff.lines.removed": stats.lines_removed,
            "diff.lines.modified": stats.lines_modified,
            "diff.lines.unchanged": stats.lines_unchanged,
            "diff.chars.delta": stats.char_difference,
            "attribution.tool_lines": report.tool_attributed_count,
            "attribution.manual_lines": report.manual_count,
            "attribution.percentage": report.percentage,
        }
        with self._tracer.start_as_current_span("File Save - Attribution", attributes=attrs):
            for m in report.matches:
                with self._tracer.start_as_current_span(
                    "attribution.matched_line",
                    attributes={
                        "file.path": file_id,
                        "line.number": m.line_number,
                        "match.kind": m.kind.value,
                        "match.insertion_count": m.insertion_count,
                    },
                ):
                    pass

    def flush(self) -> None:
        self._provider.force_flush()

    def shutdown(self) -> None:
        self._provider.shutdown()
