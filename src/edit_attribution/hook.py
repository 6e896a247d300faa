"""Event-stream entrypoint: JSONL change/save events on stdin."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Any, Iterable

from edit_attribution.adapters.baseline import BaselineSource, GitBaseline
from edit_attribution.adapters.event_payload import ChangeEvent, SaveEvent, iter_events
from edit_attribution.config import get_int, normalize_file_types
from edit_attribution.file_io import read_text
from edit_attribution.providers.factory import create_provider
from edit_attribution.runtime.tracker import EventClock, InsertionTracker
from edit_attribution.session import AttributionSession, SaveOutcome

logger = logging.getLogger(__name__)


def build_tracker(config: dict[str, Any], clock: EventClock | None = None) -> InsertionTracker:
    return InsertionTracker(
        clock or EventClock(),
        retention_window_ms=get_int(config, "retention_window_ms"),
        min_length=get_int(config, "min_insertion_length"),
    )


def replay_events(
    session: AttributionSession,
    events: Iterable[ChangeEvent | SaveEvent],
    clock: EventClock | None = None,
) -> list[SaveOutcome]:
    """Feed events through *session* in order and collect save outcomes."""
    outcomes: list[SaveOutcome] = []
    for event in events:
        if isinstance(event, ChangeEvent):
            if clock is not None:
                clock.pin(event.timestamp_ms)
            session.on_file_changed(event.file_id, event.text, event.line_number, event.replaced_length)
            continue

        content = event.content
        if content is None:
            try:
                content = read_text(Path(event.file_id))
            except OSError as e:
                logger.warning("Cannot read saved file %s: %s", event.file_id, e)
                continue
        try:
            outcome = session.on_file_saved(event.file_id, content)
        except Exception:
            logger.warning("Attribution failed for %s; skipping save", event.file_id, exc_info=True)
            continue
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes


def run_hook(
    lines: Iterable[str],
    config: dict[str, Any],
    *,
    provider_factory=create_provider,
    baseline: BaselineSource | None = None,
) -> int:
    start = time.time()

    provider_name = config.get("provider") or "console"
    provider = provider_factory(provider_name, config)
    if not provider:
        logger.warning("Failed to create provider: %s", provider_name)
        return 1

    clock = EventClock()
    session = AttributionSession(
        build_tracker(config, clock),
        baseline or GitBaseline(),
        provider,
        file_types=normalize_file_types(config.get("file_types", [".py"])),
    )

    try:
        outcomes = replay_events(session, iter_events(lines), clock)
        try:
            provider.flush()
        except Exception:
            logger.warning("flush failed", exc_info=True)
            return 1
        logger.info(
            "Processed %d save(s) in %.2fs (provider=%s, retained insertions=%d)",
            len(outcomes),
            time.time() - start,
            provider_name,
            len(session.tracker),
        )
        return 1 if session.provider_failures else 0
    except Exception:
        logger.warning("Unexpected failure", exc_info=True)
        return 1
    finally:
        try:
            provider.shutdown()
        except Exception:
            logger.warning("provider.shutdown() failed", exc_info=True)


def _parse_flag(name: str) -> str | None:
    """Extract --<name> <value> from sys.argv without interfering with stdin."""
    args = sys.argv[1:]
    for i, arg in enumerate(args):
        if arg == f"--{name}" and i + 1 < len(args):
            return args[i + 1]
        if arg.startswith(f"--{name}="):
            return arg.split("=", 1)[1]
    return None


def main() -> int:
    from edit_attribution.config import load_config, log_dir
    from edit_attribution.logging_setup import configure

    config = load_config()
    configure(log_dir(config), debug=bool(config.get("debug", False)))

    provider = _parse_flag("provider")
    if provider:
        config["provider"] = provider

    return run_hook(sys.stdin, config)


if __name__ == "__main__":
    sys.exit(main())
