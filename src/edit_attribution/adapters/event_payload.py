"""Normalize host event payloads into change/save events."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    file_id: str
    text: str
    line_number: int
    replaced_length: int = 0
    timestamp_ms: int | None = None


@dataclass(frozen=True)
class SaveEvent:
    file_id: str
    content: str | None = None


HostEvent = ChangeEvent | SaveEvent


def _file_id(payload: dict[str, Any]) -> str | None:
    file_id = payload.get("file") or payload.get("file_id") or payload.get("path")
    if not isinstance(file_id, str) or not file_id:
        return None
    return file_id


def _int_or(value: Any, default: int | None) -> int | None:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default
    return default


def parse_event(payload: dict[str, Any]) -> HostEvent | None:
    """Parse one JSON object into an event; ``None`` when it is not one."""
    if not isinstance(payload, dict):
        return None
    kind = payload.get("event") or payload.get("type")
    file_id = _file_id(payload)
    if file_id is None:
        return None

    if kind == "change":
        text = payload.get("text")
        if not isinstance(text, str):
            return None
        return ChangeEvent(
            file_id=file_id,
            text=text,
            line_number=_int_or(payload.get("line"), 1) or 1,
            replaced_length=_int_or(payload.get("replaced"), 0) or 0,
            timestamp_ms=_int_or(payload.get("timestamp_ms"), None),
        )

    if kind == "save":
        content = payload.get("content")
        return SaveEvent(file_id=file_id, content=content if isinstance(content, str) else None)

    return None


def iter_events(lines: Iterable[str]) -> Iterator[HostEvent]:
    """Decode JSONL lines, skipping blanks and anything unparseable."""
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("skipping malformed event on line %d", lineno)
            continue
        event = parse_event(payload)
        if event is None:
            logger.debug("skipping unrecognized payload on line %d", lineno)
            continue
        yield event
