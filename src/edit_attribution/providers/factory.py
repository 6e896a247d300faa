"""Provider factory."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

PROVIDERS = ["console", "otlp"]


def parse_headers(raw: str) -> dict[str, str]:
    headers: dict[str, str] = {}
    for pair in raw.split(","):
        if "=" in pair:
            k, v = pair.split("=", 1)
            headers[k.strip()] = v.strip()
    return headers


def create_provider(name: str, config: dict[str, Any]):
    """Create a provider instance from merged config. Returns None on failure."""
    pcfg = config.get(name, {})

    if name == "console":
        from edit_attribution.providers.console import ConsoleProvider

        return ConsoleProvider(show_lines=bool(pcfg.get("show_lines", True)))

    if name == "otlp":
        try:
            from edit_attribution.providers.otlp import OTLPProvider
        except ImportError:
            logger.warning("opentelemetry is not installed; otlp provider unavailable")
            return None
        endpoint = pcfg.get("endpoint", "")
        if not endpoint:
            return None
        headers_raw = pcfg.get("headers", "")
        headers = parse_headers(headers_raw) if headers_raw else {}
        try:
            return OTLPProvider(endpoint=endpoint, headers=headers)
        except Exception:
            logger.warning("Failed to create OTLPProvider", exc_info=True)
            return None

    return None
