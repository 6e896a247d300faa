"""edit-attribution configuration.

Config files:
  - Global:  ~/.config/edit-attribution/config.json
  - Project: .edit-attribution.json (working directory)

Merge order: defaults → global → project → environment variables (highest priority).
"""

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from .file_io import atomic_write

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = Path.home() / ".config" / "edit-attribution" / "logs"

DEFAULTS: Dict[str, Any] = {
    "provider": "console",
    "file_types": [".py"],
    "retention_window_ms": 60_000,
    "min_insertion_length": 5,
    "debug": False,
}


class Scope(str, Enum):
    GLOBAL = "global"
    PROJECT = "project"


def config_path(scope: Scope) -> Path:
    if scope is Scope.PROJECT:
        return Path.cwd() / ".edit-attribution.json"
    return Path.home() / ".config" / "edit-attribution" / "config.json"


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("Ignoring unreadable config file %s", path, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


# config key → env var name
_ENV_OVERRIDES: list[tuple[str, str]] = [
    ("debug", "EDIT_ATTRIBUTION_DEBUG"),
    ("log_dir", "EDIT_ATTRIBUTION_LOG_DIR"),
    ("retention_window_ms", "EDIT_ATTRIBUTION_RETENTION_MS"),
    ("provider", "EDIT_ATTRIBUTION_PROVIDER"),
]

_INT_KEYS = frozenset({"retention_window_ms"})

_PROVIDER_ENV: Dict[str, list[tuple[str, str]]] = {
    "otlp": [
        ("endpoint", "OTEL_EXPORTER_OTLP_ENDPOINT"),
        ("headers", "OTEL_EXPORTER_OTLP_HEADERS"),
    ],
}


def load_config() -> Dict[str, Any]:
    """Load merged config: defaults → global → project → env vars."""
    merged: Dict[str, Any] = {**DEFAULTS}
    for scope in (Scope.GLOBAL, Scope.PROJECT):
        for k, v in _read_json(config_path(scope)).items():
            if isinstance(v, dict) and isinstance(merged.get(k), dict):
                merged[k] = {**merged[k], **v}
            else:
                merged[k] = v

    _apply_env_overrides(merged)
    return merged


def load_raw_config(scope: Scope) -> Dict[str, Any]:
    """Load config for a specific scope without merge/env overrides."""
    return _read_json(config_path(scope))


def _apply_env_overrides(merged: Dict[str, Any]) -> None:
    for config_key, env_var in _ENV_OVERRIDES:
        val = os.environ.get(env_var)
        if not val:
            continue
        if config_key in _INT_KEYS:
            try:
                merged[config_key] = int(val)
            except ValueError:
                logger.warning("Invalid %s value %r; ignoring", env_var, val)
        elif config_key == "debug":
            merged[config_key] = val.lower() == "true"
        else:
            merged[config_key] = val

    for provider, fields in _PROVIDER_ENV.items():
        if not any(os.environ.get(env_var) for _, env_var in fields):
            continue
        section = merged.setdefault(provider, {})
        for field, env_var in fields:
            val = os.environ.get(env_var)
            if val:
                section[field] = val


def save_config(data: Dict[str, Any], scope: Scope) -> None:
    """Save config to the specified scope."""
    atomic_write(config_path(scope), (json.dumps(data, indent=2, ensure_ascii=False) + "\n").encode("utf-8"))


def get_int(config: Dict[str, Any], key: str) -> int:
    """Integer setting from merged config; invalid values fall back to the default."""
    val = config.get(key, DEFAULTS[key])
    if isinstance(val, bool):
        val = None
    try:
        return int(val)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r in config; using %d", key, val, DEFAULTS[key])
        return DEFAULTS[key]


def log_dir(config: Dict[str, Any]) -> Path:
    configured = config.get("log_dir")
    if configured:
        return Path(str(configured)).expanduser().resolve()
    return DEFAULT_LOG_DIR


def normalize_file_types(raw: Any) -> list[str]:
    """Accept ".py,.pyi", ["py", ".pyi"], ... and return dotted lowercase suffixes."""
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = [str(x) for x in raw]
    else:
        return []
    out: list[str] = []
    for item in items:
        item = item.strip().lower()
        if not item:
            continue
        if not item.startswith("."):
            item = "." + item
        if item not in out:
            out.append(item)
    return out


def get_provider_config(config: Dict[str, Any], provider: str) -> Dict[str, str]:
    return config.get(provider, {})
