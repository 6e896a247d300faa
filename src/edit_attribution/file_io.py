"""File helpers: atomic config writes and tolerant text reads."""

from __future__ import annotations

import os
from pathlib import Path


def atomic_write(path: Path, data: bytes, mode: int = 0o600) -> None:
    """Write *data* to a sibling temp file with *mode*, then rename over *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    fd = os.open(str(tmp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    try:
        os.write(fd, data)
        os.fsync(fd)
    finally:
        os.close(fd)
    tmp.replace(path)


def read_text(path: Path) -> str:
    """Read a source file as the editor would show it (undecodable bytes replaced)."""
    # newline="" keeps "\r\n" intact; diffing does not normalize line endings.
    with open(path, encoding="utf-8", errors="replace", newline="") as f:
        return f.read()
