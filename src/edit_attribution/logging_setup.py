"""Logging configuration for edit-attribution entrypoints."""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

_PACKAGE = "edit_attribution"
_LOG_NAME = "edit_attribution.log"
_LOG_BYTES = 1 * 1024 * 1024  # 1 MiB per file
_LOG_BACKUPS = 3


def configure(
    log_dir: Path | None,
    *,
    debug: bool = False,
    verbose: bool = False,
    reconfigure: bool = False,
) -> None:
    """Attach handlers to the edit_attribution package logger.

    *log_dir* None skips the rotating file handler (one-shot CLI commands).
    *verbose* lowers the stderr threshold from WARNING to INFO.
    Idempotent unless *reconfigure* is True.
    """
    pkg_logger = logging.getLogger(_PACKAGE)
    if pkg_logger.handlers and not reconfigure:
        return
    if reconfigure:
        for h in list(pkg_logger.handlers):
            pkg_logger.removeHandler(h)
            h.close()

    pkg_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if log_dir is not None:
        log_file = log_dir / _LOG_NAME
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=_LOG_BYTES,
                backupCount=_LOG_BACKUPS,
                encoding="utf-8",
            )
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            pkg_logger.addHandler(fh)
        except OSError as exc:
            print(
                f"edit-attribution: WARNING: could not open log file {log_file}: {exc}",
                file=sys.stderr,
            )

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(logging.INFO if verbose else logging.WARNING)
    sh.setFormatter(logging.Formatter("edit-attribution: %(message)s"))
    pkg_logger.addHandler(sh)

    pkg_logger.propagate = False
