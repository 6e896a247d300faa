"""Tests for edit_attribution.logging_setup."""

from __future__ import annotations

import tests._path_setup  # noqa: F401

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from edit_attribution.logging_setup import configure, _LOG_NAME, _PACKAGE


@pytest.fixture(autouse=True)
def _clean_logger():
    """Reset the package logger between tests."""
    pkg = logging.getLogger(_PACKAGE)
    pkg.handlers.clear()
    pkg.setLevel(logging.WARNING)
    yield
    for h in pkg.handlers:
        h.close()
    pkg.handlers.clear()
    pkg.setLevel(logging.WARNING)
    pkg.propagate = True


class TestConfigure:
    def test_attaches_file_and_stderr_handlers(self, tmp_path: Path):
        configure(tmp_path, debug=True)
        pkg = logging.getLogger(_PACKAGE)
        handler_types = {type(h).__name__ for h in pkg.handlers}
        assert len(pkg.handlers) == 2
        assert "RotatingFileHandler" in handler_types
        assert "StreamHandler" in handler_types

    def test_no_log_dir_attaches_only_stderr(self):
        configure(None)
        pkg = logging.getLogger(_PACKAGE)
        assert len(pkg.handlers) == 1
        assert type(pkg.handlers[0]).__name__ == "StreamHandler"

    def test_idempotent_without_reconfigure(self, tmp_path: Path):
        configure(tmp_path)
        configure(tmp_path)
        assert len(logging.getLogger(_PACKAGE).handlers) == 2

    def test_reconfigure_replaces_handlers(self, tmp_path: Path):
        configure(tmp_path / "first")
        configure(None, reconfigure=True)
        assert len(logging.getLogger(_PACKAGE).handlers) == 1

    def test_debug_levels(self, tmp_path: Path):
        configure(tmp_path, debug=False)
        assert logging.getLogger(_PACKAGE).level == logging.INFO
        configure(tmp_path, debug=True, reconfigure=True)
        assert logging.getLogger(_PACKAGE).level == logging.DEBUG

    def test_verbose_lowers_stderr_threshold(self):
        configure(None, verbose=True)
        assert logging.getLogger(_PACKAGE).handlers[0].level == logging.INFO

    def test_file_handler_failure_prints_to_stderr(self, capsys):
        with patch("edit_attribution.logging_setup.Path.mkdir", side_effect=OSError("permission denied")):
            configure(Path("/nonexistent/deeply/nested/dir"))
        captured = capsys.readouterr()
        assert "WARNING" in captured.err
        assert "permission denied" in captured.err
        assert len(logging.getLogger(_PACKAGE).handlers) == 1

    def test_writes_to_log_file(self, tmp_path: Path):
        configure(tmp_path, debug=True)
        logging.getLogger(f"{_PACKAGE}.session").info("saved a.py")
        for h in logging.getLogger(_PACKAGE).handlers:
            h.flush()
        assert "saved a.py" in (tmp_path / _LOG_NAME).read_text()

    def test_propagate_is_false(self, tmp_path: Path):
        configure(tmp_path)
        assert logging.getLogger(_PACKAGE).propagate is False
