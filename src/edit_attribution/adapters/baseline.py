"""Baseline content sources (last committed revision of a file)."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

_GIT_TIMEOUT_S = 5


@runtime_checkable
class BaselineSource(Protocol):
    def get_baseline_content(self, file_id: str) -> str | None: ...


class StaticBaseline:
    """In-memory baselines keyed by file identifier."""

    def __init__(self, contents: Mapping[str, str] | None = None) -> None:
        self._contents = dict(contents or {})

    def set(self, file_id: str, content: str) -> None:
        self._contents[file_id] = content

    def get_baseline_content(self, file_id: str) -> str | None:
        return self._contents.get(file_id)


class GitBaseline:
    """Read the HEAD blob of a file through the git executable.

    Missing git, a missing repository, or a file absent from HEAD are
    logged as warnings and reported as ``None``.
    """

    def __init__(self, repo_root: Path | None = None, *, revision: str = "HEAD") -> None:
        self._repo_root = repo_root
        self.revision = revision

    def get_baseline_content(self, file_id: str) -> str | None:
        path = Path(file_id).expanduser()
        start = path.parent if path.is_absolute() else Path.cwd()
        repo_root = self._repo_root or git_toplevel(start)
        if repo_root is None:
            return None

        abs_path = path if path.is_absolute() else (Path.cwd() / path)
        try:
            rel_path = abs_path.resolve().relative_to(repo_root.resolve()).as_posix()
        except ValueError:
            logger.warning("File Not Found in Git History: %s is outside %s", file_id, repo_root)
            return None

        try:
            result = subprocess.run(
                ["git", "show", f"{self.revision}:{rel_path}"],
                cwd=repo_root,
                capture_output=True,
                timeout=_GIT_TIMEOUT_S,
            )
        except FileNotFoundError:
            logger.warning("Git Not Available")
            return None
        except subprocess.TimeoutExpired:
            logger.warning("git show timed out for %s", rel_path)
            return None

        if result.returncode != 0:
            logger.warning("File Not Found in Git History: %s", rel_path)
            logger.debug("git show stderr: %s", result.stderr.decode("utf-8", errors="replace").strip())
            return None
        # Raw bytes: text mode would fold "\r\n" into "\n" and reject non-UTF-8 blobs.
        return result.stdout.decode("utf-8", errors="replace")


def git_toplevel(directory: Path) -> Path | None:
    while not directory.is_dir() and directory != directory.parent:
        directory = directory.parent
    if not directory.is_dir():
        logger.warning("No Git Repository Found: %s does not exist", directory)
        return None
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=directory,
            capture_output=True,
            text=True,
            timeout=_GIT_TIMEOUT_S,
        )
    except FileNotFoundError:
        logger.warning("Git Not Available")
        return None
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("git rev-parse --show-toplevel failed in %s: %s", directory, e)
        return None
    toplevel = result.stdout.strip() if result.returncode == 0 else ""
    if not toplevel:
        logger.warning("No Git Repository Found for %s", directory)
        return None
    return Path(toplevel)
