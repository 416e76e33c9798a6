# src/cache/git.py — v1
"""Commit id query for a git working tree."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from vcpkgcache.core.errors import GitQueryError

logger = logging.getLogger(__name__)

GIT_TIMEOUT_S = 30


def git_commit_id(directory: str | Path) -> str:
    """Return the commit id of HEAD in the working tree at ``directory``.

    Raises:
        GitQueryError: git is missing, timed out or exited non-zero.
    """
    cmd = ["git", "log", "-1", "--format=%H"]
    logger.debug("Running %s in %s", " ".join(cmd), directory)
    try:
        result = subprocess.run(
            cmd,
            cwd=str(directory),
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_S,
        )
    except FileNotFoundError as e:
        raise GitQueryError(str(directory), f"git executable not found ({e})") from e
    except subprocess.TimeoutExpired as e:
        raise GitQueryError(str(directory), f"timed out after {GIT_TIMEOUT_S}s") from e
    except OSError as e:
        raise GitQueryError(str(directory), f"cannot run git ({e})") from e

    if result.returncode != 0:
        raise GitQueryError(
            str(directory),
            f"exit code {result.returncode}: {result.stderr.strip()}",
        )
    return result.stdout.strip()
