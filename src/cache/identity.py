# src/cache/identity.py — v1
"""Resolve which commit of vcpkg is checked out, and whether it is a submodule.

Detection order:
    1. ``<workspace>/.git/modules/<relative path>/HEAD`` exists: submodule,
       the file content is the commit id.
    2. ``<target>/.git`` exists: ordinary clone, the commit id comes from the
       injected commit id query.
    3. Neither: identity fields stay absent.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from vcpkgcache.cache.git import git_commit_id
from vcpkgcache.core.models import RepositoryIdentity

logger = logging.getLogger(__name__)

CommitIdQuery = Callable[[Path], str]


def resolve_target_path(workspace_root: str | Path, target_dir: str | Path) -> Path:
    """Absolute, normalized location of ``target_dir`` relative to the workspace."""
    target = Path(target_dir)
    if not target.is_absolute():
        target = Path(workspace_root) / target
    return Path(os.path.normpath(os.path.abspath(target)))


def submodule_head_path(workspace_root: str | Path, target: Path) -> Path | None:
    """Where git keeps HEAD for ``target`` if it were a submodule of the workspace.

    Returns None when ``target`` does not live under the workspace root.
    """
    root = Path(os.path.normpath(os.path.abspath(workspace_root)))
    try:
        rel_path = target.relative_to(root)
    except ValueError:
        return None
    if rel_path == Path("."):
        return None
    return root / ".git" / "modules" / rel_path / "HEAD"


def resolve_identity(
    workspace_root: str | Path | None,
    target_dir: str | Path,
    commit_id_query: CommitIdQuery = git_commit_id,
) -> RepositoryIdentity:
    """Resolve the RepositoryIdentity of ``target_dir``.

    Args:
        workspace_root: Root of the workspace checkout. Empty means unknown.
        target_dir: vcpkg directory, absolute or relative to the workspace.
        commit_id_query: Returns the HEAD commit of a working tree.

    Returns:
        RepositoryIdentity; both fields are None when detection is inconclusive.

    Raises:
        GitQueryError: propagated from ``commit_id_query`` for ordinary clones.
    """
    if not workspace_root:
        logger.debug("No workspace root, vcpkg commit id cannot be resolved")
        return RepositoryIdentity()

    target = resolve_target_path(workspace_root, target_dir)
    logger.debug("Resolved vcpkg path '%s'", target)

    head_path = submodule_head_path(workspace_root, target)
    logger.debug("Submodule HEAD path '%s'", head_path)

    if head_path is not None and head_path.is_file():
        try:
            commit_id = head_path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read submodule HEAD '%s': %s", head_path, e)
            return RepositoryIdentity()
        return RepositoryIdentity(commit_id=commit_id or None, is_submodule=True)

    if (target / ".git").exists():
        commit_id = commit_id_query(target).strip()
        return RepositoryIdentity(commit_id=commit_id or None, is_submodule=False)

    return RepositoryIdentity()
