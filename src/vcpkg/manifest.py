# src/vcpkg/manifest.py — v1
"""Locate the project's vcpkg.json manifest with a glob expression.

Zero or several matches are not fatal: a warning is logged and None returned.
"""

from __future__ import annotations

import glob
import logging
import os
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

VCPKG_JSON = "vcpkg.json"


def find_files(
    pattern: str,
    ignore_patterns: Sequence[str] = (),
    root: str | Path | None = None,
) -> list[str]:
    """Files under ``root`` matching ``pattern`` and none of ``ignore_patterns``.

    Patterns are relative to ``root`` and support ``**``. Results are sorted
    and joined with ``root``.
    """
    root_dir = str(root) if root is not None else os.getcwd()
    matches = set(glob.glob(pattern, root_dir=root_dir, recursive=True))
    for ignore in ignore_patterns:
        matches -= set(glob.glob(ignore, root_dir=root_dir, recursive=True))
    return sorted(
        os.path.join(root_dir, m)
        for m in matches
        if os.path.isfile(os.path.join(root_dir, m))
    )


def find_vcpkg_json(
    glob_pattern: str,
    ignore_patterns: Sequence[str] = (),
    root: str | Path | None = None,
) -> str | None:
    """Return the unique manifest path matching ``glob_pattern``, else None."""
    logger.debug("find_vcpkg_json(%s)", glob_pattern)
    try:
        found = find_files(glob_pattern, ignore_patterns, root)
    except (OSError, ValueError) as e:
        logger.warning("Failed to search for %s: %s", VCPKG_JSON, e)
        return None

    if len(found) == 1:
        logger.info("Found %s at '%s'", VCPKG_JSON, found[0])
        return found[0]
    if len(found) > 1:
        logger.warning(
            "The file %s was found multiple times with glob expression '%s'",
            VCPKG_JSON, glob_pattern,
        )
    else:
        logger.warning(
            "The file %s was not found with glob expression '%s'",
            VCPKG_JSON, glob_pattern,
        )
    return None
