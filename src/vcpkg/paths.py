# src/vcpkg/paths.py — v1
"""Paths of a vcpkg installation worth caching.

Only the tool itself is cached. Built packages are left to vcpkg's own binary
caching, so packages/, buildtrees/ and downloads/ are excluded ('!' prefix).
"""

from __future__ import annotations

import logging
import os

from vcpkgcache.cache.decision import normalize_paths

logger = logging.getLogger(__name__)

EXCLUDED_SUBDIRS = ("packages", "buildtrees", "downloads")


def get_ordinary_cached_paths(vcpkg_root: str) -> list[str]:
    """vcpkg root plus exclusions of its build output directories."""
    paths = [vcpkg_root]
    paths.extend(
        "!" + os.path.normpath(os.path.join(vcpkg_root, subdir))
        for subdir in EXCLUDED_SUBDIRS
    )
    return paths


def get_all_cached_paths(vcpkg_root: str) -> tuple[str, ...]:
    """Normalized, de-duplicated cacheable paths for ``vcpkg_root``."""
    paths = normalize_paths(get_ordinary_cached_paths(vcpkg_root))
    logger.debug("Cached paths for '%s': %s", vcpkg_root, list(paths))
    return paths
