# src/cache/base_cache_store.py — v2
"""Abstract cache store interface and shared request validation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from vcpkgcache.cache.models import SaveResult

MAX_KEY_LENGTH = 512
EXCLUDE_PREFIX = "!"


def validate_key(key: str) -> str | None:
    """Return a description of what is wrong with ``key``, or None."""
    if not key:
        return "key must not be empty"
    if len(key) > MAX_KEY_LENGTH:
        return f"key is longer than {MAX_KEY_LENGTH} characters"
    if "," in key:
        return "key must not contain commas"
    return None


def validate_save_request(paths: Sequence[str], key: str) -> str | None:
    """Return a description of what is wrong with a save request, or None."""
    if not any(p and not p.startswith(EXCLUDE_PREFIX) for p in paths):
        return "at least one path to cache is required"
    return validate_key(key)


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends.

    Implementations report save outcomes through SaveResult and only raise
    for programming errors.
    """

    @abstractmethod
    async def save(self, paths: Sequence[str], key: str) -> SaveResult:
        """Archive ``paths`` under ``key``. Reserve first; a taken key is a conflict."""

    @abstractmethod
    async def restore(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str] = (),
    ) -> str | None:
        """Restore the best entry and return its key, or None on a miss."""
