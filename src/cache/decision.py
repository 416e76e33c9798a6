# src/cache/decision.py — v1
"""Save decision and cacheable path normalization. Pure functions, no I/O."""

from __future__ import annotations

from collections.abc import Iterable

from vcpkgcache.cache.matching import is_exact_match
from vcpkgcache.core.models import CacheDecision, KeySet


def normalize_paths(raw_paths: Iterable[str]) -> tuple[str, ...]:
    """Trim entries, drop blanks and duplicates, keep first-occurrence order."""
    seen: dict[str, None] = {}
    for raw in raw_paths:
        path = raw.strip()
        if path and path not in seen:
            seen[path] = None
    return tuple(seen)


def decide_save(
    keys: KeySet,
    hit_key: str | None,
    candidate_paths: Iterable[str],
) -> CacheDecision:
    """Decide whether a new cache entry must be written under ``keys.primary``."""
    if hit_key and is_exact_match(keys.primary, hit_key):
        return CacheDecision(
            should_save=False,
            reason=f"cache hit occurred on the primary key '{keys.primary}'",
        )

    reason = (
        "primary key was missed"
        if not hit_key
        else f"fallback restore key '{hit_key}' was hit"
    )
    return CacheDecision(
        should_save=True,
        paths_to_cache=normalize_paths(candidate_paths),
        reason=reason,
    )
