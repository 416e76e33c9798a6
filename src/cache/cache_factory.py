# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from vcpkgcache.cache.base_cache_store import BaseCacheStore
from vcpkgcache.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the local backend.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "local" if settings is None else settings.cache_backend

    if backend == "local":
        from vcpkgcache.cache.local_store import LocalCacheStore
        cache_root = "~/.vcpkgcache/cache" if settings is None else str(settings.cache_root)
        return LocalCacheStore(cache_root=cache_root)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
