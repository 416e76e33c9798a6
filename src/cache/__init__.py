"""Cache key derivation and cache store interaction."""

from vcpkgcache.cache.engine import CacheKeyEngine
from vcpkgcache.cache.keys import build_key_set, create_key_set

__all__ = ["CacheKeyEngine", "build_key_set", "create_key_set"]
