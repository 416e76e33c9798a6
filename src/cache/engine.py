# src/cache/engine.py — v1
"""CacheKeyEngine — resolve identity, build keys, restore, decide and save.

One invocation runs the stages in order, each awaited before the next:
    RESOLVE_IDENTITY → BUILD_KEYSET → restore → DECIDE_SAVE → save
There are no retries; a store may retry internally.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from vcpkgcache.cache.base_cache_store import BaseCacheStore
from vcpkgcache.cache.decision import decide_save
from vcpkgcache.cache.git import git_commit_id
from vcpkgcache.cache.identity import CommitIdQuery, resolve_identity
from vcpkgcache.cache.keys import build_key_set
from vcpkgcache.cache.models import SaveResult
from vcpkgcache.core.errors import CacheValidationError, GitQueryError
from vcpkgcache.core.models import EnvironmentSignals, KeySet, RepositoryIdentity
from vcpkgcache.logging.context import set_step_context

logger = logging.getLogger(__name__)


class CacheKeyEngine:
    """Cache key derivation and cache interaction for a vcpkg checkout."""

    def __init__(
        self,
        store: BaseCacheStore,
        commit_id_query: CommitIdQuery = git_commit_id,
    ) -> None:
        self._store = store
        self._commit_id_query = commit_id_query

    def resolve_identity(
        self,
        signals: EnvironmentSignals,
        vcpkg_directory: str | Path,
    ) -> RepositoryIdentity:
        """Resolve the vcpkg checkout identity; a failing git query degrades to absent."""
        try:
            identity = resolve_identity(
                signals.workspace_root, vcpkg_directory, self._commit_id_query
            )
        except GitQueryError as e:
            logger.warning("%s", e)
            identity = RepositoryIdentity()
        except Exception as e:
            logger.warning(
                "vcpkg commit id lookup failed: %s: %s", type(e).__name__, e
            )
            identity = RepositoryIdentity()

        if identity.commit_id is None:
            logger.info(
                "'%s' is not a Git repository reachable from the workspace root",
                vcpkg_directory,
            )
        return identity

    def compute_cache_keys(
        self,
        signals: EnvironmentSignals,
        vcpkg_directory: str | Path,
        user_commit_id: str | None = None,
    ) -> KeySet:
        """Compute the KeySet identifying this vcpkg toolset and runner image."""
        set_step_context("compute_keys")
        identity = self.resolve_identity(signals, vcpkg_directory)
        keys = build_key_set(identity, signals, user_commit_id)
        logger.debug("Computed cache keys: %s", keys.model_dump_json())
        return keys

    async def restore_cache(self, keys: KeySet, paths: Sequence[str]) -> str | None:
        """Restore from the store; returns the key that was hit, if any."""
        set_step_context("restore")
        hit_key = await self._store.restore(paths, keys.primary, keys.restore_keys)
        if hit_key is None:
            logger.info("Cache miss on primary key '%s'", keys.primary)
        else:
            logger.info("Cache hit on key '%s'", hit_key)
        return hit_key

    async def save_cache(
        self,
        keys: KeySet,
        hit_key: str | None,
        candidate_paths: Sequence[str],
    ) -> SaveResult:
        """Save a new entry unless the primary key was hit exactly.

        Raises:
            CacheValidationError: the store rejected the request as malformed.
        """
        set_step_context("save")
        decision = decide_save(keys, hit_key, candidate_paths)
        if not decision.should_save:
            logger.info("Saving cache is skipped, because %s", decision.reason)
            return SaveResult(status="skipped", key=keys.primary, detail=decision.reason)

        logger.info("Saving a new cache entry, because %s", decision.reason)
        logger.info("Caching paths: %s", list(decision.paths_to_cache))
        logger.info("Saving cache with primary key '%s' ...", keys.primary)

        try:
            result = await self._store.save(decision.paths_to_cache, keys.primary)
        except CacheValidationError:
            raise
        except Exception as e:
            logger.warning("Cache save failed: %s: %s", type(e).__name__, e)
            return SaveResult(
                status="failed",
                key=keys.primary,
                detail=str(e),
                paths=decision.paths_to_cache,
            )

        if result.status == "invalid":
            raise CacheValidationError(result.key, result.detail)
        if result.status == "conflict":
            logger.info("%s", result.detail)
        elif result.status == "failed":
            logger.warning("%s", result.detail)
        return result
