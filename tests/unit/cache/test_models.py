# tests/unit/cache/test_models.py — v2
"""Tests for cache/models.py and core/models.py."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from vcpkgcache.cache.models import CacheEntry, CacheState, SaveResult
from vcpkgcache.core.models import CacheDecision, EnvironmentSignals, KeySet, RepositoryIdentity


class TestSaveResult:
    def test_only_invalid_is_fatal(self):
        for status in ("saved", "skipped", "conflict", "failed"):
            assert SaveResult(status=status, key="k").is_fatal is False
        assert SaveResult(status="invalid", key="k").is_fatal is True

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            SaveResult(status="exploded", key="k")


class TestCacheEntry:
    def test_json_roundtrip(self):
        entry = CacheEntry(
            key="runnerOS=linux",
            paths=("/vcpkg", "!/vcpkg/packages"),
            archive="abc.tar.gz",
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
            size_bytes=42,
        )
        restored = CacheEntry.model_validate_json(entry.model_dump_json())
        assert restored == entry


class TestCacheState:
    def test_defaults(self):
        state = CacheState(primary_key="k")
        assert state.restore_keys == ()
        assert state.hit_key is None


class TestCoreModels:
    def test_identity_defaults_absent(self):
        identity = RepositoryIdentity()
        assert identity.commit_id is None
        assert identity.is_submodule is None

    def test_key_set_frozen(self):
        keys = KeySet(primary="a")
        with pytest.raises(ValidationError):
            keys.primary = "b"  # type: ignore[misc]

    def test_runner_os_prefers_image_os(self):
        assert EnvironmentSignals(image_os="macos14", platform="darwin").runner_os == "macos14"
        assert EnvironmentSignals(platform="darwin").runner_os == "darwin"

    def test_decision_defaults(self):
        decision = CacheDecision(should_save=False)
        assert decision.paths_to_cache == ()
