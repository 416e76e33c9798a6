# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides runner signals, fake workspaces (submodule and plain clone layouts)
and an in-memory cache store. No network and no git binary required.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import pytest

from vcpkgcache.cache.base_cache_store import BaseCacheStore
from vcpkgcache.cache.models import SaveResult
from vcpkgcache.core.models import EnvironmentSignals, KeySet

SUBMODULE_COMMIT = "abc123"
CLONE_COMMIT = "0123456789abcdef0123456789abcdef01234567"


class RecordingCacheStore(BaseCacheStore):
    """In-memory store that records calls and returns a scripted outcome."""

    def __init__(
        self,
        save_status: str = "saved",
        detail: str = "",
        raises: Exception | None = None,
        hit_key: str | None = None,
    ) -> None:
        self.save_status = save_status
        self.detail = detail
        self.raises = raises
        self.hit_key = hit_key
        self.save_calls: list[tuple[tuple[str, ...], str]] = []
        self.restore_calls: list[tuple[tuple[str, ...], str, tuple[str, ...]]] = []

    async def save(self, paths: Sequence[str], key: str) -> SaveResult:
        self.save_calls.append((tuple(paths), key))
        if self.raises is not None:
            raise self.raises
        return SaveResult(
            status=self.save_status, key=key, detail=self.detail, paths=tuple(paths)
        )

    async def restore(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str] = (),
    ) -> str | None:
        self.restore_calls.append((tuple(paths), primary_key, tuple(restore_keys)))
        return self.hit_key


# === FIXTURES: Runner signals ===


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty workspace root."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def signals(workspace: Path) -> EnvironmentSignals:
    """Signals of an ubuntu runner image."""
    return EnvironmentSignals(
        image_os="ubuntu22",
        image_version="20240101.1",
        platform="linux",
        workspace_root=str(workspace),
    )


# === FIXTURES: Workspace layouts ===


@pytest.fixture
def submodule_workspace(workspace: Path) -> Path:
    """Workspace where vcpkg is a git submodule at ./vcpkg."""
    (workspace / "vcpkg").mkdir()
    (workspace / "vcpkg" / ".git").write_text("gitdir: ../.git/modules/vcpkg\n")
    modules = workspace / ".git" / "modules" / "vcpkg"
    modules.mkdir(parents=True)
    (modules / "HEAD").write_text(f"{SUBMODULE_COMMIT}\n")
    return workspace


@pytest.fixture
def clone_workspace(workspace: Path) -> Path:
    """Workspace where vcpkg is a plain clone at ./vcpkg."""
    (workspace / "vcpkg" / ".git").mkdir(parents=True)
    return workspace


@pytest.fixture
def key_set() -> KeySet:
    return KeySet(
        primary="runnerOS=ubuntu22_vcpkg=2024",
        restore_keys=("runnerOS=ubuntu22",),
    )


@pytest.fixture
def recording_store() -> RecordingCacheStore:
    return RecordingCacheStore()


@pytest.fixture
def make_store() -> type[RecordingCacheStore]:
    """Factory for stores with a scripted save outcome."""
    return RecordingCacheStore


@pytest.fixture(autouse=True)
def _reset_vcpkgcache_logger():
    """Drop handlers installed by setup_logging() so they never outlive a test."""
    yield
    root = logging.getLogger("vcpkgcache")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
