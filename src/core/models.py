# src/core/models.py — v1
"""Core domain models: RepositoryIdentity, EnvironmentSignals, KeySet, CacheDecision.

All models are transient and scoped to a single invocation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RepositoryIdentity(BaseModel):
    """Identity of the vcpkg checkout as seen from the workspace root."""

    model_config = ConfigDict(frozen=True)

    commit_id: str | None = None
    is_submodule: bool | None = None


class EnvironmentSignals(BaseModel):
    """Read-only runner signals folded into the cache key."""

    model_config = ConfigDict(frozen=True)

    image_os: str = ""
    image_version: str = ""
    platform: str = ""
    workspace_root: str = ""

    @property
    def runner_os(self) -> str:
        """Image OS when the runner advertises one, platform name otherwise."""
        return self.image_os or self.platform


class KeySet(BaseModel):
    """Primary key plus progressively less specific restore keys."""

    model_config = ConfigDict(frozen=True)

    primary: str
    restore_keys: tuple[str, ...] = ()


class CacheDecision(BaseModel):
    """Outcome of the save decision for one invocation."""

    model_config = ConfigDict(frozen=True)

    should_save: bool
    paths_to_cache: tuple[str, ...] = ()
    reason: str = ""
