# src/core/errors.py — v1
"""Exception hierarchy for vcpkgcache."""

from __future__ import annotations


class VcpkgCacheError(Exception):
    """Base class for all vcpkgcache errors."""


class GitQueryError(VcpkgCacheError):
    """The commit id of a git working tree could not be obtained."""

    def __init__(self, directory: str, reason: str) -> None:
        self.directory = directory
        self.reason = reason
        super().__init__(f"Cannot read git commit id in '{directory}': {reason}")


class CacheValidationError(VcpkgCacheError):
    """A save request was malformed (bad key or path list).

    Always fatal: a silently broken cache is worse than a failed step.
    """

    def __init__(self, key: str, detail: str) -> None:
        self.key = key
        self.detail = detail
        super().__init__(f"Invalid cache save request for key '{key}': {detail}")
