# src/cache/models.py — v2
"""Cache store models: SaveResult, CacheEntry."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

SaveStatus = Literal["saved", "skipped", "conflict", "invalid", "failed"]


class SaveResult(BaseModel):
    """Tagged outcome of a save attempt.

    saved:    entry written under ``key``.
    skipped:  nothing to do, the exact entry already exists.
    conflict: another writer reserved or created ``key`` first.
    invalid:  malformed request (key or paths).
    failed:   any other store error.
    """

    status: SaveStatus
    key: str
    detail: str = ""
    paths: tuple[str, ...] = ()

    @property
    def is_fatal(self) -> bool:
        return self.status == "invalid"


class CacheEntry(BaseModel):
    """Metadata of one stored archive."""

    key: str
    paths: tuple[str, ...]
    archive: str
    created_at: datetime
    size_bytes: int = 0


class CacheState(BaseModel):
    """Keys and restore outcome handed from the restore step to the save step."""

    primary_key: str
    restore_keys: tuple[str, ...] = ()
    hit_key: str | None = None
