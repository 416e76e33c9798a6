# src/cache/local_store.py — v1
"""Directory-backed cache store (default CACHE_BACKEND=local).

Layout under CACHE_ROOT, with <h> = sha256(key + path list):
    <h>.tar.gz   archive of the cached paths
    <h>.json     CacheEntry metadata
    <h>.lock     reservation, created atomically before writing

Paths prefixed with '!' are exclusions: matching subtrees are not archived.
Archive members are stored as '<index>/<relative path>' where <index> points
into CacheEntry.paths, so a restore writes files back to where they came from.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tarfile
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from vcpkgcache.cache.base_cache_store import (
    EXCLUDE_PREFIX,
    BaseCacheStore,
    validate_key,
    validate_save_request,
)
from vcpkgcache.cache.decision import normalize_paths
from vcpkgcache.cache.models import CacheEntry, SaveResult
from vcpkgcache.core.errors import CacheValidationError

logger = logging.getLogger(__name__)


class LocalCacheStore(BaseCacheStore):
    """File-based cache store using gzip'd tar archives."""

    def __init__(self, cache_root: str | Path) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    async def save(self, paths: Sequence[str], key: str) -> SaveResult:
        """Archive ``paths`` under ``key``."""
        paths = normalize_paths(paths)
        problem = validate_save_request(paths, key)
        if problem:
            return SaveResult(status="invalid", key=key, detail=problem, paths=paths)

        if self._metadata_path(key, paths).exists():
            return SaveResult(
                status="conflict", key=key, paths=paths,
                detail=f"Cache entry for key '{key}' and these paths already exists",
            )

        lock_path = self._lock_path(key, paths)
        try:
            fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            return SaveResult(
                status="conflict", key=key, paths=paths,
                detail=f"Unable to reserve cache with key '{key}', "
                "another job may be creating this cache",
            )
        os.close(fd)

        try:
            entry = self._write_entry(paths, key)
        except (OSError, tarfile.TarError, ValueError) as e:
            return SaveResult(status="failed", key=key, detail=str(e), paths=paths)
        finally:
            lock_path.unlink(missing_ok=True)

        logger.info("Cache saved with key '%s' (%d bytes)", key, entry.size_bytes)
        return SaveResult(status="saved", key=key, paths=paths)

    async def restore(
        self,
        paths: Sequence[str],
        primary_key: str,
        restore_keys: Sequence[str] = (),
    ) -> str | None:
        """Restore the entry matching ``primary_key`` exactly, else by restore key prefix.

        Only entries created with the same path list are candidates.

        Raises:
            CacheValidationError: a key is malformed.
        """
        for key in (primary_key, *restore_keys):
            problem = validate_key(key)
            if problem:
                raise CacheValidationError(key, problem)

        paths = normalize_paths(paths)
        entries = [e for e in self.list_entries() if e.paths == paths]

        entry = self._find_match(entries, primary_key, restore_keys)
        if entry is None:
            logger.info("Cache not found for keys: %s", ", ".join((primary_key, *restore_keys)))
            return None

        try:
            self._extract_entry(entry)
        except (OSError, tarfile.TarError) as e:
            logger.warning("Failed to restore cache entry '%s': %s", entry.key, e)
            return None

        logger.info("Cache restored from key '%s'", entry.key)
        return entry.key

    def list_entries(self) -> list[CacheEntry]:
        """List all readable cache entries."""
        entries: list[CacheEntry] = []
        for path in sorted(self._root.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                entries.append(CacheEntry(**data))
            except (OSError, ValueError) as e:
                logger.warning("Skipping unreadable cache metadata %s: %s", path.name, e)
        return entries

    # --- Internals ---

    @staticmethod
    def _find_match(
        entries: list[CacheEntry],
        primary_key: str,
        restore_keys: Sequence[str],
    ) -> CacheEntry | None:
        for entry in entries:
            if entry.key == primary_key:
                return entry
        for restore_key in restore_keys:
            candidates = [e for e in entries if e.key.startswith(restore_key)]
            if candidates:
                return max(candidates, key=lambda e: e.created_at)
        return None

    def _write_entry(self, paths: tuple[str, ...], key: str) -> CacheEntry:
        includes = [Path(p).expanduser().absolute() for p in paths if not p.startswith(EXCLUDE_PREFIX)]
        excludes = {
            Path(p[len(EXCLUDE_PREFIX):]).expanduser().absolute()
            for p in paths
            if p.startswith(EXCLUDE_PREFIX)
        }
        if not any(p.exists() for p in includes):
            raise ValueError(
                "Path(s) specified for caching do not exist, no cache is being saved"
            )

        archive_path = self._archive_path(key, paths)
        tmp_path = archive_path.with_name(archive_path.name + ".tmp")
        try:
            with tarfile.open(tmp_path, "w:gz") as tar:
                for index, root in enumerate(includes):
                    if not root.exists():
                        logger.warning("Path to cache does not exist: %s", root)
                        continue
                    self._add_tree(tar, str(index), root, excludes)
            os.replace(tmp_path, archive_path)
        finally:
            tmp_path.unlink(missing_ok=True)

        entry = CacheEntry(
            key=key,
            paths=paths,
            archive=archive_path.name,
            created_at=datetime.now(timezone.utc),
            size_bytes=archive_path.stat().st_size,
        )
        self._metadata_path(key, paths).write_text(entry.model_dump_json(indent=2), encoding="utf-8")
        return entry

    @staticmethod
    def _add_tree(tar: tarfile.TarFile, prefix: str, root: Path, excludes: set[Path]) -> None:
        if root.is_file() or root.is_symlink():
            tar.add(str(root), arcname=prefix, recursive=False)
            return
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            dirnames[:] = sorted(d for d in dirnames if current / d not in excludes)
            rel = current.relative_to(root)
            arc_dir = prefix if rel == Path(".") else f"{prefix}/{rel.as_posix()}"
            tar.add(str(current), arcname=arc_dir, recursive=False)
            # os.walk does not descend into symlinked directories
            for name in dirnames:
                if (current / name).is_symlink():
                    tar.add(str(current / name), arcname=f"{arc_dir}/{name}", recursive=False)
            for name in sorted(filenames):
                file_path = current / name
                if file_path in excludes:
                    continue
                tar.add(str(file_path), arcname=f"{arc_dir}/{name}", recursive=False)

    def _extract_entry(self, entry: CacheEntry) -> None:
        includes = [Path(p).expanduser().absolute() for p in entry.paths if not p.startswith(EXCLUDE_PREFIX)]
        with tarfile.open(self._root / entry.archive, "r:gz") as tar:
            groups: dict[str, list[tarfile.TarInfo]] = {}
            for member in tar.getmembers():
                prefix, _, rest = member.name.partition("/")
                groups.setdefault(prefix, []).append(member)
                member.name = rest

            for index, root in enumerate(includes):
                members = groups.get(str(index), [])
                if len(members) == 1 and not members[0].name and not members[0].isdir():
                    root.parent.mkdir(parents=True, exist_ok=True)
                    members[0].name = root.name
                    tar.extractall(root.parent, members=members, filter="data")
                    continue
                root.mkdir(parents=True, exist_ok=True)
                tar.extractall(
                    root, members=[m for m in members if m.name], filter="data"
                )

    def _entry_stem(self, key: str, paths: Sequence[str]) -> str:
        """Entries are versioned by their path list as well as their key."""
        version = "\n".join(normalize_paths(paths))
        return hashlib.sha256(f"{key}\0{version}".encode("utf-8")).hexdigest()

    def _archive_path(self, key: str, paths: Sequence[str]) -> Path:
        return self._root / f"{self._entry_stem(key, paths)}.tar.gz"

    def _metadata_path(self, key: str, paths: Sequence[str]) -> Path:
        return self._root / f"{self._entry_stem(key, paths)}.json"

    def _lock_path(self, key: str, paths: Sequence[str]) -> Path:
        return self._root / f"{self._entry_stem(key, paths)}.lock"
