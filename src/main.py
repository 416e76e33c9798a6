# src/main.py — v2
"""CLI entry point — keys, restore, save, find-manifest commands.

Usage:
    vcpkgcache keys [options]
    vcpkgcache restore [options]
    vcpkgcache save [options]
    vcpkgcache find-manifest

A CI job runs ``restore`` before bootstrapping vcpkg and ``save`` after;
the two steps share keys and the hit key through the state file.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
import uuid
from pathlib import Path

from pydantic import ValidationError

from vcpkgcache.cache.cache_factory import create_cache_store
from vcpkgcache.cache.engine import CacheKeyEngine
from vcpkgcache.cache.identity import resolve_target_path
from vcpkgcache.cache.models import CacheState
from vcpkgcache.config.settings import ConfigurationError, Settings, load_settings
from vcpkgcache.core.errors import CacheValidationError
from vcpkgcache.core.models import KeySet
from vcpkgcache.logging.context import set_run_context
from vcpkgcache.logging.logger import setup_logging
from vcpkgcache.vcpkg.manifest import find_vcpkg_json
from vcpkgcache.vcpkg.paths import get_all_cached_paths
from vcpkgcache.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = Path(".vcpkgcache-state.json")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = load_settings(**_settings_overrides(args))
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)
    set_run_context(uuid.uuid4().hex[:12])

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except CacheValidationError as exc:
        logger.error("Fatal cache error: %s", exc)
        return 1
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="vcpkgcache",
        description=f"vcpkgcache v{__version__} — vcpkg tool cache for CI runners",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    def add_cache_options(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--vcpkg-directory", default=None,
            help="vcpkg directory, absolute or relative to the workspace",
        )
        p.add_argument(
            "--commit-id", default=None,
            help="vcpkg Git commit id, used when it cannot be detected",
        )
        p.add_argument(
            "--cache-root", type=Path, default=None,
            help="Directory of the local cache store",
        )

    # --- keys ---
    p_keys = subparsers.add_parser("keys", help="Print the computed cache keys")
    add_cache_options(p_keys)
    p_keys.set_defaults(func=_cmd_keys)

    # --- restore ---
    p_restore = subparsers.add_parser("restore", help="Restore vcpkg from the cache")
    add_cache_options(p_restore)
    p_restore.add_argument(
        "--state-file", type=Path, default=DEFAULT_STATE_FILE,
        help=f"Where to record keys and hit key (default: {DEFAULT_STATE_FILE})",
    )
    p_restore.set_defaults(func=_cmd_restore)

    # --- save ---
    p_save = subparsers.add_parser("save", help="Save vcpkg into the cache if needed")
    add_cache_options(p_save)
    p_save.add_argument(
        "--state-file", type=Path, default=DEFAULT_STATE_FILE,
        help=f"State written by the restore step (default: {DEFAULT_STATE_FILE})",
    )
    p_save.set_defaults(func=_cmd_save)

    # --- find-manifest ---
    p_find = subparsers.add_parser("find-manifest", help="Locate vcpkg.json")
    p_find.add_argument(
        "--glob", dest="vcpkg_json_glob", default=None,
        help="Glob expression for vcpkg.json",
    )
    p_find.set_defaults(func=_cmd_find_manifest)

    return parser


def _settings_overrides(args: argparse.Namespace) -> dict[str, object]:
    """Map CLI options that were given onto Settings fields."""
    mapping = {
        "vcpkg_directory": "vcpkg_directory",
        "commit_id": "vcpkg_git_commit_id",
        "cache_root": "cache_root",
        "vcpkg_json_glob": "vcpkg_json_glob",
    }
    overrides: dict[str, object] = {}
    for arg_name, field_name in mapping.items():
        value = getattr(args, arg_name, None)
        if value is not None:
            overrides[field_name] = value
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return overrides


def _workspace_root(settings: Settings) -> str:
    return settings.github_workspace or os.getcwd()


def _compute_keys(settings: Settings, engine: CacheKeyEngine) -> KeySet:
    return engine.compute_cache_keys(
        settings.environment_signals(),
        settings.vcpkg_directory,
        settings.user_commit_id,
    )


def _cached_paths(settings: Settings) -> tuple[str, ...]:
    vcpkg_root = resolve_target_path(_workspace_root(settings), settings.vcpkg_directory)
    return get_all_cached_paths(str(vcpkg_root))


async def _cmd_keys(args: argparse.Namespace, settings: Settings) -> int:
    """Print primary and restore keys as JSON."""
    engine = CacheKeyEngine(create_cache_store(settings))
    keys = _compute_keys(settings, engine)
    print(keys.model_dump_json(indent=2))
    return 0


async def _cmd_restore(args: argparse.Namespace, settings: Settings) -> int:
    """Restore vcpkg from the cache and record the outcome for the save step."""
    engine = CacheKeyEngine(create_cache_store(settings))
    keys = _compute_keys(settings, engine)

    hit_key: str | None = None
    try:
        hit_key = await engine.restore_cache(keys, _cached_paths(settings))
    except CacheValidationError:
        raise
    except Exception as exc:
        logger.warning("Cache restore failed: %s: %s", type(exc).__name__, exc)

    state = CacheState(
        primary_key=keys.primary,
        restore_keys=keys.restore_keys,
        hit_key=hit_key,
    )
    args.state_file.write_text(state.model_dump_json(indent=2), encoding="utf-8")
    print(hit_key or "")
    return 0


async def _cmd_save(args: argparse.Namespace, settings: Settings) -> int:
    """Save vcpkg into the cache. Only a validation failure fails the step."""
    engine = CacheKeyEngine(create_cache_store(settings))

    try:
        state = _read_state(args.state_file)
        if state is None:
            keys = _compute_keys(settings, engine)
            hit_key = None
        else:
            keys = KeySet(primary=state.primary_key, restore_keys=state.restore_keys)
            hit_key = state.hit_key
        result = await engine.save_cache(keys, hit_key, _cached_paths(settings))
    except CacheValidationError:
        raise
    except Exception as exc:
        logger.warning(
            "vcpkg cache save failed: %s: %s", type(exc).__name__, exc, exc_info=True
        )
        return 0

    print(result.status)
    return 0


async def _cmd_find_manifest(args: argparse.Namespace, settings: Settings) -> int:
    """Print the path of the unique vcpkg.json, exit 1 when not unique."""
    path = find_vcpkg_json(
        settings.vcpkg_json_glob,
        settings.vcpkg_json_ignores_list,
        root=_workspace_root(settings),
    )
    if path is None:
        return 1
    print(path)
    return 0


def _read_state(state_file: Path) -> CacheState | None:
    """Load the restore step's state; None when the file is absent."""
    if not state_file.exists():
        logger.info("No state file at %s, computing keys afresh", state_file)
        return None
    return CacheState(**json.loads(state_file.read_text(encoding="utf-8")))


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
