# src/cache/keys.py — v1
"""Cache key construction from runner signals and the vcpkg commit id.

Key layout (single segment today):
    runnerOS=<ImageOS or platform><ImageVersion>-vcpkgGitCommit=<commit>

Segments are joined with KEY_SEPARATOR; every shorter cumulative join is a
restore key.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from vcpkgcache.core.models import EnvironmentSignals, KeySet, RepositoryIdentity

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "_"
COMMIT_MARKER = "-vcpkgGitCommit="


def create_key_set(segments: Sequence[str], separator: str = KEY_SEPARATOR) -> KeySet:
    """Fold ordered segments into a KeySet.

    The primary key joins all segments. Restore keys are the shorter
    cumulative joins, most specific first.

    Raises:
        ValueError: no segments given.
    """
    if not segments:
        raise ValueError("At least one cache key segment is required")

    cumulative: list[str] = []
    for segment in segments:
        if cumulative:
            cumulative.append(f"{cumulative[-1]}{separator}{segment}")
        else:
            cumulative.append(segment)

    return KeySet(
        primary=cumulative[-1],
        restore_keys=tuple(reversed(cumulative[:-1])),
    )


def build_first_segment(
    identity: RepositoryIdentity,
    signals: EnvironmentSignals,
    user_commit_id: str | None = None,
) -> str:
    """Runner identity plus the commit id contribution."""
    segment = f"runnerOS={signals.runner_os}"
    segment += signals.image_version

    if identity.commit_id:
        segment += f"{COMMIT_MARKER}{identity.commit_id}"
        if identity.is_submodule:
            logger.info(
                "Adding vcpkg submodule Git commit id '%s' to cache key",
                identity.commit_id,
            )
            if user_commit_id:
                logger.warning(
                    "The provided Git commit id is disregarded: '%s'. "
                    "Please remove it from the inputs.",
                    user_commit_id,
                )
        else:
            logger.info(
                "vcpkg identified at Git commit id '%s', adding it to the cache key",
                identity.commit_id,
            )
    elif user_commit_id:
        segment += f"{COMMIT_MARKER}{user_commit_id}"
        logger.info(
            "Adding user provided vcpkg Git commit id '%s' to cache key",
            user_commit_id,
        )
    else:
        logger.info("No vcpkg commit id was provided, it does not contribute to the cache key")

    return segment


def build_key_set(
    identity: RepositoryIdentity,
    signals: EnvironmentSignals,
    user_commit_id: str | None = None,
) -> KeySet:
    """Build the KeySet for this toolset and environment. Deterministic."""
    segments = [build_first_segment(identity, signals, user_commit_id)]
    return create_key_set(segments)
