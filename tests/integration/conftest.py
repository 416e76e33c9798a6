# tests/integration/conftest.py — v8
"""Shared fixtures for integration tests.

Uses the real git binary; tests needing it are skipped when it is absent.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git_clone(tmp_path) -> tuple[Path, Path, str]:
    """Workspace with a real git repository at ./vcpkg.

    Returns (workspace, vcpkg_dir, head_commit).
    """
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    workspace = tmp_path / "workspace"
    vcpkg_dir = workspace / "vcpkg"
    vcpkg_dir.mkdir(parents=True)
    _git(vcpkg_dir, "init", "-q")
    (vcpkg_dir / "bootstrap-vcpkg.sh").write_text("#!/bin/sh\n")
    (vcpkg_dir / "packages").mkdir()
    (vcpkg_dir / "packages" / "built.txt").write_text("built")
    _git(vcpkg_dir, "add", "bootstrap-vcpkg.sh")
    _git(
        vcpkg_dir,
        "-c", "user.name=ci", "-c", "user.email=ci@example.com",
        "commit", "-q", "-m", "initial",
    )
    return workspace, vcpkg_dir, _git(vcpkg_dir, "rev-parse", "HEAD")
