# tests/unit/cache/test_git.py — v1
"""Tests for cache/git.py — git commit id query."""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from vcpkgcache.cache.git import git_commit_id
from vcpkgcache.core.errors import GitQueryError


def _completed(returncode: int, stdout: str = "", stderr: str = ""):
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


class TestGitCommitId:
    def test_returns_trimmed_commit(self, tmp_path):
        with patch("vcpkgcache.cache.git.subprocess.run", return_value=_completed(0, "abc\n")) as run:
            assert git_commit_id(tmp_path) == "abc"
        cmd = run.call_args.args[0]
        assert cmd[:2] == ["git", "log"]
        assert run.call_args.kwargs["cwd"] == str(tmp_path)

    def test_nonzero_exit(self, tmp_path):
        with patch(
            "vcpkgcache.cache.git.subprocess.run",
            return_value=_completed(128, stderr="fatal: not a git repository"),
        ):
            with pytest.raises(GitQueryError, match="not a git repository"):
                git_commit_id(tmp_path)

    def test_git_missing(self, tmp_path):
        with patch("vcpkgcache.cache.git.subprocess.run", side_effect=FileNotFoundError("git")):
            with pytest.raises(GitQueryError, match="not found"):
                git_commit_id(tmp_path)

    def test_timeout(self, tmp_path):
        with patch(
            "vcpkgcache.cache.git.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="git", timeout=30),
        ):
            with pytest.raises(GitQueryError, match="timed out"):
                git_commit_id(tmp_path)

    def test_permission_denied(self, tmp_path):
        with patch("vcpkgcache.cache.git.subprocess.run", side_effect=PermissionError("denied")):
            with pytest.raises(GitQueryError, match="denied"):
                git_commit_id(tmp_path)
