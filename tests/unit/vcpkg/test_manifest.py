# tests/unit/vcpkg/test_manifest.py — v1
"""Tests for vcpkg/manifest.py — vcpkg.json lookup by glob."""

from __future__ import annotations

import logging
import os

import pytest

from vcpkgcache.vcpkg.manifest import find_files, find_vcpkg_json


@pytest.fixture
def project(tmp_path):
    (tmp_path / "vcpkg" / "ports" / "zlib").mkdir(parents=True)
    (tmp_path / "vcpkg" / "ports" / "zlib" / "vcpkg.json").write_text("{}")
    (tmp_path / "app").mkdir()
    (tmp_path / "app" / "vcpkg.json").write_text("{}")
    return tmp_path


class TestFindFiles:
    def test_recursive_glob(self, project):
        found = find_files("**/vcpkg.json", root=project)
        assert len(found) == 2

    def test_ignores(self, project):
        found = find_files("**/vcpkg.json", ["**/vcpkg/**"], root=project)
        assert found == [os.path.join(str(project), "app", "vcpkg.json")]

    def test_directories_not_returned(self, project):
        assert find_files("app", root=project) == []


class TestFindVcpkgJson:
    def test_unique_match(self, project):
        path = find_vcpkg_json("**/vcpkg.json", ["**/vcpkg/**"], root=project)
        assert path == os.path.join(str(project), "app", "vcpkg.json")

    def test_multiple_matches_warn(self, project, caplog):
        with caplog.at_level(logging.INFO, logger="vcpkgcache"):
            assert find_vcpkg_json("**/vcpkg.json", root=project) is None
        assert any("multiple times" in r.getMessage() for r in caplog.records
                   if r.levelno == logging.WARNING)

    def test_no_match_warns(self, tmp_path, caplog):
        with caplog.at_level(logging.INFO, logger="vcpkgcache"):
            assert find_vcpkg_json("**/vcpkg.json", root=tmp_path) is None
        assert any("not found" in r.getMessage() for r in caplog.records
                   if r.levelno == logging.WARNING)
