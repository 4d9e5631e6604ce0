"""Tests for the heuristics module."""

from __future__ import annotations

import pytest

from repo_insight.heuristics import detect_license, detect_readme, detect_tests


@pytest.mark.parametrize("path", [
    "tests/test_app.py",
    "test/unit/thing.js",
    "src/__tests__/App.jsx",
    "pkg/Tests/Helper.cs",
    "src/app.test.ts",
    "src/app.spec.js",
    "server/handler_test.go",
    "spec/model_spec.rb",
    "test_main.py",
    "lib/test_utils.py",
    "SRC/APP.TEST.TSX",
])
def test_detects_test_paths(path):
    assert detect_tests(["README.md", path]) is True


@pytest.mark.parametrize("paths", [
    [],
    ["README.md", "src/app.py", "setup.py"],
    ["testing/notes.txt"],
    ["src/contest.py"],
    ["tests"],
])
def test_no_test_evidence(paths):
    assert detect_tests(paths) is False


def test_loose_matching_is_kept():
    # a fragment anywhere in the path counts, even outside test code
    assert detect_tests(["docs/latest/test_results.md"]) is True


def test_detect_readme():
    assert detect_readme(["README.md"]) is True
    assert detect_readme(["readme.rst"]) is True
    assert detect_readme(["README"]) is True
    assert detect_readme(["docs/README.md"]) is False
    assert detect_readme([]) is False


def test_detect_license_from_tree():
    assert detect_license(["LICENSE"]) is True
    assert detect_license(["LICENCE.txt"]) is True
    assert detect_license(["COPYING"]) is True
    assert detect_license(["vendor/LICENSE"]) is False


def test_detect_license_from_repo_metadata():
    assert detect_license([], {"license": {"spdx_id": "MIT"}}) is True
    assert detect_license([], {"license": None}) is False
