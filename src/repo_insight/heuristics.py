"""Loose path-based checks for tests, README and license files.

These are substring/prefix matches on purpose. Tightening them changes
code quality scores for existing repositories.
"""

from __future__ import annotations

from collections.abc import Iterable

TEST_DIRECTORY_MARKERS = ("/test/", "/tests/", "/__tests__/")

TEST_FILE_FRAGMENTS = (".test.", ".spec.", "_test.", "_spec.", "/test_")

README_PREFIXES = ("readme",)

LICENSE_PREFIXES = ("license", "licence", "copying")


def _normalized(paths: Iterable[str]) -> list[str]:
    return ["/" + path.lower().lstrip("/") for path in paths]


def detect_tests(paths: Iterable[str]) -> bool:
    """True if any path sits under a test directory or looks like a test file."""
    for path in _normalized(paths):
        if any(marker in path for marker in TEST_DIRECTORY_MARKERS):
            return True
        if any(fragment in path for fragment in TEST_FILE_FRAGMENTS):
            return True
    return False


def _root_file_with_prefix(paths: Iterable[str], prefixes: tuple[str, ...]) -> bool:
    for path in paths:
        name = path.lower().lstrip("/")
        if "/" not in name and name.startswith(prefixes):
            return True
    return False


def detect_readme(paths: Iterable[str]) -> bool:
    return _root_file_with_prefix(paths, README_PREFIXES)


def detect_license(paths: Iterable[str], repo: dict | None = None) -> bool:
    if repo and repo.get("license"):
        return True
    return _root_file_with_prefix(paths, LICENSE_PREFIXES)
