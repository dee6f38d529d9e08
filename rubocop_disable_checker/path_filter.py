"""Ignore-path filtering for changed files."""

from __future__ import annotations

from collections.abc import Iterable

from rubocop_disable_checker.diff_parser import FileDiff


def is_ignored(path: str, ignore_paths: Iterable[str]) -> bool:
    """Return True when any ignore entry is a substring of path."""
    return any(ignored in path for ignored in ignore_paths)


def filter_ignored(files: Iterable[FileDiff], ignore_paths: Iterable[str]) -> list[FileDiff]:
    """Drop files whose path contains an ignore entry, preserving order."""
    ignored = tuple(ignore_paths)
    return [file_diff for file_diff in files if not is_ignored(file_diff.path, ignored)]
