"""Unified diff parsing for added-line extraction."""

from __future__ import annotations

from dataclasses import dataclass
from re import Match, compile

HUNK_HEADER_RE = compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))? "
    r"\+(?P<new_start>\d+)(?:,(?P<new_count>\d+))? @@(?P<section>.*)$"
)
HUNK_MARKER = "@@"
NO_NEWLINE_MARKER = "\\"
DEV_NULL = "/dev/null"


class MalformedDiffHeader(ValueError):
    """Raised when a hunk header has no parseable new-file start line."""

    def __init__(self, header: str) -> None:
        super().__init__(f"Invalid hunk header: {header}")
        self.header = header


@dataclass(frozen=True, slots=True)
class FileDiff:
    """Raw unified-diff text for one changed file."""

    path: str
    patch: str


@dataclass(frozen=True, slots=True)
class AddedLine:
    """A line added in the new version of a file."""

    content: str
    line_number: int


def parse_patch(patch: str) -> list[AddedLine]:
    """Return added lines of a single-file patch with their final-file line numbers.

    Text before the first hunk header is ignored. Line numbers come from the
    new-file start of each hunk header; context lines advance the counter,
    removals and ``\\ No newline at end of file`` markers do not.
    """
    added: list[AddedLine] = []
    for header, body in _split_hunks(patch):
        added.extend(_walk_hunk(_new_start(header), body))
    return added


def split_unified_diff(diff_text: str) -> list[FileDiff]:
    """Split multi-file diff text (e.g. ``git diff`` output) into per-file patches.

    Hunk bodies are consumed by the line counts in their headers, so removed
    or added lines that look like ``---``/``+++`` headers stay in their hunk.
    """
    files: list[FileDiff] = []
    lines = diff_text.splitlines()
    chunk: list[str] = []
    old_path: str | None = None
    new_path: str | None = None
    seen_hunk = False
    old_left = new_left = 0

    def flush() -> None:
        if chunk:
            path = _canonical_path(old_path, new_path)
            files.append(FileDiff(path=path, patch="\n".join(chunk)))

    for index, raw_line in enumerate(lines):
        if raw_line.startswith("diff --git "):
            flush()
            chunk = []
            old_path, new_path = _paths_from_git_header(raw_line)
            seen_hunk = False
            old_left = new_left = 0
        elif raw_line.startswith(HUNK_MARKER):
            old_left, new_left = _hunk_counts(raw_line)
            seen_hunk = True
        elif old_left > 0 or new_left > 0:
            old_left, new_left = _consume_body_line(raw_line, old_left, new_left)
        elif raw_line.startswith("--- ") and _is_file_header_pair(lines, index):
            if chunk and (seen_hunk or not chunk[0].startswith("diff --git ")):
                flush()
                chunk = []
                seen_hunk = False
            old_path = _parse_path(raw_line[4:])
        elif raw_line.startswith("+++ "):
            new_path = _parse_path(raw_line[4:])
        elif not chunk:
            # Commit messages or other preamble before the first file.
            continue
        chunk.append(raw_line)

    flush()
    return files


def _split_hunks(patch: str) -> list[tuple[str, list[str]]]:
    hunks: list[tuple[str, list[str]]] = []
    for raw_line in patch.splitlines():
        if raw_line.startswith(HUNK_MARKER):
            hunks.append((raw_line, []))
        elif hunks:
            hunks[-1][1].append(raw_line)
    return hunks


def _new_start(header: str) -> int:
    match: Match[str] | None = HUNK_HEADER_RE.match(header)
    if match is None:
        raise MalformedDiffHeader(header)
    return int(match.group("new_start"))


def _hunk_counts(header: str) -> tuple[int, int]:
    match: Match[str] | None = HUNK_HEADER_RE.match(header)
    if match is None:
        # Left for parse_patch to reject.
        return (0, 0)
    old_count = int(match.group("old_count")) if match.group("old_count") else 1
    new_count = int(match.group("new_count")) if match.group("new_count") else 1
    return (old_count, new_count)


def _consume_body_line(raw_line: str, old_left: int, new_left: int) -> tuple[int, int]:
    if raw_line.startswith("+"):
        return (old_left, new_left - 1)
    if raw_line.startswith("-"):
        return (old_left - 1, new_left)
    if raw_line.startswith(NO_NEWLINE_MARKER):
        return (old_left, new_left)
    return (old_left - 1, new_left - 1)


def _walk_hunk(start: int, body: list[str]) -> list[AddedLine]:
    line_number = start
    added: list[AddedLine] = []
    for raw_line in body:
        if raw_line.startswith("+"):
            added.append(AddedLine(content=raw_line, line_number=line_number))
            line_number += 1
        elif raw_line.startswith("-") or raw_line.startswith(NO_NEWLINE_MARKER):
            continue
        else:
            line_number += 1
    return added


def _is_file_header_pair(lines: list[str], index: int) -> bool:
    return index + 1 < len(lines) and lines[index + 1].startswith("+++ ")


def _paths_from_git_header(line: str) -> tuple[str | None, str | None]:
    parts = line.split(maxsplit=3)
    old_path = _strip_ab_prefix(parts[2]) if len(parts) > 2 else None
    new_path = _strip_ab_prefix(parts[3]) if len(parts) > 3 else None
    return (old_path, new_path)


def _parse_path(value: str) -> str:
    token = value.strip().split("\t", 1)[0]
    return _strip_ab_prefix(token)


def _strip_ab_prefix(path: str) -> str:
    if path.startswith("a/") or path.startswith("b/"):
        return path[2:]
    return path


def _canonical_path(old_path: str | None, new_path: str | None) -> str:
    if new_path and new_path != DEV_NULL:
        return new_path
    if old_path and old_path != DEV_NULL:
        return old_path
    return "<unknown>"
