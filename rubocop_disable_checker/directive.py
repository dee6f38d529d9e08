"""Detection of `# rubocop:disable` directives in added lines."""

from __future__ import annotations

DIRECTIVE_MARKER = "# rubocop:disable"


def scan_directive(content: str) -> list[str] | None:
    """Return the cops named by a disable directive, or None when there is none.

    Everything after the marker up to end of line is split on commas. A bare
    directive yields an empty list.
    """
    _, marker, remainder = content.partition(DIRECTIVE_MARKER)
    if not marker:
        return None
    return [token.strip() for token in remainder.split(",") if token.strip()]
