"""Annotation message formatting."""

from __future__ import annotations

from collections.abc import Sequence

DIRECTIVE_LABEL = "`rubocop:disable`"


def format_inline(cops: Sequence[str], message: str) -> str:
    """Build the inline annotation body for one directive occurrence."""
    if not cops:
        headline = f"Detected {DIRECTIVE_LABEL}"
    elif len(cops) == 1:
        headline = f"Detected {DIRECTIVE_LABEL} for {cops[0]}"
    else:
        bullets = "\n".join(f"- {cop}" for cop in cops)
        headline = f"Detected {DIRECTIVE_LABEL} for the following cops:\n{bullets}"

    return f"{headline}\n\n\n> **Note**\n> {message}\n"


def format_summary(tag_reviewers: Sequence[str]) -> str:
    """Build the summary annotation body; the cc clause is left out without reviewers."""
    summary = f"Detected use of {DIRECTIVE_LABEL} directive."
    if not tag_reviewers:
        return summary
    mentions = ", ".join(f"@{reviewer}" for reviewer in tag_reviewers)
    return f"{summary} cc {mentions}"
