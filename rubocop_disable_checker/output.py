"""Output rendering."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import click

from rubocop_disable_checker import __version__
from rubocop_disable_checker.checker import CheckResult, Violation


def render_human(result: CheckResult) -> str:
    """Render annotations as readable terminal text."""
    if not result.violations:
        return click.style("No `rubocop:disable` directives added.", fg="green", bold=True)

    lines: list[str] = [
        click.style(
            f"Found {len(result.violations)} `rubocop:disable` directive(s).",
            fg="yellow",
            bold=True,
        )
    ]
    for annotation in result.inline:
        lines.append(click.style(f"{annotation.file}:{annotation.line}", bold=True))
        lines.extend(f"  {body_line}" for body_line in annotation.body.rstrip("\n").splitlines())

    summary = result.summary
    if summary is not None:
        lines.append(click.style(summary.body, bold=True))
    return "\n".join(lines)


def render_json(
    result: CheckResult,
    *,
    input_source: str,
    config_source: str | None,
) -> str:
    """Render stable JSON output for CI and automation."""
    payload = build_json_payload(result, input_source=input_source, config_source=config_source)
    return json.dumps(payload, sort_keys=True)


def build_json_payload(
    result: CheckResult,
    *,
    input_source: str,
    config_source: str | None,
) -> dict[str, Any]:
    """Build the JSON payload for a run."""
    return {
        "annotations": [annotation.to_dict() for annotation in result.annotations],
        "violations": [_serialize_violation(item) for item in result.violations],
        "meta": {
            "generated_at": datetime.now(tz=UTC)
            .replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z"),
            "input_source": input_source,
            "config_source": config_source,
            "version": __version__,
        },
    }


def _serialize_violation(violation: Violation) -> dict[str, Any]:
    return {
        "file": violation.file,
        "line": violation.line,
        "disabled_rules": list(violation.disabled_rules),
    }
