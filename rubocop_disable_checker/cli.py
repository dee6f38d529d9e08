"""CLI entrypoint for rubocop-disable-checker."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from rubocop_disable_checker import __version__
from rubocop_disable_checker.checker import check_diff_text
from rubocop_disable_checker.config import AppConfig, default_config_template, load_app_config
from rubocop_disable_checker.diff_parser import MalformedDiffHeader
from rubocop_disable_checker.output import render_human, render_json
from rubocop_disable_checker.resolver import (
    DocsLookup,
    RubocopDocsLookup,
    RuleResolver,
    no_docs_lookup,
)

LOG_LEVELS = ("debug", "info", "warning", "error")

app = typer.Typer(
    name="rubocop-disable-checker",
    no_args_is_help=True,
    help="Flag added `rubocop:disable` directives in unified diffs.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    log_level: Annotated[
        str, typer.Option("--log-level", help="debug|info|warning|error.")
    ] = "warning",
) -> None:
    """Root command callback."""
    _ = version
    level = log_level.lower()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(
            f"--log-level must be one of: {', '.join(LOG_LEVELS)}", param_hint="--log-level"
        )
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("check")
def check_command(
    diff_file: Annotated[Path | None, typer.Option(help="Path to unified diff file.")] = None,
    stdin: Annotated[bool, typer.Option(help="Read unified diff from stdin.")] = False,
    repo: Annotated[Path, typer.Option(help="Repository path.")] = Path("."),
    ignore_path: Annotated[
        list[str] | None,
        typer.Option(help="Skip files whose path contains this text. Repeatable."),
    ] = None,
    message: Annotated[str | None, typer.Option(help="Note appended to each warning.")] = None,
    tag_reviewer: Annotated[
        list[str] | None,
        typer.Option(help="Reviewer handle to mention in the summary. Repeatable."),
    ] = None,
    docs: Annotated[
        bool | None,
        typer.Option("--docs/--no-docs", help="Link cops to their documentation via RuboCop."),
    ] = None,
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    fail_on_violation: Annotated[
        bool | None,
        typer.Option(
            "--fail-on-violation/--no-fail-on-violation",
            help="Exit nonzero when any directive is found.",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Report added `rubocop:disable` directives."""
    app_config = _load_config_or_raise(repo, config_file)
    output_format = (format or app_config.format).lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    if diff_file and stdin:
        raise typer.BadParameter("Use either --diff-file or --stdin, not both.")
    if diff_file is None and not stdin:
        raise typer.BadParameter("Provide a diff with --diff-file or --stdin.")

    if diff_file is not None:
        diff_text, input_source = diff_file.read_text(encoding="utf-8"), f"diff_file:{diff_file}"
    else:
        diff_text, input_source = sys.stdin.read(), "stdin"

    run_config = app_config.with_overrides(
        ignore_paths=ignore_path,
        message=message,
        tag_reviewers=tag_reviewer,
    )
    docs_enabled = docs if docs is not None else app_config.docs.enabled
    resolver = RuleResolver(
        _build_lookup(app_config, repo=repo, enabled=docs_enabled),
        max_workers=app_config.docs.max_workers,
    )

    try:
        result = check_diff_text(diff_text, run_config, resolver)
    except MalformedDiffHeader as exc:
        raise typer.BadParameter(str(exc), param_hint="diff") from exc

    if output_format == "json":
        typer.echo(
            render_json(result, input_source=input_source, config_source=app_config.source)
        )
    else:
        typer.echo(render_human(result))

    should_fail = (
        fail_on_violation if fail_on_violation is not None else app_config.fail_on_violation
    )
    if should_fail and result.violations:
        raise typer.Exit(code=1)


@app.command("config")
def config_command(
    repo: Annotated[Path, typer.Option(help="Repository path.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    app_config = _load_config_or_raise(repo, config_file)
    payload = app_config.to_dict()

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- ignore_paths: {payload['ignore_paths']}",
        f"- tag_reviewers: {payload['tag_reviewers']}",
        f"- format: {payload['format']}",
        f"- fail_on_violation: {payload['fail_on_violation']}",
        f"- docs.enabled: {payload['docs']['enabled']}",
        f"- docs.command: {payload['docs']['command']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".rubocop-disable-checker.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter repository config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


def main() -> None:
    """Console script entrypoint."""
    app()


def _load_config_or_raise(repo: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(repo, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_lookup(app_config: AppConfig, *, repo: Path, enabled: bool) -> DocsLookup:
    if not enabled:
        return no_docs_lookup
    return RubocopDocsLookup(
        app_config.docs.command,
        timeout=app_config.docs.timeout_seconds,
        cwd=str(repo),
    )
