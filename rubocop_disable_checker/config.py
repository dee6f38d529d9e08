"""Configuration loading for rubocop-disable-checker."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from rubocop_disable_checker.resolver import (
    DEFAULT_DOCS_COMMAND,
    DEFAULT_MAX_WORKERS,
    DEFAULT_TIMEOUT_SECONDS,
)

CONFIG_FILENAMES = (".rubocop-disable-checker.toml", "rubocop-disable-checker.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEYS = ("rubocop_disable_checker", "rubocop-disable-checker")

DEFAULT_IGNORE_PATHS = ("Dangerfile",)
DEFAULT_MESSAGE = (
    "Disabling a rule is usually an indication of a code smell and can be easily avoided. "
    "If you feel this is an exceptional case, please add a comment above with justification."
)


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Per-run settings for the checker."""

    ignore_paths: tuple[str, ...] = DEFAULT_IGNORE_PATHS
    message: str = DEFAULT_MESSAGE
    tag_reviewers: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "ignore_paths": list(self.ignore_paths),
            "message": self.message,
            "tag_reviewers": list(self.tag_reviewers),
        }


@dataclass(slots=True)
class DocsConfig:
    """Documentation-link lookup settings."""

    enabled: bool = True
    command: list[str] = field(default_factory=lambda: list(DEFAULT_DOCS_COMMAND))
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_workers: int = DEFAULT_MAX_WORKERS

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "command": list(self.command),
            "timeout_seconds": self.timeout_seconds,
            "max_workers": self.max_workers,
        }


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    run: RunConfig = field(default_factory=RunConfig)
    format: str = "human"
    fail_on_violation: bool = False
    docs: DocsConfig = field(default_factory=DocsConfig)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = self.run.to_dict()
        payload.update(
            {
                "format": self.format,
                "fail_on_violation": self.fail_on_violation,
                "docs": self.docs.to_dict(),
                "source": self.source,
            }
        )
        return payload

    def with_overrides(
        self,
        *,
        ignore_paths: list[str] | None = None,
        message: str | None = None,
        tag_reviewers: list[str] | None = None,
    ) -> RunConfig:
        """Return the run config with any explicitly provided values replacing file values."""
        run_config = self.run
        if ignore_paths is not None:
            run_config = replace(run_config, ignore_paths=tuple(ignore_paths))
        if message is not None:
            run_config = replace(run_config, message=message)
        if tag_reviewers is not None:
            run_config = replace(run_config, tag_reviewers=tuple(tag_reviewers))
        return run_config


def load_app_config(repo: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from explicit path or repository-local files with precedence."""
    repo = repo.resolve()
    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (repo / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved))

    for filename in CONFIG_FILENAMES:
        resolved = repo / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved))

    pyproject_path = repo / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path))

    return AppConfig()


def default_config_template() -> str:
    """Return a starter config template."""
    return "\n".join(
        [
            'ignore_paths = ["Dangerfile", "vendor/"]',
            "tag_reviewers = []",
            '# message = "Please justify any disabled cop in a comment above the directive."',
            'format = "human"',
            "fail_on_violation = false",
            "",
            "[docs]",
            "enabled = true",
            'command = ["bundle", "exec", "rubocop", "--show-docs-url"]',
            "timeout_seconds = 30",
            "max_workers = 4",
            "",
        ]
    )


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    if source_path.name == PYPROJECT_FILENAME:
        section = _find_pyproject_tool_section(loaded)
        return section if section is not None else {}

    tool_section = _find_pyproject_tool_section(loaded)
    if tool_section is not None:
        return tool_section
    return loaded


def _find_pyproject_tool_section(loaded: dict[str, Any]) -> dict[str, Any] | None:
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return None
    for key in PYPROJECT_TOOL_KEYS:
        section = tool.get(key)
        if isinstance(section, dict):
            return section
    return None


def _from_mapping(mapping: dict[str, Any], *, source: str) -> AppConfig:
    docs_mapping = _as_table(mapping.get("docs"), "docs")

    raw_format = mapping.get("format", "human")
    format_value = str(raw_format).lower()
    if format_value not in {"human", "json"}:
        format_value = "human"

    ignore_paths = mapping.get("ignore_paths")
    run_config = RunConfig(
        ignore_paths=(
            tuple(_as_str_list(ignore_paths, "ignore_paths"))
            if ignore_paths is not None
            else DEFAULT_IGNORE_PATHS
        ),
        message=_as_str(mapping.get("message", DEFAULT_MESSAGE), "message"),
        tag_reviewers=tuple(_as_str_list(mapping.get("tag_reviewers"), "tag_reviewers")),
    )

    return AppConfig(
        run=run_config,
        format=format_value,
        fail_on_violation=_as_bool(mapping.get("fail_on_violation", False), "fail_on_violation"),
        docs=_parse_docs_config(docs_mapping),
        source=source,
    )


def _parse_docs_config(value: dict[str, Any]) -> DocsConfig:
    command = _as_str_list(value.get("command"), "docs.command") or list(DEFAULT_DOCS_COMMAND)
    timeout = _as_float(
        value.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS), "docs.timeout_seconds"
    )
    if timeout <= 0:
        raise ValueError("docs.timeout_seconds must be > 0")
    max_workers = _as_int(value.get("max_workers", DEFAULT_MAX_WORKERS), "docs.max_workers")
    if max_workers <= 0:
        raise ValueError("docs.max_workers must be > 0")
    return DocsConfig(
        enabled=_as_bool(value.get("enabled", True), "docs.enabled"),
        command=command,
        timeout_seconds=timeout,
        max_workers=max_workers,
    )


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_str_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{field_name} must be a list of strings")
    return list(value)


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def _as_int(raw: Any, field_name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{field_name} must be an integer")
    return raw


def _as_bool(raw: Any, field_name: str) -> bool:
    if not isinstance(raw, bool):
        raise ValueError(f"{field_name} must be a boolean")
    return raw


def _as_float(raw: Any, field_name: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(raw)
