"""Check orchestration: filter, parse, scan, resolve, format, emit."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

from rubocop_disable_checker.config import RunConfig
from rubocop_disable_checker.diff_parser import FileDiff, parse_patch, split_unified_diff
from rubocop_disable_checker.directive import scan_directive
from rubocop_disable_checker.formatter import format_inline, format_summary
from rubocop_disable_checker.path_filter import filter_ignored
from rubocop_disable_checker.resolver import RuleResolver

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Violation:
    """One added line carrying a disable directive."""

    file: str
    line: int
    disabled_rules: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Annotation:
    """A review warning; inline annotations carry a file and line, the summary does not."""

    body: str
    file: str | None = None
    line: int | None = None
    severity: Literal["warning"] = "warning"

    @property
    def is_inline(self) -> bool:
        return self.file is not None

    def to_dict(self) -> dict[str, object]:
        return {
            "severity": self.severity,
            "body": self.body,
            "file": self.file,
            "line": self.line,
        }


@dataclass(slots=True)
class CheckResult:
    """Violations found in a run and the annotations emitted for them."""

    violations: list[Violation] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)

    @property
    def inline(self) -> list[Annotation]:
        return [annotation for annotation in self.annotations if annotation.is_inline]

    @property
    def summary(self) -> Annotation | None:
        for annotation in self.annotations:
            if not annotation.is_inline:
                return annotation
        return None


def find_violations(files: Iterable[FileDiff], config: RunConfig) -> list[Violation]:
    """Return directive occurrences in added lines of non-ignored files.

    Files keep their input order; within a file, violations follow line order.
    """
    files = list(files)
    LOGGER.debug("filtering %d file(s) against ignore paths %s", len(files), config.ignore_paths)
    kept = filter_ignored(files, config.ignore_paths)

    violations: list[Violation] = []
    for file_diff in kept:
        LOGGER.debug("parsing %s", file_diff.path)
        for added in parse_patch(file_diff.patch):
            cops = scan_directive(added.content)
            if cops is None:
                continue
            violations.append(
                Violation(file=file_diff.path, line=added.line_number, disabled_rules=tuple(cops))
            )
    LOGGER.debug("found %d violation(s) in %d file(s)", len(violations), len(kept))
    return violations


def run_check(files: Iterable[FileDiff], config: RunConfig, resolver: RuleResolver) -> CheckResult:
    """Run the full check and build the annotations to post."""
    violations = find_violations(files, config)
    if not violations:
        return CheckResult()

    # Fetch every distinct cop up front; per-violation resolution then hits the memo.
    resolver.resolve_many([cop for violation in violations for cop in violation.disabled_rules])

    annotations = [
        Annotation(
            body=format_inline(resolver.resolve_many(violation.disabled_rules), config.message),
            file=violation.file,
            line=violation.line,
        )
        for violation in violations
    ]
    annotations.append(Annotation(body=format_summary(config.tag_reviewers)))
    LOGGER.debug("emitting %d annotation(s)", len(annotations))
    return CheckResult(violations=violations, annotations=annotations)


def check_diff_text(diff_text: str, config: RunConfig, resolver: RuleResolver) -> CheckResult:
    """Split multi-file diff text and run the check over it."""
    return run_check(split_unified_diff(diff_text), config, resolver)
