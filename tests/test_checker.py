"""Tests for check orchestration."""

from __future__ import annotations

from pathlib import Path

import pytest

from rubocop_disable_checker.checker import check_diff_text, find_violations, run_check
from rubocop_disable_checker.config import DEFAULT_MESSAGE, RunConfig
from rubocop_disable_checker.diff_parser import FileDiff, MalformedDiffHeader
from rubocop_disable_checker.resolver import RuleResolver, no_docs_lookup

FIXTURE_DIR = Path(__file__).parent / "fixtures" / "diffs"


def _patch(path: str, start: int, body: list[str]) -> FileDiff:
    header = f"@@ -{start},{len(body)} +{start},{len(body)} @@"
    return FileDiff(path=path, patch="\n".join([header, *body]))


def _resolver(urls: dict[str, str] | None = None) -> RuleResolver:
    mapping = urls or {}
    return RuleResolver(lambda cop: mapping.get(cop, ""), max_workers=1)


def test_single_trailing_directive_is_one_violation() -> None:
    files = [_patch("lib/foo.rb", 1, ["+  foo() # rubocop:disable Metrics/MethodLength"])]
    violations = find_violations(files, RunConfig())
    assert len(violations) == 1
    assert violations[0].file == "lib/foo.rb"
    assert violations[0].line == 1
    assert violations[0].disabled_rules == ("Metrics/MethodLength",)


def test_multiple_cops_are_listed_in_body() -> None:
    files = [_patch("lib/x.rb", 3, ["+x = 1 # rubocop:disable A, B"])]
    result = run_check(files, RunConfig(), _resolver())
    assert result.violations[0].disabled_rules == ("A", "B")
    assert "\n- A\n- B\n" in result.inline[0].body


def test_no_violations_emits_no_annotations() -> None:
    files = [_patch("lib/x.rb", 1, ["+puts 'hello'", " context", "-# rubocop:disable Old/Cop"])]
    result = run_check(files, RunConfig(tag_reviewers=("alice",)), _resolver())
    assert result.violations == []
    assert result.annotations == []
    assert result.summary is None


def test_violations_in_two_files_add_one_summary() -> None:
    files = [
        _patch("a.rb", 1, ["+a # rubocop:disable Style/A"]),
        _patch("b.rb", 1, ["+b # rubocop:disable Style/B"]),
    ]
    result = run_check(files, RunConfig(tag_reviewers=("alice", "bob")), _resolver())
    assert len(result.inline) == 2
    assert [annotation.file for annotation in result.inline] == ["a.rb", "b.rb"]
    summary = result.summary
    assert summary is not None
    assert "cc @alice, @bob" in summary.body
    assert summary.file is None and summary.line is None
    assert result.annotations[-1] == summary
    assert all(annotation.severity == "warning" for annotation in result.annotations)


def test_ignored_path_never_contributes_violations() -> None:
    files = [
        _patch("Dangerfile", 1, ["+x # rubocop:disable Style/A"]),
        _patch("config/Dangerfile.local", 1, ["+y # rubocop:disable Style/B"]),
    ]
    assert find_violations(files, RunConfig()) == []
    assert len(find_violations(files, RunConfig(ignore_paths=()))) == 2


def test_inline_body_uses_resolved_links_and_message() -> None:
    files = [_patch("a.rb", 1, ["+a # rubocop:disable Style/A"])]
    result = run_check(
        files,
        RunConfig(message="Talk to the team first."),
        _resolver({"Style/A": "https://docs.test/style-a"}),
    )
    body = result.inline[0].body
    assert body.startswith("Detected `rubocop:disable` for [Style/A](https://docs.test/style-a)")
    assert body.endswith("> Talk to the team first.\n")


def test_violation_order_follows_files_then_lines() -> None:
    diff_text = (FIXTURE_DIR / "rubocop.diff").read_text(encoding="utf-8")
    result = check_diff_text(diff_text, RunConfig(), RuleResolver(no_docs_lookup))
    assert [(item.file, item.line, item.disabled_rules) for item in result.violations] == [
        ("app/models/user.rb", 13, ("Metrics/MethodLength",)),
        (
            "app/models/user.rb",
            42,
            ("Style/RedundantReturn", "Lint/UselessAssignment"),
        ),
        ("lib/tasks/cleanup.rb", 1, ()),
    ]
    assert [(item.file, item.line) for item in result.inline] == [
        ("app/models/user.rb", 13),
        ("app/models/user.rb", 42),
        ("lib/tasks/cleanup.rb", 1),
    ]
    assert result.inline[2].body.startswith("Detected `rubocop:disable`\n")
    assert DEFAULT_MESSAGE in result.inline[0].body
    assert result.summary is not None
    assert result.summary.body == "Detected use of `rubocop:disable` directive."


def test_each_distinct_cop_is_looked_up_once() -> None:
    calls: list[str] = []

    def lookup(cop: str) -> str:
        calls.append(cop)
        return ""

    files = [
        _patch(
            "a.rb",
            1,
            ["+a # rubocop:disable Style/A, Style/B", "+b # rubocop:disable Style/A"],
        ),
    ]
    run_check(files, RunConfig(), RuleResolver(lookup, max_workers=1))
    assert sorted(calls) == ["Style/A", "Style/B"]


def test_malformed_header_fails_the_run() -> None:
    files = [FileDiff(path="a.rb", patch="@@ -1 +oops @@\n+a # rubocop:disable Style/A")]
    with pytest.raises(MalformedDiffHeader):
        run_check(files, RunConfig(), _resolver())
