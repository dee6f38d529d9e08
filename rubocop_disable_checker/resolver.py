"""Cop documentation lookup and display formatting."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from subprocess import CalledProcessError, TimeoutExpired, run

LOGGER = logging.getLogger(__name__)

DEFAULT_DOCS_COMMAND = ("bundle", "exec", "rubocop", "--show-docs-url")
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_WORKERS = 4

# Maps a cop identifier to its documentation URL, or "" when there is none.
DocsLookup = Callable[[str], str]


class RubocopDocsLookup:
    """Ask RuboCop for the documentation URL of a cop."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_DOCS_COMMAND,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        cwd: str | None = None,
    ) -> None:
        self.command = tuple(command)
        self.timeout = timeout
        self.cwd = cwd

    def __call__(self, cop: str) -> str:
        try:
            completed = run(
                [*self.command, cop],
                cwd=self.cwd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            LOGGER.warning("docs lookup for %s failed: %s", cop, stderr or exc)
            return ""
        except TimeoutExpired:
            LOGGER.warning("docs lookup for %s timed out after %ss", cop, self.timeout)
            return ""
        except OSError as exc:
            LOGGER.warning("docs lookup for %s could not run: %s", cop, exc)
            return ""
        return completed.stdout.replace("\n", "").strip()


def no_docs_lookup(cop: str) -> str:
    """Lookup used when documentation links are disabled."""
    _ = cop
    return ""


def format_rule_link(cop: str, url: str) -> str:
    """Render a cop as a markdown link when a URL is known."""
    if not url:
        return cop
    return f"[{cop}]({url})"


class RuleResolver:
    """Resolve cop identifiers to display strings for a single run.

    Lookups are memoized by identifier, so each distinct cop costs at most one
    external call per resolver instance. A lookup that raises is treated as
    having no documentation.
    """

    def __init__(self, lookup: DocsLookup, *, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        self._lookup = lookup
        self._max_workers = max_workers
        self._urls: dict[str, str] = {}

    def resolve(self, cop: str) -> str:
        """Return ``cop`` or ``[cop](url)``."""
        return format_rule_link(cop, self._url_for(cop))

    def resolve_many(self, cops: Sequence[str]) -> list[str]:
        """Resolve cops, fetching unknown ones concurrently, in input order."""
        pending = [cop for cop in dict.fromkeys(cops) if cop not in self._urls]
        if len(pending) > 1 and self._max_workers > 1:
            workers = min(self._max_workers, len(pending))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                for cop, url in zip(pending, executor.map(self._safe_lookup, pending)):
                    self._urls[cop] = url
        return [self.resolve(cop) for cop in cops]

    def _url_for(self, cop: str) -> str:
        if cop not in self._urls:
            self._urls[cop] = self._safe_lookup(cop)
        return self._urls[cop]

    def _safe_lookup(self, cop: str) -> str:
        try:
            url = self._lookup(cop)
        except Exception as exc:
            LOGGER.warning("docs lookup for %s raised %s: %s", cop, exc.__class__.__name__, exc)
            return ""
        return (url or "").strip()
