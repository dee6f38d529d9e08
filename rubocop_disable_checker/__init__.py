"""Flag added `rubocop:disable` directives in code-review diffs."""

__version__ = "0.1.0"
