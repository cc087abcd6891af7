"""Hearth Calendar: recurring household events, per-date overrides and duplicate-safe imports."""

from __future__ import annotations

from .core import apply, expand, find_conflicts, resolve, score

__all__ = ["apply", "expand", "find_conflicts", "main", "resolve", "score"]


def main() -> None:
    from .cli import main as cli_main

    raise SystemExit(cli_main())
