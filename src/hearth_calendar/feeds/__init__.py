"""Calendar feed rendering."""

from __future__ import annotations

from .ical import build_feed, keeps_occurrence

__all__ = ["build_feed", "keeps_occurrence"]
