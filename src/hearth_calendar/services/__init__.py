"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .calendar import CalendarService, occurrences_for_templates
from .context import ServiceContext, build_store
from .imports import ImportOutcome, ImportService, parse_resolutions

__all__ = [
    "CalendarService",
    "ImportOutcome",
    "ImportService",
    "ServiceContext",
    "build_store",
    "occurrences_for_templates",
    "parse_resolutions",
]
