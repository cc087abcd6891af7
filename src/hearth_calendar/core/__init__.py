"""Recurring event resolution engine: expansion, overrides, matching and conflict resolution."""

from .config import APP_NAME, DATA_DIR, DEFAULT_STORE_CONTENT, STORE_FILE, ensure_data_dir
from .dates import DateWindow, date_window, day_of_week
from .matching import DEFAULT_WEIGHTS, EXACT_ID_REASON, MatchWeights, best_match, find_conflicts, score
from .overrides import index_overrides, resolve, select_override
from .recurrence import effective_range, expand, slots_for_day
from .resolution import UnresolvedConflictsError, apply, require_all_resolved
from .store import RecordStore

__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "DEFAULT_STORE_CONTENT",
    "DEFAULT_WEIGHTS",
    "DateWindow",
    "EXACT_ID_REASON",
    "MatchWeights",
    "RecordStore",
    "STORE_FILE",
    "UnresolvedConflictsError",
    "apply",
    "best_match",
    "date_window",
    "day_of_week",
    "effective_range",
    "ensure_data_dir",
    "expand",
    "find_conflicts",
    "index_overrides",
    "require_all_resolved",
    "resolve",
    "score",
    "select_override",
    "slots_for_day",
]
