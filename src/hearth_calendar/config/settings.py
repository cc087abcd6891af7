from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core.config import STORE_FILE
from ..core.matching import MatchWeights

load_dotenv()


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]
    household_id: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key:
            missing.append("SUPABASE_ANON_KEY")
        if not self.household_id:
            missing.append("HEARTH_HOUSEHOLD_ID")
        return missing


@dataclass(frozen=True)
class StorageSettings:
    backend: str
    events_table: str
    instances_table: str
    audit_table: str
    store_path: Path


@dataclass(frozen=True)
class MatchSettings:
    threshold: int
    exact_title: float
    similar_title: float
    same_date: float
    adjacent_date: float
    participants: float

    def weights(self) -> MatchWeights:
        return MatchWeights(
            exact_title=self.exact_title,
            similar_title=self.similar_title,
            same_date=self.same_date,
            adjacent_date=self.adjacent_date,
            participants=self.participants,
            threshold=self.threshold,
        )


@dataclass(frozen=True)
class FeedSettings:
    horizon_days: int
    product_id: str


@dataclass(frozen=True)
class AppSettings:
    supabase: SupabaseSettings
    storage: StorageSettings
    matching: MatchSettings
    feed: FeedSettings


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
        household_id=os.getenv("HEARTH_HOUSEHOLD_ID"),
    )

    storage = StorageSettings(
        backend=os.getenv("HEARTH_STORE_BACKEND", "json").lower(),
        events_table=os.getenv("SUPABASE_EVENTS_TABLE", "family_events"),
        instances_table=os.getenv("SUPABASE_INSTANCES_TABLE", "event_instances"),
        audit_table=os.getenv("SUPABASE_AUDIT_TABLE", "admin_audit_log"),
        store_path=Path(os.getenv("HEARTH_STORE_PATH") or STORE_FILE),
    )

    defaults = MatchWeights()
    matching = MatchSettings(
        threshold=_int_from_env("HEARTH_MATCH_THRESHOLD", defaults.threshold),
        exact_title=_float_from_env("HEARTH_WEIGHT_EXACT_TITLE", defaults.exact_title),
        similar_title=_float_from_env("HEARTH_WEIGHT_SIMILAR_TITLE", defaults.similar_title),
        same_date=_float_from_env("HEARTH_WEIGHT_SAME_DATE", defaults.same_date),
        adjacent_date=_float_from_env("HEARTH_WEIGHT_ADJACENT_DATE", defaults.adjacent_date),
        participants=_float_from_env("HEARTH_WEIGHT_PARTICIPANTS", defaults.participants),
    )

    feed = FeedSettings(
        horizon_days=_int_from_env("HEARTH_FEED_HORIZON_DAYS", 365),
        product_id=os.getenv("HEARTH_FEED_PRODID", "-//Hearth//Family Calendar//EN"),
    )

    return AppSettings(supabase=supabase, storage=storage, matching=matching, feed=feed)
