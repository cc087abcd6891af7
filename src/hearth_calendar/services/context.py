from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..config import AppSettings, get_settings
from ..core import MatchWeights, RecordStore
from ..data import JsonRecordStore, SupabaseRecordStore


def build_store(settings: AppSettings) -> RecordStore:
    if settings.storage.backend == "supabase":
        return SupabaseRecordStore(supabase=settings.supabase, storage=settings.storage)
    if settings.storage.backend == "json":
        return JsonRecordStore(settings.storage.store_path)
    raise ValueError(f"Unknown store backend '{settings.storage.backend}'; expected 'json' or 'supabase'.")


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings and the record store."""

    settings: AppSettings = field(default_factory=get_settings)
    store: Optional[RecordStore] = None
    weights: MatchWeights = field(init=False)

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = build_store(self.settings)
        self.weights = self.settings.matching.weights()
