"""Data access layer."""

from __future__ import annotations

from .json_store import JsonRecordStore
from .stores import SupabaseRecordStore
from .supabase import HouseholdNotSelectedError, StoreError, SupabaseGateway, SupabaseNotInitializedError

__all__ = [
    "HouseholdNotSelectedError",
    "JsonRecordStore",
    "StoreError",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
    "SupabaseRecordStore",
]
