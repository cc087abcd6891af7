"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, FeedSettings, MatchSettings, StorageSettings, SupabaseSettings, get_settings

__all__ = ["AppSettings", "FeedSettings", "MatchSettings", "StorageSettings", "SupabaseSettings", "get_settings"]
