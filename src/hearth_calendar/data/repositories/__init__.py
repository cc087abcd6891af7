"""Supabase repositories for first-class domain objects."""

from __future__ import annotations

from .audit import AuditRepository
from .events import EventRepository
from .instances import InstanceRepository

__all__ = ["AuditRepository", "EventRepository", "InstanceRepository"]
