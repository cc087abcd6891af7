from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..config.settings import StorageSettings, SupabaseSettings
from ..domain import CandidateEvent, EventTemplate, InstanceOverride
from .repositories import AuditRepository, EventRepository, InstanceRepository
from .supabase import SupabaseGateway


@dataclass(slots=True)
class SupabaseRecordStore:
    """Record store backed by the household's Supabase tables."""

    supabase: SupabaseSettings
    storage: StorageSettings
    gateway: SupabaseGateway = field(init=False)
    events: EventRepository = field(init=False)
    instances: InstanceRepository = field(init=False)
    audit: AuditRepository = field(init=False)

    def __post_init__(self) -> None:
        self.gateway = SupabaseGateway(self.supabase)
        self.events = EventRepository(gateway=self.gateway, table_name=self.storage.events_table)
        self.instances = InstanceRepository(gateway=self.gateway, table_name=self.storage.instances_table)
        self.audit = AuditRepository(gateway=self.gateway, table_name=self.storage.audit_table)

    def list_templates(self) -> List[EventTemplate]:
        return self.events.list_for_household()

    def list_overrides(self, template_id: str) -> List[InstanceOverride]:
        return self.instances.list_for_event(template_id)

    def list_existing_events(self) -> List[EventTemplate]:
        return self.events.list_for_household()

    def insert_event(self, fields: CandidateEvent) -> EventTemplate:
        return self.events.insert(fields)

    def update_event(self, event_id: str, fields: CandidateEvent) -> EventTemplate:
        return self.events.update(event_id, fields)

    def upsert_override(self, override: InstanceOverride) -> InstanceOverride:
        return self.instances.upsert(override)

    def delete_override(self, override_id: str) -> bool:
        return self.instances.delete(override_id)

    def record_audit(self, action: str, metadata: Dict[str, Any]) -> None:
        self.audit.record(action, metadata)
