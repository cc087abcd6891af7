from __future__ import annotations

from typing import Any, Dict, List, Protocol

from ..domain import CandidateEvent, EventTemplate, InstanceOverride


class RecordStore(Protocol):
    """Persistence capabilities the engine and services are handed.

    Implementations may raise any exception from any method; callers that
    batch work isolate failures per item.
    """

    def list_templates(self) -> List[EventTemplate]: ...

    def list_overrides(self, template_id: str) -> List[InstanceOverride]: ...

    def list_existing_events(self) -> List[EventTemplate]: ...

    def insert_event(self, fields: CandidateEvent) -> EventTemplate: ...

    def update_event(self, event_id: str, fields: CandidateEvent) -> EventTemplate: ...

    def upsert_override(self, override: InstanceOverride) -> InstanceOverride: ...

    def delete_override(self, override_id: str) -> bool: ...

    def record_audit(self, action: str, metadata: Dict[str, Any]) -> None: ...
