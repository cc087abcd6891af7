from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from ...domain import CandidateEvent, EventTemplate
from ..supabase import SupabaseGateway, first_row, rows


@dataclass(slots=True)
class EventRepository:
    """Recurring event templates stored in the ``family_events`` table."""

    gateway: SupabaseGateway
    table_name: str

    def list_for_household(self) -> List[EventTemplate]:
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("household_id", self.gateway.household_id())
            .order("start_date", desc=False)
            .execute()
        )
        return [EventTemplate.from_record(record) for record in rows(response)]

    def _payload(self, fields: CandidateEvent) -> Dict[str, Any]:
        payload = fields.to_fields()
        payload["household_id"] = self.gateway.household_id()
        payload["participant_ids"] = payload["participants"]
        return payload

    def insert(self, fields: CandidateEvent) -> EventTemplate:
        response = self.gateway.table(self.table_name).insert(self._payload(fields)).execute()
        return EventTemplate.from_record(first_row(response, f"Insert into {self.table_name}"))

    def update(self, event_id: str, fields: CandidateEvent) -> EventTemplate:
        response = (
            self.gateway.table(self.table_name)
            .update(self._payload(fields))
            .eq("id", event_id)
            .execute()
        )
        return EventTemplate.from_record(first_row(response, f"Update of {self.table_name} row {event_id}"))
