from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ...domain import InstanceOverride
from ..supabase import SupabaseGateway, first_row, rows


@dataclass(slots=True)
class InstanceRepository:
    """Per-date overrides stored in the ``event_instances`` table."""

    gateway: SupabaseGateway
    table_name: str

    def list_for_event(self, event_id: str) -> List[InstanceOverride]:
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("event_id", event_id)
            .order("date", desc=False)
            .execute()
        )
        return [InstanceOverride.from_record(record) for record in rows(response)]

    def upsert(self, override: InstanceOverride) -> InstanceOverride:
        payload = override.to_record()
        payload["household_id"] = self.gateway.household_id()
        response = self.gateway.table(self.table_name).upsert(payload, on_conflict="id").execute()
        return InstanceOverride.from_record(first_row(response, f"Upsert into {self.table_name}"))

    def delete(self, override_id: str) -> bool:
        response = self.gateway.table(self.table_name).delete().eq("id", override_id).execute()
        return bool(rows(response))
