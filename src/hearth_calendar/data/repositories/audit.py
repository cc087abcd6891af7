from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from ..supabase import SupabaseGateway


@dataclass(slots=True)
class AuditRepository:
    gateway: SupabaseGateway
    table_name: str

    def record(self, action: str, metadata: Dict[str, Any]) -> None:
        self.gateway.table(self.table_name).insert(
            {
                "action_type": action,
                "metadata": {**metadata, "household_id": self.gateway.household_id()},
            }
        ).execute()
