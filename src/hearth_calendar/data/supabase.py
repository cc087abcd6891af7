from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from ..config.settings import SupabaseSettings


class SupabaseNotInitializedError(RuntimeError):
    """Raised when accessing the Supabase client before it can be created."""


class HouseholdNotSelectedError(RuntimeError):
    """Raised when a household-scoped query runs without a household id."""


class StoreError(RuntimeError):
    """Raised when a write returns no row back."""


@dataclass
class SupabaseGateway:
    """Thin wrapper around the Supabase Python client scoped to one household."""

    settings: SupabaseSettings
    _client: Optional[Client] = None

    def ensure_client(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            raise SupabaseNotInitializedError("Supabase settings are missing URL or anon key.")
        self._client = create_client(self.settings.url, self.settings.anon_key)
        return self._client

    def household_id(self) -> str:
        identifier = self.settings.household_id
        if not identifier:
            raise HouseholdNotSelectedError("No household selected. Set HEARTH_HOUSEHOLD_ID.")
        return identifier

    def table(self, name: str):
        return self.ensure_client().table(name)


def rows(response: Any) -> List[Dict[str, Any]]:
    return list(getattr(response, "data", None) or [])


def first_row(response: Any, action: str) -> Dict[str, Any]:
    data = rows(response)
    if not data:
        raise StoreError(f"{action} returned no data")
    return data[0]
