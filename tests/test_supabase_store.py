"""Tests for the Supabase-backed record store against a recording client."""
from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from hearth_calendar.config import StorageSettings, SupabaseSettings
from hearth_calendar.data import HouseholdNotSelectedError, StoreError, SupabaseNotInitializedError, SupabaseRecordStore
from hearth_calendar.domain import CandidateEvent, InstanceOverride

EVENT_ROW = {
    "id": "evt-1",
    "title": "Soccer Practice",
    "category": "sports",
    "start_date": "2024-01-01",
    "participant_ids": ["kid1"],
    "recurrence_slots": [{"dayOfWeek": 2, "startTime": "15:00", "endTime": "16:00"}],
}


class FakeQuery:
    def __init__(self, name, data):
        self.name = name
        self.data = data
        self.calls = []

    def _record(self, method, *args, **kwargs):
        self.calls.append((method, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def eq(self, *args, **kwargs):
        return self._record("eq", *args, **kwargs)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def insert(self, *args, **kwargs):
        return self._record("insert", *args, **kwargs)

    def update(self, *args, **kwargs):
        return self._record("update", *args, **kwargs)

    def upsert(self, *args, **kwargs):
        return self._record("upsert", *args, **kwargs)

    def delete(self, *args, **kwargs):
        return self._record("delete", *args, **kwargs)

    def execute(self):
        return SimpleNamespace(data=self.data)


class FakeClient:
    def __init__(self, data=None):
        self.data = data or {}
        self.queries = []

    def table(self, name):
        query = FakeQuery(name, self.data.get(name, []))
        self.queries.append(query)
        return query


def make_store(client, household_id="house-1"):
    store = SupabaseRecordStore(
        supabase=SupabaseSettings(url="https://example.supabase.co", anon_key="anon", household_id=household_id),
        storage=StorageSettings(
            backend="supabase",
            events_table="family_events",
            instances_table="event_instances",
            audit_table="admin_audit_log",
            store_path=Path("unused.json"),
        ),
    )
    store.gateway._client = client
    return store


class TestSupabaseRecordStore:
    """Test cases for queries issued through the repositories."""

    def test_templates_are_scoped_to_the_household(self):
        client = FakeClient({"family_events": [EVENT_ROW]})

        [template] = make_store(client).list_templates()

        assert template.id == "evt-1"
        assert template.participants == ("kid1",)
        query = client.queries[0]
        assert query.name == "family_events"
        assert ("eq", ("household_id", "house-1"), {}) in query.calls

    def test_overrides_are_listed_per_event(self):
        client = FakeClient({"event_instances": [{"id": "ovr-1", "event_id": "evt-1", "date": "2024-01-09", "cancelled": True}]})
        [override] = make_store(client).list_overrides("evt-1")
        assert override.cancelled is True
        assert ("eq", ("event_id", "evt-1"), {}) in client.queries[0].calls

    def test_insert_adds_household_and_participant_ids(self):
        client = FakeClient({"family_events": [EVENT_ROW]})
        candidate = CandidateEvent(title="Soccer Practice", start_date=date(2024, 1, 1), category="sports", participants=("kid1",))

        make_store(client).insert_event(candidate)

        method, (payload,), _ = client.queries[0].calls[0]
        assert method == "insert"
        assert payload["household_id"] == "house-1"
        assert payload["participant_ids"] == ["kid1"]

    def test_writes_use_the_selected_household(self):
        client = FakeClient({"family_events": [EVENT_ROW], "event_instances": [{"id": "ovr-1", "event_id": "evt-1", "date": "2024-01-09"}]})
        store = make_store(client)
        foreign = CandidateEvent(title="Soccer Practice", start_date=date(2024, 1, 1), category="sports", household_id="someone-else")

        store.insert_event(foreign)
        store.update_event("evt-1", foreign)
        store.upsert_override(InstanceOverride(id="ovr-1", event_id="evt-1", date=date(2024, 1, 9), household_id="someone-else"))

        payloads = [query.calls[0][1][0] for query in client.queries]
        assert [payload["household_id"] for payload in payloads] == ["house-1", "house-1", "house-1"]

    def test_update_without_returned_row_raises(self):
        client = FakeClient()
        with pytest.raises(StoreError, match="returned no data"):
            make_store(client).update_event("evt-1", CandidateEvent(title="Soccer Practice"))

    def test_upsert_override_conflicts_on_id(self):
        row = {"id": "ovr-1", "event_id": "evt-1", "date": "2024-01-09", "participants": ["kid2"]}
        client = FakeClient({"event_instances": [row]})

        saved = make_store(client).upsert_override(
            InstanceOverride(id="ovr-1", event_id="evt-1", date=date(2024, 1, 9), participants=("kid2",))
        )

        assert saved.participants == ("kid2",)
        method, _, kwargs = client.queries[0].calls[0]
        assert method == "upsert"
        assert kwargs == {"on_conflict": "id"}

    def test_delete_override_reports_whether_a_row_went(self):
        assert make_store(FakeClient()).delete_override("ovr-1") is False
        assert make_store(FakeClient({"event_instances": [{"id": "ovr-1"}]})).delete_override("ovr-1") is True

    def test_audit_metadata_carries_household(self):
        client = FakeClient()
        make_store(client).record_audit("events_export", {"event_count": 1})
        _, (payload,), _ = client.queries[0].calls[0]
        assert payload == {"action_type": "events_export", "metadata": {"event_count": 1, "household_id": "house-1"}}

    def test_missing_household(self):
        with pytest.raises(HouseholdNotSelectedError):
            make_store(FakeClient(), household_id=None).list_templates()

    def test_missing_credentials(self):
        store = SupabaseRecordStore(
            supabase=SupabaseSettings(url=None, anon_key=None, household_id="house-1"),
            storage=make_store(FakeClient()).storage,
        )
        with pytest.raises(SupabaseNotInitializedError):
            store.list_templates()
