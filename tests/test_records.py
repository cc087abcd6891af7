"""Tests for record parsing and the local JSON record store."""
from datetime import date, datetime, timezone
from pathlib import Path

import orjson
import pytest

from hearth_calendar.core import apply
from hearth_calendar.data import JsonRecordStore
from hearth_calendar.domain import (
    ActivityCategory,
    CandidateEvent,
    Conflict,
    Create,
    EventTemplate,
    InstanceOverride,
    RecurrenceSlot,
    TransportMethod,
    parse_date,
)

TEMPLATE_RECORD = {
    "id": "evt-1",
    "title": "Soccer Practice",
    "category": "sports",
    "start_date": "2024-01-01",
    "end_date": None,
    "participant_ids": ["kid1", "kid2"],
    "recurrence_slots": [
        {
            "dayOfWeek": 2,
            "startTime": "15:00",
            "endTime": "16:00",
            "transportation": {"dropOffMethod": "car", "dropOffPersonId": "parent1"},
        }
    ],
    "created_at": "2024-01-01T08:00:00Z",
}


class TestRecords:
    """Test cases for converting stored rows into domain objects."""

    def test_template_from_record(self):
        template = EventTemplate.from_record(TEMPLATE_RECORD)

        assert template.category is ActivityCategory.SPORTS
        assert template.start_date == date(2024, 1, 1)
        assert template.participants == ("kid1", "kid2")
        slot = template.recurrence_slots[0]
        assert slot.day_of_week == 2
        assert slot.transportation.drop_off_method is TransportMethod.CAR
        assert slot.transportation.drop_off_person == "parent1"
        assert template.created_at == datetime(2024, 1, 1, 8, tzinfo=timezone.utc)

    def test_unknown_category_falls_back_to_other(self):
        template = EventTemplate.from_record({**TEMPLATE_RECORD, "category": "knitting"})
        assert template.category is ActivityCategory.OTHER

    def test_malformed_day_of_week_becomes_invalid_slot(self):
        slot = RecurrenceSlot.from_record({"dayOfWeek": "tuesday", "startTime": "09:00", "endTime": "10:00"})
        assert not slot.is_valid

    def test_override_without_participants_keeps_none(self):
        override = InstanceOverride.from_record(
            {"id": "ovr-1", "event_id": "evt-1", "date": "2024-01-09", "cancelled": True}
        )
        assert override.participants is None
        assert override.cancelled is True

    def test_override_with_empty_participant_list(self):
        override = InstanceOverride.from_record(
            {"id": "ovr-1", "event_id": "evt-1", "date": "2024-01-09", "participants": []}
        )
        assert override.participants == ()

    def test_candidate_is_lenient(self):
        candidate = CandidateEvent.from_record({"title": "Piano", "start_date": "not a date"})
        assert candidate.start_date is None
        assert candidate.category is None
        assert not candidate.is_valid

    def test_parse_date_accepts_timestamps(self):
        assert parse_date("2024-03-05T10:00:00Z") == date(2024, 3, 5)
        assert parse_date(datetime(2024, 3, 5, 23, 59)) == date(2024, 3, 5)

    def test_parse_date_rejects_other_types(self):
        with pytest.raises(ValueError):
            parse_date(20240305)

    def test_short_fractional_seconds_are_accepted(self):
        template = EventTemplate.from_record({**TEMPLATE_RECORD, "created_at": "2024-01-01T08:00:00.12345+00:00"})
        assert template.created_at == datetime(2024, 1, 1, 8, 0, 0, 123450, tzinfo=timezone.utc)

    def test_unparseable_timestamp_is_dropped(self, caplog):
        override = InstanceOverride.from_record(
            {"id": "ovr-1", "event_id": "evt-1", "date": "2024-01-09", "created_at": "last tuesday"}
        )
        assert override.created_at is None
        assert "Ignoring unparseable timestamp" in caplog.text


class TestJsonRecordStore:
    """Test cases for the file-backed store."""

    @pytest.fixture
    def store(self, tmp_path):
        return JsonRecordStore(tmp_path / "household.json")

    def test_new_store_file_is_created_with_defaults(self, store):
        assert store.list_templates() == []
        data = orjson.loads(store.path.read_bytes())
        assert data["metadata"]["schema_version"] == 1

    def test_insert_assigns_id_and_persists(self, store, tmp_path):
        candidate = CandidateEvent.from_record(
            {"title": "Piano", "start_date": "2024-02-01", "category": "education", "participants": ["kid1"]}
        )
        created = store.insert_event(candidate)

        assert created.id
        reopened = JsonRecordStore(tmp_path / "household.json")
        [template] = reopened.list_templates()
        assert template.id == created.id
        assert template.title == "Piano"
        assert template.participants == ("kid1",)

    def test_update_replaces_fields(self, store):
        created = store.insert_event(CandidateEvent(title="Piano", start_date=date(2024, 2, 1), category="education"))
        store.update_event(created.id, CandidateEvent(title="Piano Lessons", start_date=date(2024, 2, 8), category="education"))

        [template] = store.list_templates()
        assert template.title == "Piano Lessons"
        assert template.start_date == date(2024, 2, 8)
        assert template.created_at == created.created_at

    def test_update_of_unknown_event_raises(self, store):
        with pytest.raises(KeyError):
            store.update_event("missing", CandidateEvent(title="Piano"))

    def test_override_upsert_keeps_first_created_at(self, store):
        first = store.upsert_override(InstanceOverride(id="ovr-1", event_id="evt-1", date=date(2024, 1, 9)))
        second = store.upsert_override(
            InstanceOverride(id="ovr-1", event_id="evt-1", date=date(2024, 1, 9), cancelled=True)
        )

        [saved] = store.list_overrides("evt-1")
        assert saved.cancelled is True
        assert second.created_at == first.created_at
        assert store.list_overrides("evt-2") == []

    def test_delete_override(self, store):
        store.upsert_override(InstanceOverride(id="ovr-1", event_id="evt-1", date=date(2024, 1, 9)))
        assert store.delete_override("ovr-1") is True
        assert store.delete_override("ovr-1") is False
        assert store.list_overrides("evt-1") == []

    def test_audit_entries_are_appended(self, store):
        store.record_audit("events_export", {"event_count": 2})
        [entry] = store.audit_log()
        assert entry["action"] == "events_export"
        assert entry["metadata"] == {"event_count": 2}

    def test_failed_write_leaves_store_unchanged(self, store, monkeypatch):
        store.list_templates()

        def refuse(path, data):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "write_bytes", refuse)
        with pytest.raises(OSError):
            store.insert_event(CandidateEvent(title="Chess", start_date=date(2024, 3, 1), category="education"))
        with pytest.raises(OSError):
            store.record_audit("events_import", {"total": 1})
        assert store.list_templates() == []
        assert store.audit_log() == []

        monkeypatch.undo()
        store.insert_event(CandidateEvent(title="Piano", start_date=date(2024, 3, 1), category="education"))
        reopened = JsonRecordStore(store.path)
        assert [template.title for template in reopened.list_templates()] == ["Piano"]

    def test_failed_write_counts_as_failure_in_apply(self, store, monkeypatch):
        existing = store.insert_event(CandidateEvent(title="Soccer", start_date=date(2024, 1, 1), category="sports"))
        conflict = Conflict(
            candidate_index=0,
            candidate=CandidateEvent(title="Soccer Practice", start_date=date(2024, 1, 1), category="sports"),
            existing=existing,
            match_score=80,
        )

        def refuse(path, data):
            raise OSError("read-only")

        monkeypatch.setattr(Path, "write_bytes", refuse)

        result = apply([conflict], {0: Create()}, store)

        assert result.failed == 1
        assert [template.title for template in store.list_templates()] == ["Soccer"]

    def test_load_snapshot(self, store):
        store.load_snapshot({"events": [TEMPLATE_RECORD], "instances": []})
        assert [template.id for template in store.list_templates()] == ["evt-1"]
