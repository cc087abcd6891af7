"""Shared fixtures: template factories and an in-memory record store."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import pytest

from hearth_calendar.config import get_settings
from hearth_calendar.domain import (
    ActivityCategory,
    CandidateEvent,
    EventTemplate,
    InstanceOverride,
    RecurrenceSlot,
)
from hearth_calendar.services import ServiceContext


class FakeStore:
    """Record store kept in memory, with switches to make writes fail."""

    def __init__(
        self,
        templates: Iterable[EventTemplate] = (),
        overrides: Iterable[InstanceOverride] = (),
    ) -> None:
        self.templates: Dict[str, EventTemplate] = {template.id: template for template in templates}
        self.overrides: List[InstanceOverride] = list(overrides)
        self.inserted: List[CandidateEvent] = []
        self.updated: List[tuple[str, CandidateEvent]] = []
        self.audit: List[tuple[str, Dict[str, Any]]] = []
        self.fail_updates = False
        self.fail_inserts = False
        self._counter = 0

    def list_templates(self) -> List[EventTemplate]:
        return list(self.templates.values())

    def list_existing_events(self) -> List[EventTemplate]:
        return list(self.templates.values())

    def list_overrides(self, template_id: str) -> List[InstanceOverride]:
        return [item for item in self.overrides if item.event_id == template_id]

    def insert_event(self, fields: CandidateEvent) -> EventTemplate:
        if self.fail_inserts:
            raise RuntimeError("insert rejected")
        self._counter += 1
        self.inserted.append(fields)
        template = make_template(f"new-{self._counter}", title=fields.title, start=fields.start_date)
        self.templates[template.id] = template
        return template

    def update_event(self, event_id: str, fields: CandidateEvent) -> EventTemplate:
        if self.fail_updates:
            raise RuntimeError("update rejected by store")
        if event_id not in self.templates:
            raise KeyError(event_id)
        self.updated.append((event_id, fields))
        return self.templates[event_id]

    def upsert_override(self, override: InstanceOverride) -> InstanceOverride:
        stamp = override.created_at or datetime(2024, 1, 1, tzinfo=timezone.utc)
        saved = InstanceOverride(
            id=override.id,
            event_id=override.event_id,
            date=override.date,
            participants=override.participants,
            transportation=override.transportation,
            cancelled=override.cancelled,
            household_id=override.household_id,
            created_at=stamp,
        )
        self.overrides = [item for item in self.overrides if item.id != override.id]
        self.overrides.append(saved)
        return saved

    def delete_override(self, override_id: str) -> bool:
        before = len(self.overrides)
        self.overrides = [item for item in self.overrides if item.id != override_id]
        return len(self.overrides) < before

    def record_audit(self, action: str, metadata: Dict[str, Any]) -> None:
        self.audit.append((action, metadata))


def make_template(
    template_id: str = "evt-1",
    *,
    title: str = "Soccer Practice",
    start: Optional[date] = date(2024, 1, 1),
    end: Optional[date] = None,
    slots: Iterable[RecurrenceSlot] = (RecurrenceSlot(day_of_week=2, start_time="15:00", end_time="16:00"),),
    participants: Iterable[str] = ("kid1",),
    **extra: Any,
) -> EventTemplate:
    return EventTemplate(
        id=template_id,
        title=title,
        category=ActivityCategory.SPORTS,
        start_date=start or date(2024, 1, 1),
        end_date=end,
        recurrence_slots=tuple(slots),
        participants=tuple(participants),
        **extra,
    )


def make_override(
    override_id: str,
    day: date,
    *,
    event_id: str = "evt-1",
    created_at: Optional[datetime] = None,
    **extra: Any,
) -> InstanceOverride:
    return InstanceOverride(id=override_id, event_id=event_id, date=day, created_at=created_at, **extra)


@pytest.fixture
def tuesday_template() -> EventTemplate:
    return make_template()


@pytest.fixture
def fake_store(tuesday_template: EventTemplate) -> FakeStore:
    return FakeStore(templates=[tuesday_template])


@pytest.fixture
def context(fake_store: FakeStore) -> ServiceContext:
    return ServiceContext(settings=get_settings(), store=fake_store)
