from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Mapping, Optional, Sequence
from uuid import uuid4

from ..core import RecordStore, expand, index_overrides, resolve, select_override
from ..domain import EventTemplate, InstanceOverride, Occurrence, TransportationDetails
from ..feeds import build_feed
from .context import ServiceContext

logger = logging.getLogger(__name__)


def _sort_key(occurrence: Occurrence) -> tuple:
    start = occurrence.slots[0].start_time if occurrence.slots else ""
    return (occurrence.date, start, occurrence.title.casefold())


def occurrences_for_templates(
    templates: Iterable[EventTemplate],
    overrides: Iterable[InstanceOverride],
    start: date,
    end: date,
) -> List[Occurrence]:
    """Expand and resolve every template over ``[start, end]``, ordered by date then start time."""

    pending = list(overrides)
    collected: list[Occurrence] = []
    for template in templates:
        by_date = index_overrides(template.id, pending)
        collected.extend(resolve(template, expand(template, start, end), by_date))
    return sorted(collected, key=_sort_key)


@dataclass(slots=True)
class CalendarService:
    context: ServiceContext

    @property
    def store(self) -> RecordStore:
        return self.context.store

    def _template(self, event_id: str) -> EventTemplate:
        for template in self.store.list_templates():
            if template.id == event_id:
                return template
        raise KeyError(f"Event '{event_id}' not found.")

    def occurrences_between(self, start: date, end: date, *, include_cancelled: bool = True) -> List[Occurrence]:
        templates = self.store.list_templates()
        overrides = [item for template in templates for item in self.store.list_overrides(template.id)]
        occurrences = occurrences_for_templates(templates, overrides, start, end)
        if include_cancelled:
            return occurrences
        return [item for item in occurrences if not item.cancelled]

    def occurrences_for_day(self, target_day: date) -> List[Occurrence]:
        return self.occurrences_between(target_day, target_day)

    def _overrides_on(self, event_id: str, target_day: date) -> List[InstanceOverride]:
        return [item for item in self.store.list_overrides(event_id) if item.date == target_day]

    def edit_occurrence(
        self,
        event_id: str,
        target_day: date,
        *,
        participants: Optional[Sequence[str]] = None,
        transportation: Optional[TransportationDetails] = None,
        cancelled: Optional[bool] = None,
    ) -> Occurrence:
        """Change a single occurrence, superseding any earlier edit of the same date."""

        template = self._template(event_id)
        if target_day not in list(expand(template, target_day, target_day)):
            raise ValueError(f"Event '{event_id}' does not occur on {target_day.isoformat()}.")

        existing = select_override(event_id, target_day, self._overrides_on(event_id, target_day))
        override = InstanceOverride(
            id=existing.id if existing else str(uuid4()),
            event_id=event_id,
            date=target_day,
            participants=existing.participants if existing else None,
            transportation=existing.transportation if existing else None,
            cancelled=existing.cancelled if existing else False,
            household_id=template.household_id,
            created_at=existing.created_at if existing else None,
        )
        if participants is not None:
            override.participants = tuple(participants)
        if transportation is not None:
            override.transportation = transportation
        if cancelled is not None:
            override.cancelled = cancelled

        saved = self.store.upsert_override(override)
        logger.info("Saved override %s for event %s on %s", saved.id, event_id, target_day.isoformat())
        return next(iter(resolve(template, [target_day], {target_day: [saved]})))

    def revert_occurrence(self, event_id: str, target_day: date) -> int:
        """Drop every override for the date so the occurrence returns to the template defaults."""

        removed = 0
        for override in self._overrides_on(event_id, target_day):
            if self.store.delete_override(override.id):
                removed += 1
        logger.info("Reverted %d override(s) for event %s on %s", removed, event_id, target_day.isoformat())
        return removed

    def feed(
        self,
        *,
        name: str,
        filter_person: Optional[str] = None,
        start: Optional[date] = None,
        member_names: Optional[Mapping[str, str]] = None,
    ) -> bytes:
        """iCalendar feed of the household's occurrences from ``start`` over the configured horizon."""

        window_start = start or date.today()
        window_end = window_start + timedelta(days=self.context.settings.feed.horizon_days)
        return build_feed(
            self.occurrences_between(window_start, window_end),
            self.store.list_templates(),
            name=name,
            product_id=self.context.settings.feed.product_id,
            filter_person=filter_person,
            member_names=member_names,
        )
