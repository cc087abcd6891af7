from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Iterator, Tuple

from ..domain import EventTemplate, RecurrenceSlot
from .dates import DateWindow, day_of_week

logger = logging.getLogger(__name__)


def valid_slots(template: EventTemplate) -> Tuple[RecurrenceSlot, ...]:
    """Slots with a usable day of week; malformed ones are logged and dropped."""

    usable: list[RecurrenceSlot] = []
    for slot in template.recurrence_slots:
        if slot.is_valid:
            usable.append(slot)
        else:
            logger.warning(
                "Skipping slot with day_of_week=%r on template %s", slot.day_of_week, template.id
            )
    return tuple(usable)


def slots_for_day(template: EventTemplate, day: date) -> Tuple[RecurrenceSlot, ...]:
    weekday = day_of_week(day)
    return tuple(slot for slot in template.recurrence_slots if slot.is_valid and slot.day_of_week == weekday)


def effective_range(template: EventTemplate, window_start: date, window_end: date) -> DateWindow:
    start = max(template.start_date, window_start)
    end = min(template.end_date or window_end, window_end)
    return DateWindow(start=start, end=end)


@dataclass(frozen=True, slots=True)
class RecurrenceExpansion:
    """Ascending dates on which ``template`` occurs within a window.

    Re-iterating replays the same sequence; nothing is cached between runs.
    """

    template: EventTemplate
    window_start: date
    window_end: date

    @property
    def weekdays(self) -> FrozenSet[int]:
        return frozenset(slot.day_of_week for slot in valid_slots(self.template))

    def __iter__(self) -> Iterator[date]:
        weekdays = self.weekdays
        if not weekdays:
            return
        for day in effective_range(self.template, self.window_start, self.window_end):
            if day_of_week(day) in weekdays:
                yield day


def expand(template: EventTemplate, window_start: date, window_end: date) -> RecurrenceExpansion:
    return RecurrenceExpansion(template=template, window_start=window_start, window_end=window_end)
