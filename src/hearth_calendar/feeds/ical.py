from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Iterable, Mapping, Optional

from icalendar import Calendar, Event

from ..domain import EventTemplate, Occurrence, RecurrenceSlot, TransportationDetails

logger = logging.getLogger(__name__)

UID_DOMAIN = "hearth.calendar"


def _slot_time(value: str) -> Optional[time]:
    try:
        return time.fromisoformat(value)
    except ValueError:
        return None


def keeps_occurrence(occurrence: Occurrence, filter_person: Optional[str]) -> bool:
    """Cancelled dates are dropped; a person filter only applies to occurrences with transportation."""

    if occurrence.cancelled:
        return False
    if filter_person and occurrence.transportation:
        return occurrence.transportation.involves(filter_person)
    return True


def describe(
    occurrence: Occurrence,
    template: EventTemplate,
    member_names: Mapping[str, str],
) -> str:
    lines: list[str] = []
    if occurrence.participants:
        names = [member_names.get(member, member) for member in occurrence.participants]
        lines.append(f"Participants: {', '.join(names)}")
    transportation: Optional[TransportationDetails] = occurrence.transportation
    if transportation:
        if transportation.drop_off_person and transportation.drop_off_method:
            person = member_names.get(transportation.drop_off_person, transportation.drop_off_person)
            lines.append(f"Drop-off: {person} ({transportation.drop_off_method.value})")
        if transportation.pick_up_person and transportation.pick_up_method:
            person = member_names.get(transportation.pick_up_person, transportation.pick_up_person)
            lines.append(f"Pick-up: {person} ({transportation.pick_up_method.value})")
    if template.notes:
        lines.append("")
        lines.append(f"Notes: {template.notes}")
    return "\n".join(lines)


def _vevent(
    occurrence: Occurrence,
    slot: RecurrenceSlot,
    template: EventTemplate,
    member_names: Mapping[str, str],
    stamp: datetime,
) -> Optional[Event]:
    start = _slot_time(slot.start_time)
    end = _slot_time(slot.end_time)
    if start is None or end is None:
        logger.warning(
            "Skipping slot %s-%s of event %s: unparseable time", slot.start_time, slot.end_time, template.id
        )
        return None
    day: date = occurrence.date
    event = Event()
    event.add("uid", f"{template.id}-{day.isoformat()}-{start.strftime('%H%M')}@{UID_DOMAIN}")
    event.add("dtstamp", stamp)
    event.add("dtstart", datetime.combine(day, start))
    event.add("dtend", datetime.combine(day, end))
    event.add("summary", template.title)
    event.add("description", describe(occurrence, template, member_names))
    if template.location:
        event.add("location", template.location)
    event.add("categories", [template.category.value])
    event.add("status", "CONFIRMED")
    return event


def build_feed(
    occurrences: Iterable[Occurrence],
    templates: Iterable[EventTemplate],
    *,
    name: str,
    product_id: str,
    filter_person: Optional[str] = None,
    member_names: Optional[Mapping[str, str]] = None,
) -> bytes:
    """Render resolved occurrences as an iCalendar document, one VEVENT per slot."""

    by_id = {template.id: template for template in templates}
    names = member_names or {}
    stamp = datetime.now(timezone.utc)

    calendar = Calendar()
    calendar.add("prodid", product_id)
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    calendar.add("method", "PUBLISH")
    calendar.add("x-wr-calname", name)

    count = 0
    for occurrence in occurrences:
        if not keeps_occurrence(occurrence, filter_person):
            continue
        template = by_id.get(occurrence.event_id)
        if template is None:
            continue
        for slot in occurrence.slots:
            event = _vevent(occurrence, slot, template, names, stamp)
            if event is not None:
                calendar.add_component(event)
                count += 1
    logger.info("Built feed %r with %d events", name, count)
    return calendar.to_ical()
