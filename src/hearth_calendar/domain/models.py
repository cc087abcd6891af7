from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .enums import ActivityCategory, TransportMethod

logger = logging.getLogger(__name__)


_SHORT_FRACTION = re.compile(r"\.(\d{1,5})(?=[+-]|$)")


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.replace("Z", "+00:00")
        # Postgres trims trailing zeros from fractional seconds
        text = _SHORT_FRACTION.sub(lambda match: "." + match.group(1).ljust(6, "0"), text)
        return datetime.fromisoformat(text)
    raise ValueError(f"Unsupported datetime value: {value!r}")


def parse_date(value: Any) -> date:
    """Accept a date, a datetime or an ISO string (date or timestamp)."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        return _parse_datetime(text).date()
    raise ValueError(f"Unsupported date value: {value!r}")


def _optional_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    try:
        return parse_date(value)
    except ValueError:
        logger.warning("Ignoring unparseable date value %r", value)
        return None


def _optional_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return _parse_datetime(value)
    except ValueError:
        logger.warning("Ignoring unparseable timestamp %r", value)
        return None


def _participants(record: Dict[str, Any]) -> Optional[Tuple[str, ...]]:
    # participant_ids holds member UUIDs; participants is the legacy column
    ids = record.get("participant_ids")
    if ids:
        return tuple(str(item) for item in ids)
    legacy = record.get("participants")
    if legacy is None:
        return None
    return tuple(str(item) for item in legacy)


def _method(value: Any) -> Optional[TransportMethod]:
    if not value:
        return None
    try:
        return TransportMethod(value)
    except ValueError:
        logger.warning("Unknown transport method %r", value)
        return None


@dataclass(frozen=True, slots=True)
class TransportationDetails:
    drop_off_method: Optional[TransportMethod] = None
    drop_off_person: Optional[str] = None
    pick_up_method: Optional[TransportMethod] = None
    pick_up_person: Optional[str] = None

    @classmethod
    def from_record(cls, record: Optional[Dict[str, Any]]) -> Optional["TransportationDetails"]:
        if not record:
            return None
        return cls(
            drop_off_method=_method(record.get("dropOffMethod")),
            drop_off_person=record.get("dropOffPersonId") or record.get("dropOffPerson"),
            pick_up_method=_method(record.get("pickUpMethod")),
            pick_up_person=record.get("pickUpPersonId") or record.get("pickUpPerson"),
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        if self.drop_off_method:
            record["dropOffMethod"] = self.drop_off_method.value
        if self.drop_off_person:
            record["dropOffPerson"] = self.drop_off_person
            record["dropOffPersonId"] = self.drop_off_person
        if self.pick_up_method:
            record["pickUpMethod"] = self.pick_up_method.value
        if self.pick_up_person:
            record["pickUpPerson"] = self.pick_up_person
            record["pickUpPersonId"] = self.pick_up_person
        return record

    def involves(self, person: str) -> bool:
        return person in (self.drop_off_person, self.pick_up_person)


@dataclass(frozen=True, slots=True)
class RecurrenceSlot:
    """One weekly time window. ``day_of_week`` counts from Sunday = 0."""

    day_of_week: int
    start_time: str
    end_time: str
    transportation: Optional[TransportationDetails] = None

    @property
    def is_valid(self) -> bool:
        return isinstance(self.day_of_week, int) and 0 <= self.day_of_week <= 6

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "RecurrenceSlot":
        raw_day = record.get("dayOfWeek", record.get("day_of_week"))
        try:
            day_of_week = int(raw_day)
        except (TypeError, ValueError):
            day_of_week = -1
        return cls(
            day_of_week=day_of_week,
            start_time=str(record.get("startTime", record.get("start_time", ""))),
            end_time=str(record.get("endTime", record.get("end_time", ""))),
            transportation=TransportationDetails.from_record(record.get("transportation")),
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "dayOfWeek": self.day_of_week,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }
        if self.transportation:
            record["transportation"] = self.transportation.to_record()
        return record


def _slots(records: Optional[Iterable[Dict[str, Any]]]) -> Tuple[RecurrenceSlot, ...]:
    return tuple(RecurrenceSlot.from_record(item) for item in records or ())


def _category(value: Any) -> ActivityCategory:
    try:
        return ActivityCategory(value)
    except ValueError:
        logger.warning("Unknown activity category %r, using 'other'", value)
        return ActivityCategory.OTHER


@dataclass(slots=True)
class EventTemplate:
    id: str
    title: str
    category: ActivityCategory
    start_date: date
    recurrence_slots: Tuple[RecurrenceSlot, ...] = ()
    participants: Tuple[str, ...] = ()
    transportation: Optional[TransportationDetails] = None
    end_date: Optional[date] = None
    color: Optional[str] = None
    household_id: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "EventTemplate":
        return cls(
            id=str(record["id"]),
            title=str(record["title"]),
            category=_category(record.get("category")),
            start_date=parse_date(record["start_date"]),
            recurrence_slots=_slots(record.get("recurrence_slots")),
            participants=_participants(record) or (),
            transportation=TransportationDetails.from_record(record.get("transportation")),
            end_date=_optional_date(record.get("end_date")),
            color=record.get("color"),
            household_id=record.get("household_id"),
            description=record.get("description"),
            location=record.get("location"),
            notes=record.get("notes"),
            created_at=_optional_datetime(record.get("created_at")),
            updated_at=_optional_datetime(record.get("updated_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "recurrence_slots": [slot.to_record() for slot in self.recurrence_slots],
            "participants": list(self.participants),
            "transportation": self.transportation.to_record() if self.transportation else None,
            "color": self.color,
            "household_id": self.household_id,
            "description": self.description,
            "location": self.location,
            "notes": self.notes,
        }


@dataclass(slots=True)
class InstanceOverride:
    id: str
    event_id: str
    date: date
    participants: Optional[Tuple[str, ...]] = None
    transportation: Optional[TransportationDetails] = None
    cancelled: bool = False
    household_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "InstanceOverride":
        return cls(
            id=str(record["id"]),
            event_id=str(record["event_id"]),
            date=parse_date(record["date"]),
            participants=_participants(record),
            transportation=TransportationDetails.from_record(record.get("transportation")),
            cancelled=bool(record.get("cancelled")),
            household_id=record.get("household_id"),
            created_at=_optional_datetime(record.get("created_at")),
            updated_at=_optional_datetime(record.get("updated_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        participants = list(self.participants) if self.participants is not None else None
        return {
            "id": self.id,
            "event_id": self.event_id,
            "date": self.date.isoformat(),
            "participants": participants,
            "participant_ids": participants,
            "transportation": self.transportation.to_record() if self.transportation else None,
            "cancelled": self.cancelled,
            "household_id": self.household_id,
        }


@dataclass(frozen=True, slots=True)
class Occurrence:
    event_id: str
    date: date
    title: str
    participants: Tuple[str, ...]
    transportation: Optional[TransportationDetails]
    cancelled: bool = False
    slots: Tuple[RecurrenceSlot, ...] = ()
    override_id: Optional[str] = None


@dataclass(slots=True)
class CandidateEvent:
    """An uploaded event awaiting import. Every field may be missing."""

    title: str = ""
    start_date: Optional[date] = None
    category: Optional[str] = None
    id: Optional[str] = None
    end_date: Optional[date] = None
    participants: Tuple[str, ...] = ()
    recurrence_slots: Tuple[RecurrenceSlot, ...] = ()
    transportation: Optional[TransportationDetails] = None
    household_id: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    color: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_valid(self) -> bool:
        return bool(self.title.strip() and self.start_date and self.category)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CandidateEvent":
        identifier = record.get("id")
        return cls(
            title=str(record.get("title") or ""),
            start_date=_optional_date(record.get("start_date")),
            category=record.get("category") or None,
            id=str(identifier) if identifier else None,
            end_date=_optional_date(record.get("end_date")),
            participants=_participants(record) or (),
            recurrence_slots=_slots(record.get("recurrence_slots")),
            transportation=TransportationDetails.from_record(record.get("transportation")),
            household_id=record.get("household_id"),
            description=record.get("description"),
            location=record.get("location"),
            notes=record.get("notes"),
            color=record.get("color"),
            raw=dict(record),
        )

    def to_fields(self) -> Dict[str, Any]:
        """Persisted field set written on insert or update."""

        return {
            "title": self.title,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "category": self.category,
            "participants": list(self.participants),
            "recurrence_slots": [slot.to_record() for slot in self.recurrence_slots],
            "transportation": self.transportation.to_record() if self.transportation else None,
            "household_id": self.household_id,
            "description": self.description,
            "location": self.location,
            "notes": self.notes,
            "color": self.color,
        }


def dedupe_ids(values: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered
