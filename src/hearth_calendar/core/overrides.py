from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from ..domain import EventTemplate, InstanceOverride, Occurrence, TransportationDetails
from .recurrence import slots_for_day

logger = logging.getLogger(__name__)

OverridesByDate = Mapping[date, Sequence[InstanceOverride]]


def index_overrides(event_id: str, overrides: Iterable[InstanceOverride]) -> Dict[date, List[InstanceOverride]]:
    """Group the overrides belonging to ``event_id`` by the date they apply to."""

    grouped: Dict[date, List[InstanceOverride]] = {}
    for override in overrides:
        if override.event_id != event_id:
            logger.debug("Ignoring override %s for template %s", override.id, override.event_id)
            continue
        grouped.setdefault(override.date, []).append(override)
    return grouped


def _created_key(override: InstanceOverride) -> float:
    if override.created_at is None:
        return float("-inf")
    return override.created_at.timestamp()


def select_override(event_id: str, day: date, candidates: Sequence[InstanceOverride]) -> Optional[InstanceOverride]:
    """Pick the override in force for one date; the latest created one wins."""

    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    logger.warning(
        "Found %d overrides for template %s on %s; using the most recently created",
        len(candidates),
        event_id,
        day.isoformat(),
    )
    # max() keeps the first maximum, so scan in reverse to let later records win ties
    return max(reversed(candidates), key=_created_key)


def default_transportation(template: EventTemplate, day: date) -> Optional[TransportationDetails]:
    for slot in slots_for_day(template, day):
        if slot.transportation:
            return slot.transportation
    return template.transportation


def build_occurrence(template: EventTemplate, day: date, override: Optional[InstanceOverride]) -> Occurrence:
    participants = template.participants
    transportation = default_transportation(template, day)
    cancelled = False
    if override is not None:
        if override.participants is not None:
            participants = override.participants
        if override.transportation is not None:
            transportation = override.transportation
        cancelled = override.cancelled
    return Occurrence(
        event_id=template.id,
        date=day,
        title=template.title,
        participants=tuple(participants),
        transportation=transportation,
        cancelled=cancelled,
        slots=slots_for_day(template, day),
        override_id=override.id if override else None,
    )


@dataclass(frozen=True, slots=True)
class ResolvedOccurrences:
    template: EventTemplate
    candidate_dates: Iterable[date]
    overrides_by_date: OverridesByDate

    def __iter__(self) -> Iterator[Occurrence]:
        for day in self.candidate_dates:
            override = select_override(self.template.id, day, self.overrides_by_date.get(day, ()))
            yield build_occurrence(self.template, day, override)


def resolve(
    template: EventTemplate,
    candidate_dates: Iterable[date],
    overrides_by_date: OverridesByDate,
) -> ResolvedOccurrences:
    """Overlay per-date overrides onto the expanded dates of ``template``.

    Only dates in ``candidate_dates`` produce occurrences, so overrides for
    dates the template no longer covers are ignored. Cancelled overrides yield
    an occurrence flagged ``cancelled`` rather than dropping the date.
    Restartable as long as ``candidate_dates`` is.
    """

    return ResolvedOccurrences(template=template, candidate_dates=candidate_dates, overrides_by_date=overrides_by_date)

