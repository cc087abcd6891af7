from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from ..core import expand, index_overrides, resolve, score
from ..domain import CandidateEvent, EventTemplate, InstanceOverride, parse_date
from ..services import parse_resolutions
from .models import TransportationPayload
from .registry import register_api
from .serializers import serialize_batch, serialize_match, serialize_occurrence, serialize_preview
from .state import api_state


def _parse_date(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid ISO date: {value}") from exc


def _candidates(events: List[Dict[str, Any]]) -> List[CandidateEvent]:
    if not isinstance(events, list):
        raise ValueError("Invalid data format: expected array of events")
    return [CandidateEvent.from_record(item if isinstance(item, dict) else {}) for item in events]


@register_api(
    "expand_occurrences",
    description="Expand one event template over a date window and overlay the given per-date overrides.",
    category="recurrence",
    tags=("read", "pure"),
)
def expand_occurrences(
    template: Dict[str, Any],
    start: str,
    end: str,
    overrides: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    parsed = EventTemplate.from_record(template)
    window_start, window_end = _parse_date(start), _parse_date(end)
    by_date = index_overrides(parsed.id, [InstanceOverride.from_record(item) for item in overrides or []])
    occurrences = resolve(parsed, expand(parsed, window_start, window_end), by_date)
    return {
        "event_id": parsed.id,
        "start": window_start.isoformat(),
        "end": window_end.isoformat(),
        "occurrences": [serialize_occurrence(item) for item in occurrences],
    }


@register_api(
    "occurrences_between",
    description="Return every household occurrence within the inclusive date range.",
    category="calendar",
    tags=("read",),
)
def occurrences_between(start: str, end: str, include_cancelled: bool = True) -> Dict[str, Any]:
    start_day, end_day = _parse_date(start), _parse_date(end)
    occurrences = api_state.calendar.occurrences_between(start_day, end_day, include_cancelled=include_cancelled)
    return {
        "start": start_day.isoformat(),
        "end": end_day.isoformat(),
        "occurrences": [serialize_occurrence(item) for item in occurrences],
    }


@register_api(
    "edit_occurrence",
    description="Override participants, transportation or cancellation for a single occurrence.",
    category="calendar",
    tags=("write",),
)
def edit_occurrence(
    event_id: str,
    day: str,
    participants: Optional[List[str]] = None,
    transportation: Optional[Dict[str, Any]] = None,
    cancelled: Optional[bool] = None,
) -> Dict[str, Any]:
    details = TransportationPayload.model_validate(transportation).to_domain() if transportation else None
    occurrence = api_state.calendar.edit_occurrence(
        event_id,
        _parse_date(day),
        participants=participants,
        transportation=details,
        cancelled=cancelled,
    )
    return {"occurrence": serialize_occurrence(occurrence)}


@register_api(
    "revert_occurrence",
    description="Remove the overrides of a single occurrence so it follows the event defaults again.",
    category="calendar",
    tags=("write",),
)
def revert_occurrence(event_id: str, day: str) -> Dict[str, Any]:
    target = _parse_date(day)
    removed = api_state.calendar.revert_occurrence(event_id, target)
    return {"event_id": event_id, "day": target.isoformat(), "removed": removed}


@register_api(
    "score_events",
    description="Score how likely an uploaded event duplicates an existing one, with reasons.",
    category="imports",
    tags=("read", "pure"),
)
def score_events(candidate: Dict[str, Any], existing: Dict[str, Any]) -> Dict[str, Any]:
    result = score(CandidateEvent.from_record(candidate), CandidateEvent.from_record(existing), api_state.context.weights)
    return serialize_match(result)


@register_api(
    "preview_import",
    description="Compare uploaded events with existing ones and list likely duplicates for review.",
    category="imports",
    tags=("read",),
)
def preview_import(events: List[Dict[str, Any]]) -> Dict[str, Any]:
    preview = api_state.imports.preview(_candidates(events))
    return serialize_preview(preview)


@register_api(
    "resolve_import",
    description="Apply skip/update/create decisions to the conflicts of an upload and import the rest.",
    category="imports",
    tags=("write",),
)
def resolve_import(
    events: List[Dict[str, Any]],
    resolutions: Dict[str, str],
    require_all: bool = True,
) -> Dict[str, Any]:
    preview = api_state.imports.preview(_candidates(events))
    parsed = parse_resolutions(preview.conflicts, resolutions or {})
    outcome = api_state.imports.apply(preview, parsed, require_all=require_all)
    return {
        "summary": preview.summary,
        "resolved": serialize_batch(outcome.resolved),
        "imported": serialize_batch(outcome.imported),
    }


@register_api(
    "export_events",
    description="Export every event template and per-date override of the household.",
    category="imports",
    tags=("read",),
)
def export_events() -> Dict[str, Any]:
    return api_state.imports.export()


@register_api(
    "calendar_feed",
    description="Render the household's upcoming occurrences as an iCalendar feed.",
    category="calendar",
    tags=("read", "ical"),
)
def calendar_feed(
    name: str = "Family Calendar",
    filter_person: Optional[str] = None,
    start: Optional[str] = None,
) -> Dict[str, Any]:
    payload = api_state.calendar.feed(
        name=name,
        filter_person=filter_person,
        start=_parse_date(start) if start else None,
    )
    return {"name": name, "ics": payload.decode("utf-8")}
