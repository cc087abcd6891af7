"""Domain models for household scheduling."""

from __future__ import annotations

from .enums import ActivityCategory, ResolutionAction, TransportMethod
from .models import (
    CandidateEvent,
    EventTemplate,
    InstanceOverride,
    Occurrence,
    RecurrenceSlot,
    TransportationDetails,
    parse_date,
)
from .reconciliation import (
    BatchResult,
    Conflict,
    Create,
    FailureDetail,
    ImportPreview,
    MatchScore,
    ReadyCandidate,
    Resolution,
    Skip,
    Update,
    parse_resolution,
)

__all__ = [
    "ActivityCategory",
    "BatchResult",
    "CandidateEvent",
    "Conflict",
    "Create",
    "EventTemplate",
    "FailureDetail",
    "ImportPreview",
    "InstanceOverride",
    "MatchScore",
    "Occurrence",
    "ReadyCandidate",
    "RecurrenceSlot",
    "Resolution",
    "ResolutionAction",
    "Skip",
    "TransportMethod",
    "TransportationDetails",
    "Update",
    "parse_date",
    "parse_resolution",
]
