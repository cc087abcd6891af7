from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..domain import (
    BatchResult,
    CandidateEvent,
    Conflict,
    ImportPreview,
    MatchScore,
    Occurrence,
    RecurrenceSlot,
    TransportationDetails,
    TransportMethod,
)


class TransportationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    drop_off_method: Optional[str] = Field(default=None, alias="dropOffMethod")
    drop_off_person: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("dropOffPersonId", "dropOffPerson", "drop_off_person"),
        serialization_alias="dropOffPerson",
    )
    pick_up_method: Optional[str] = Field(default=None, alias="pickUpMethod")
    pick_up_person: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("pickUpPersonId", "pickUpPerson", "pick_up_person"),
        serialization_alias="pickUpPerson",
    )

    @classmethod
    def from_domain(cls, details: Optional[TransportationDetails]) -> Optional["TransportationPayload"]:
        if details is None:
            return None
        return cls(
            drop_off_method=details.drop_off_method.value if details.drop_off_method else None,
            drop_off_person=details.drop_off_person,
            pick_up_method=details.pick_up_method.value if details.pick_up_method else None,
            pick_up_person=details.pick_up_person,
        )

    def to_domain(self) -> TransportationDetails:
        return TransportationDetails(
            drop_off_method=TransportMethod(self.drop_off_method) if self.drop_off_method else None,
            drop_off_person=self.drop_off_person,
            pick_up_method=TransportMethod(self.pick_up_method) if self.pick_up_method else None,
            pick_up_person=self.pick_up_person,
        )


class SlotPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day_of_week: int = Field(alias="dayOfWeek")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    @classmethod
    def from_domain(cls, slot: RecurrenceSlot) -> "SlotPayload":
        return cls(day_of_week=slot.day_of_week, start_time=slot.start_time, end_time=slot.end_time)


class OccurrencePayload(BaseModel):
    event_id: str
    date: str
    title: str
    participants: List[str] = Field(default_factory=list)
    transportation: Optional[TransportationPayload] = Field(default=None)
    cancelled: bool = False
    slots: List[SlotPayload] = Field(default_factory=list)
    override_id: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, occurrence: Occurrence) -> "OccurrencePayload":
        return cls(
            event_id=occurrence.event_id,
            date=occurrence.date.isoformat(),
            title=occurrence.title,
            participants=list(occurrence.participants),
            transportation=TransportationPayload.from_domain(occurrence.transportation),
            cancelled=occurrence.cancelled,
            slots=[SlotPayload.from_domain(slot) for slot in occurrence.slots],
            override_id=occurrence.override_id,
        )


class MatchPayload(BaseModel):
    score: int
    reasons: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, match: MatchScore) -> "MatchPayload":
        return cls(score=match.score, reasons=list(match.reasons))


class ConflictPayload(BaseModel):
    candidate_index: int
    uploaded_event: Dict[str, Any]
    existing_event: Dict[str, Any]
    match_score: int
    match_reasons: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, conflict: Conflict) -> "ConflictPayload":
        return cls(
            candidate_index=conflict.candidate_index,
            uploaded_event=_candidate_record(conflict.candidate),
            existing_event=conflict.existing.to_record(),
            match_score=conflict.match_score,
            match_reasons=list(conflict.match_reasons),
        )


class PreviewPayload(BaseModel):
    conflicts: List[ConflictPayload] = Field(default_factory=list)
    ready: List[Dict[str, Any]] = Field(default_factory=list)
    summary: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, preview: ImportPreview) -> "PreviewPayload":
        return cls(
            conflicts=[ConflictPayload.from_domain(conflict) for conflict in preview.conflicts],
            ready=[
                {"candidate_index": item.candidate_index, **_candidate_record(item.candidate)}
                for item in preview.ready
            ],
            summary=preview.summary,
        )


class FailurePayload(BaseModel):
    index: int
    message: str


class BatchResultPayload(BaseModel):
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    failures: List[FailurePayload] = Field(default_factory=list)
    unresolved: List[int] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: BatchResult) -> "BatchResultPayload":
        return cls(**result.as_dict())


def _candidate_record(candidate: CandidateEvent) -> Dict[str, Any]:
    return {"id": candidate.id, **candidate.to_fields()}

