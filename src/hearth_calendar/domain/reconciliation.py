from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from .enums import ResolutionAction
from .models import CandidateEvent, EventTemplate


@dataclass(frozen=True, slots=True)
class MatchScore:
    score: int
    reasons: Tuple[str, ...] = ()


@dataclass(slots=True)
class Conflict:
    """A candidate paired with the existing event it most resembles."""

    candidate_index: int
    candidate: CandidateEvent
    existing: EventTemplate
    match_score: int
    match_reasons: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ReadyCandidate:
    """A candidate with no likely duplicate, kept with its batch position."""

    candidate_index: int
    candidate: CandidateEvent


@dataclass(frozen=True, slots=True)
class Skip:
    action: ResolutionAction = field(default=ResolutionAction.SKIP, init=False)


@dataclass(frozen=True, slots=True)
class Update:
    existing_id: str
    action: ResolutionAction = field(default=ResolutionAction.UPDATE, init=False)


@dataclass(frozen=True, slots=True)
class Create:
    action: ResolutionAction = field(default=ResolutionAction.CREATE, init=False)


Resolution = Union[Skip, Update, Create]


def parse_resolution(value: Union[str, ResolutionAction], conflict: Conflict) -> Resolution:
    """Turn a ``skip``/``update``/``create`` choice into a resolution for ``conflict``."""

    try:
        action = ResolutionAction(value)
    except ValueError as exc:
        raise ValueError(f"Unknown resolution {value!r}; expected skip, update or create") from exc
    if action is ResolutionAction.SKIP:
        return Skip()
    if action is ResolutionAction.UPDATE:
        return Update(existing_id=conflict.existing.id)
    return Create()


@dataclass(frozen=True, slots=True)
class FailureDetail:
    index: int
    message: str


@dataclass(slots=True)
class BatchResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    failures: List[FailureDetail] = field(default_factory=list)
    unresolved: List[int] = field(default_factory=list)

    def record_failure(self, index: int, message: str) -> None:
        self.failed += 1
        self.failures.append(FailureDetail(index=index, message=message))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "failures": [{"index": item.index, "message": item.message} for item in self.failures],
            "unresolved": list(self.unresolved),
        }


@dataclass(slots=True)
class ImportPreview:
    total: int
    conflicts: List[Conflict] = field(default_factory=list)
    ready: List[ReadyCandidate] = field(default_factory=list)
    invalid: int = 0

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "conflicts": len(self.conflicts),
            "ready": len(self.ready),
            "invalid": self.invalid,
        }
