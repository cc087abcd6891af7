from __future__ import annotations

from typing import Any, Dict

from ..domain import BatchResult, ImportPreview, MatchScore, Occurrence
from .models import BatchResultPayload, MatchPayload, OccurrencePayload, PreviewPayload


def serialize_occurrence(occurrence: Occurrence) -> Dict[str, Any]:
    return OccurrencePayload.from_domain(occurrence).model_dump(by_alias=True)


def serialize_match(match: MatchScore) -> Dict[str, Any]:
    return MatchPayload.from_domain(match).model_dump()


def serialize_preview(preview: ImportPreview) -> Dict[str, Any]:
    return PreviewPayload.from_domain(preview).model_dump(by_alias=True)


def serialize_batch(result: BatchResult) -> Dict[str, Any]:
    return BatchResultPayload.from_domain(result).model_dump()
