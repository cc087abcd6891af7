"""Duplicate scoring between uploaded and existing events.

Three factors feed the score, in this order: title, start date and
participant overlap. Every factor that contributes points also contributes a
reason string, which is shown verbatim to whoever resolves the conflict.

The participant factor measures how many of the *candidate's* participants
appear on the existing event, so ``score(a, b)`` and ``score(b, a)`` can
differ.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from difflib import SequenceMatcher
from typing import Iterable, Optional, Sequence, Union

from ..domain import CandidateEvent, Conflict, EventTemplate, ImportPreview, MatchScore, ReadyCandidate
from ..domain.models import dedupe_ids

logger = logging.getLogger(__name__)

Comparable = Union[CandidateEvent, EventTemplate]

EXACT_ID_REASON = "Exact ID match"


@dataclass(frozen=True, slots=True)
class MatchWeights:
    exact_title: float = 40
    similar_title: float = 20
    same_date: float = 30
    adjacent_date: float = 15
    participants: float = 30
    title_similarity: float = 0.7
    threshold: int = 70


DEFAULT_WEIGHTS = MatchWeights()


def normalize_title(title: str) -> str:
    return " ".join(title.split()).casefold()


def _title_factor(candidate: str, existing: str, weights: MatchWeights) -> tuple[float, Optional[str]]:
    left = normalize_title(candidate)
    right = normalize_title(existing)
    if not left or not right:
        return 0, None
    if left == right:
        return weights.exact_title, "Same title"
    ratio = SequenceMatcher(None, left, right).ratio()
    if left in right or right in left or ratio >= weights.title_similarity:
        return weights.similar_title, f"Similar title ({round(ratio * 100)}%)"
    return 0, None


def _date_factor(candidate: Optional[date], existing: Optional[date], weights: MatchWeights) -> tuple[float, Optional[str]]:
    if candidate is None or existing is None:
        return 0, None
    days_apart = abs((candidate - existing).days)
    if days_apart == 0:
        return weights.same_date, "Same date"
    if days_apart == 1:
        return weights.adjacent_date, "1 day apart"
    return 0, None


def _participant_factor(
    candidate: Sequence[str], existing: Sequence[str], weights: MatchWeights
) -> tuple[float, Optional[str]]:
    wanted = dedupe_ids(candidate)
    if not wanted:
        return 0, None
    present = set(existing)
    shared = [member for member in wanted if member in present]
    if not shared:
        return 0, None
    return weights.participants * len(shared) / len(wanted), f"Shared participants: {', '.join(shared)}"


def score(candidate: Comparable, existing: Comparable, weights: MatchWeights = DEFAULT_WEIGHTS) -> MatchScore:
    total = 0.0
    reasons: list[str] = []
    factors = (
        _title_factor(candidate.title, existing.title, weights),
        _date_factor(candidate.start_date, existing.start_date, weights),
        _participant_factor(candidate.participants, existing.participants, weights),
    )
    for points, reason in factors:
        if points > 0 and reason:
            total += points
            reasons.append(reason)
    return MatchScore(score=min(100, round(total)), reasons=tuple(reasons))


def best_match(
    candidate: CandidateEvent,
    existing: Iterable[EventTemplate],
    weights: MatchWeights = DEFAULT_WEIGHTS,
) -> Optional[tuple[EventTemplate, MatchScore]]:
    """Highest-scoring existing event at or above the threshold; ties keep the first."""

    winner: Optional[tuple[EventTemplate, MatchScore]] = None
    for event in existing:
        result = score(candidate, event, weights)
        if result.score < weights.threshold:
            continue
        if winner is None or result.score > winner[1].score:
            winner = (event, result)
    return winner


def find_conflicts(
    candidates: Sequence[CandidateEvent],
    existing: Sequence[EventTemplate],
    weights: MatchWeights = DEFAULT_WEIGHTS,
    household_id: Optional[str] = None,
) -> ImportPreview:
    """Split an uploaded batch into conflicts, ready-to-import events and rejects.

    With ``household_id`` set, a candidate naming a different household is
    rejected as invalid.
    """

    preview = ImportPreview(total=len(candidates))
    by_id = {event.id: event for event in existing}
    for index, candidate in enumerate(candidates):
        if not candidate.is_valid:
            logger.info("Skipping invalid candidate at index %d: %r", index, candidate.title)
            preview.invalid += 1
            continue
        if household_id and candidate.household_id and candidate.household_id != household_id:
            logger.warning(
                "Rejecting candidate at index %d: household %s is not %s", index, candidate.household_id, household_id
            )
            preview.invalid += 1
            continue
        if candidate.id and candidate.id in by_id:
            preview.conflicts.append(
                Conflict(
                    candidate_index=index,
                    candidate=candidate,
                    existing=by_id[candidate.id],
                    match_score=100,
                    match_reasons=(EXACT_ID_REASON,),
                )
            )
            continue
        match = best_match(candidate, existing, weights)
        if match is None:
            preview.ready.append(ReadyCandidate(candidate_index=index, candidate=candidate))
            continue
        event, result = match
        preview.conflicts.append(
            Conflict(
                candidate_index=index,
                candidate=candidate,
                existing=event,
                match_score=result.score,
                match_reasons=result.reasons,
            )
        )
    logger.info(
        "Import preview: %(total)d uploaded, %(conflicts)d conflicts, %(ready)d ready, %(invalid)d invalid",
        preview.summary,
    )
    return preview


__all__ = [
    "DEFAULT_WEIGHTS",
    "EXACT_ID_REASON",
    "MatchWeights",
    "best_match",
    "find_conflicts",
    "normalize_title",
    "score",
]
