from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Sequence, Union

from ..core import RecordStore, apply, find_conflicts, require_all_resolved
from ..domain import (
    BatchResult,
    CandidateEvent,
    Conflict,
    ImportPreview,
    ReadyCandidate,
    Resolution,
    parse_resolution,
)
from .context import ServiceContext

logger = logging.getLogger(__name__)


def parse_resolutions(
    conflicts: Sequence[Conflict],
    raw: Mapping[Union[int, str], str],
) -> Dict[int, Resolution]:
    """Map ``{"0": "skip", "1": "update"}`` style choices onto typed resolutions."""

    resolutions: Dict[int, Resolution] = {}
    for key, value in raw.items():
        try:
            index = int(key)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Resolution key {key!r} is not a conflict index") from exc
        if not 0 <= index < len(conflicts):
            raise ValueError(f"Resolution index {index} is out of range for {len(conflicts)} conflicts")
        resolutions[index] = parse_resolution(value, conflicts[index])
    return resolutions


@dataclass(slots=True)
class ImportOutcome:
    resolved: BatchResult
    imported: BatchResult

    def as_dict(self) -> Dict[str, Any]:
        return {"resolved": self.resolved.as_dict(), "imported": self.imported.as_dict()}


@dataclass(slots=True)
class ImportService:
    context: ServiceContext

    @property
    def store(self) -> RecordStore:
        return self.context.store

    def preview(self, candidates: Sequence[CandidateEvent]) -> ImportPreview:
        existing = self.store.list_existing_events()
        return find_conflicts(
            candidates,
            existing,
            self.context.weights,
            household_id=self.context.settings.supabase.household_id,
        )

    def _insert_ready(self, ready: Sequence[ReadyCandidate]) -> BatchResult:
        """Insert every conflict-free candidate; failures carry the batch position."""

        result = BatchResult()
        for item in ready:
            try:
                self.store.insert_event(item.candidate)
            except Exception as exc:  # noqa: BLE001
                logger.error("Import of %r failed: %s", item.candidate.title, exc)
                result.record_failure(item.candidate_index, str(exc) or type(exc).__name__)
            else:
                result.created += 1
        return result

    def apply(
        self,
        preview: ImportPreview,
        resolutions: Mapping[int, Resolution],
        *,
        require_all: bool = True,
    ) -> ImportOutcome:
        """Apply conflict decisions, then import every candidate that had no conflict."""

        if require_all:
            require_all_resolved(preview.conflicts, resolutions)
        outcome = ImportOutcome(
            resolved=apply(preview.conflicts, resolutions, self.store),
            imported=self._insert_ready(preview.ready),
        )
        self._audit("events_import", {**preview.summary, **outcome.as_dict()})
        return outcome

    def export(self) -> Dict[str, Any]:
        templates = self.store.list_templates()
        instances = []
        for template in templates:
            for override in self.store.list_overrides(template.id):
                record = override.to_record()
                record["created_at"] = override.created_at.isoformat() if override.created_at else None
                instances.append(record)
        snapshot = {
            "events": [template.to_record() for template in templates],
            "instances": instances,
            "exported_at": datetime.now(timezone.utc).isoformat(),
        }
        self._audit("events_export", {"event_count": len(templates), "instance_count": len(instances)})
        return snapshot

    def _audit(self, action: str, metadata: Dict[str, Any]) -> None:
        try:
            self.store.record_audit(action, metadata)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to record audit entry for %s", action)
