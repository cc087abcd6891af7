from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ..domain import BatchResult, Conflict, Create, Resolution, Skip, Update
from .store import RecordStore

logger = logging.getLogger(__name__)


class UnresolvedConflictsError(ValueError):
    """Raised when a batch is submitted before every conflict has a decision."""

    def __init__(self, missing: Sequence[int]) -> None:
        self.missing = list(missing)
        super().__init__(f"Conflicts without a resolution: {', '.join(str(i) for i in self.missing)}")


def require_all_resolved(conflicts: Sequence[Conflict], resolutions: Mapping[int, Resolution]) -> None:
    missing = [index for index in range(len(conflicts)) if index not in resolutions]
    if missing:
        raise UnresolvedConflictsError(missing)


def apply(
    conflicts: Sequence[Conflict],
    resolutions: Mapping[int, Resolution],
    store: RecordStore,
) -> BatchResult:
    """Carry out each conflict's resolution against ``store``.

    ``resolutions`` is keyed by position in ``conflicts``. Positions without a
    resolution are reported in ``unresolved`` and left untouched. A store
    error on one item is recorded against its position and the rest of the
    batch still runs; nothing is rolled back.
    """

    result = BatchResult()
    for index, conflict in enumerate(conflicts):
        resolution = resolutions.get(index)
        if resolution is None:
            result.unresolved.append(index)
            continue
        if isinstance(resolution, Skip):
            result.skipped += 1
            continue
        try:
            if isinstance(resolution, Update):
                store.update_event(resolution.existing_id, conflict.candidate)
                result.updated += 1
            elif isinstance(resolution, Create):
                store.insert_event(conflict.candidate)
                result.created += 1
            else:
                raise TypeError(f"Unsupported resolution {resolution!r}")
        except Exception as exc:  # noqa: BLE001
            logger.error("Resolution %s failed for conflict %d: %s", type(resolution).__name__, index, exc)
            result.record_failure(index, str(exc) or type(exc).__name__)
    logger.info(
        "Applied resolutions: %d created, %d updated, %d skipped, %d failed, %d unresolved",
        result.created,
        result.updated,
        result.skipped,
        result.failed,
        len(result.unresolved),
    )
    return result
