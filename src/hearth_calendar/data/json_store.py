from __future__ import annotations

import logging
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import orjson

from ..core.config import STORE_FILE, ensure_data_dir
from ..domain import CandidateEvent, EventTemplate, InstanceOverride

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class JsonRecordStore:
    """Single-household record store kept in a local JSON file."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or STORE_FILE
        self._cache: Dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load_raw(self) -> Dict[str, Any]:
        if self._cache is None:
            ensure_data_dir(self._path)
            data = orjson.loads(self._path.read_bytes() or b"{}")
            self._cache = {
                "events": list(data.get("events", [])),
                "instances": list(data.get("instances", [])),
                "audit_log": list(data.get("audit_log", [])),
                "metadata": dict(data.get("metadata", {})),
            }
        return self._cache

    def _draft(self) -> Dict[str, Any]:
        return deepcopy(self._load_raw())

    def _commit(self, data: Dict[str, Any]) -> None:
        """Write ``data`` to disk, then make it the cached state.

        A failed write leaves the cache as it was.
        """

        payload = orjson.dumps(data, option=orjson.OPT_INDENT_2)
        self._path.write_bytes(payload + b"\n")
        self._cache = data

    def list_templates(self) -> List[EventTemplate]:
        return [EventTemplate.from_record(item) for item in self._load_raw()["events"]]

    def list_existing_events(self) -> List[EventTemplate]:
        return self.list_templates()

    def list_overrides(self, template_id: str) -> List[InstanceOverride]:
        return [
            InstanceOverride.from_record(item)
            for item in self._load_raw()["instances"]
            if item.get("event_id") == template_id
        ]

    def insert_event(self, fields: CandidateEvent) -> EventTemplate:
        stamp = _now()
        record = {**fields.to_fields(), "id": str(uuid4()), "created_at": stamp, "updated_at": stamp}
        template = EventTemplate.from_record(record)
        data = self._draft()
        data["events"].append(record)
        self._commit(data)
        return template

    def update_event(self, event_id: str, fields: CandidateEvent) -> EventTemplate:
        data = self._draft()
        items = data["events"]
        for idx, existing in enumerate(items):
            if existing["id"] == event_id:
                record = {
                    **fields.to_fields(),
                    "id": event_id,
                    "created_at": existing.get("created_at"),
                    "updated_at": _now(),
                }
                template = EventTemplate.from_record(record)
                items[idx] = record
                self._commit(data)
                return template
        raise KeyError(f"Event '{event_id}' not found.")

    def upsert_override(self, override: InstanceOverride) -> InstanceOverride:
        data = self._draft()
        items = data["instances"]
        stamp = _now()
        record = override.to_record()
        record["updated_at"] = stamp
        for idx, existing in enumerate(items):
            if existing["id"] == override.id:
                record["created_at"] = existing.get("created_at") or stamp
                items[idx] = record
                break
        else:
            record["created_at"] = override.created_at.isoformat() if override.created_at else stamp
            items.append(record)
        self._commit(data)
        return InstanceOverride.from_record(record)

    def delete_override(self, override_id: str) -> bool:
        data = self._draft()
        items = data["instances"]
        for idx, item in enumerate(items):
            if item["id"] == override_id:
                del items[idx]
                self._commit(data)
                return True
        return False

    def record_audit(self, action: str, metadata: Dict[str, Any]) -> None:
        entry = {
            "id": uuid4().hex,
            "timestamp": _now(),
            "action": action,
            "metadata": deepcopy(metadata),
        }
        data = self._draft()
        data["audit_log"].append(entry)
        self._commit(data)
        logger.debug("Recorded audit entry %s (%s)", entry["id"], action)

    def audit_log(self) -> List[Dict[str, Any]]:
        return deepcopy(self._load_raw()["audit_log"])

    def load_snapshot(self, snapshot: Dict[str, Any]) -> None:
        """Replace events and instances, e.g. from an ``export`` file."""

        data = self._draft()
        data["events"] = deepcopy(list(snapshot.get("events", [])))
        data["instances"] = deepcopy(list(snapshot.get("instances", [])))
        self._commit(data)
