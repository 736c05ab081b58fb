import json
import logging
import uuid
from dataclasses import replace
from pathlib import Path
from threading import Lock
from typing import Any

from neuropath.analytics.history import timestamp_of
from neuropath.scoring.models import SessionMetrics

logger = logging.getLogger("neuropath.sessions.store")


class SessionHistoryStore:
    """Append-only session history per owner, optionally backed by a JSON file."""

    def __init__(self, path: str | Path | None = None):
        self._lock = Lock()
        self._path = Path(path) if path else None
        self._sessions_by_owner: dict[str, list[dict[str, Any]]] = {}
        self._load()

    def _load(self) -> None:
        if self._path is None or not self._path.exists():
            self._sessions_by_owner = {}
            return
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("session store unreadable, starting empty | path=%s err=%s", self._path, exc)
            self._sessions_by_owner = {}
            return

        if not isinstance(payload, dict):
            logger.warning("session store has unexpected shape, starting empty | path=%s", self._path)
            self._sessions_by_owner = {}
            return

        self._sessions_by_owner = {
            str(owner): [row for row in rows if isinstance(row, dict)]
            for owner, rows in payload.items()
            if isinstance(owner, str) and isinstance(rows, list)
        }

    def _persist(self, snapshot: dict[str, list[dict[str, Any]]]) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(".tmp")
        temp_path.write_text(json.dumps(snapshot, ensure_ascii=False), encoding="utf-8")
        temp_path.replace(self._path)

    def append(self, owner_id: str, metrics: SessionMetrics) -> SessionMetrics:
        oid = str(owner_id or "").strip()
        if not oid:
            raise ValueError("owner_id is required")

        stored = metrics if metrics.session_id else replace(metrics, session_id=uuid.uuid4().hex)
        with self._lock:
            # Memory only changes once the file write has succeeded.
            snapshot = dict(self._sessions_by_owner)
            snapshot[oid] = [*snapshot.get(oid, []), stored.to_dict()]
            self._persist(snapshot)
            self._sessions_by_owner = snapshot
        return stored

    def get_history(self, owner_id: str, limit: int | None = None) -> list[SessionMetrics]:
        oid = str(owner_id or "").strip()
        if not oid:
            return []
        with self._lock:
            rows = [dict(row) for row in self._sessions_by_owner.get(oid, [])]

        sessions = [SessionMetrics.from_dict(row) for row in rows]
        sessions.sort(key=timestamp_of)
        if limit is not None:
            capped = max(1, int(limit))
            sessions = sessions[-capped:]
        return sessions

    def list_owner_ids(self) -> list[str]:
        with self._lock:
            return sorted(owner for owner, rows in self._sessions_by_owner.items() if rows)

    def clear(self, owner_id: str) -> int:
        oid = str(owner_id or "").strip()
        with self._lock:
            snapshot = dict(self._sessions_by_owner)
            removed = len(snapshot.pop(oid, []))
            if removed:
                self._persist(snapshot)
                self._sessions_by_owner = snapshot
        return removed
