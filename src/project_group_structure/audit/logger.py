"""Append-only JSONL audit trail of project creation decisions.

Every decision taken by the plugin (accepted or rejected creation, owner
group provisioning, default access rights) can be recorded as one JSON
line carrying a UTC timestamp, the session identifier and the event
fields.

Thread-safety is achieved with a threading.Lock so concurrent creation
requests can share one logger.

Example
-------
>>> audit = AuditLogger(Path("/tmp/project-structure.jsonl"))
>>> audit.record("creation_rejected", project="a b", reason="contains_whitespace")
>>> audit.query(event="creation_rejected")[0]["project"]
'a b'
"""
from __future__ import annotations

import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

CREATION_ALLOWED = "creation_allowed"
CREATION_REJECTED = "creation_rejected"
OWNER_GROUP_CREATED = "owner_group_created"
DEFAULT_ACCESS_APPLIED = "default_access_applied"
DEFAULT_ACCESS_FAILED = "default_access_failed"


class AuditLogger:
    """Append-only JSONL audit logger.

    Parameters
    ----------
    log_path:
        Path to the ``.jsonl`` file.  Parent directories are created on
        first write.
    session_id:
        Identifier stamped on every record; a random UUID by default.
    """

    def __init__(self, log_path: Path, session_id: str | None = None) -> None:
        self._log_path = log_path
        self._session_id: str = session_id or str(uuid.uuid4())
        self._lock = threading.Lock()

    def record(self, event: str, **fields: object) -> None:
        """Append one event.

        ``timestamp``, ``session_id`` and ``event`` are set by the logger
        and take precedence over identically named *fields*.
        """
        entry: dict[str, object] = {
            **fields,
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "session_id": self._session_id,
            "event": event,
        }
        with self._lock:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(entry, default=str) + "\n")

    def read_all(self) -> list[dict[str, object]]:
        return list(self._iter_records())

    def query(self, **filters: object) -> list[dict[str, object]]:
        """Return records whose top-level fields equal every filter value."""
        return [
            record
            for record in self._iter_records()
            if all(record.get(k) == v for k, v in filters.items())
        ]

    def count(self) -> int:
        return sum(1 for _ in self._iter_records())

    def last_n(self, n: int) -> list[dict[str, object]]:
        records = list(self._iter_records())
        return records[-n:] if n > 0 else []

    def _iter_records(self) -> Iterator[dict[str, object]]:
        if not self._log_path.exists():
            return
        with self._lock:
            lines = self._log_path.read_text(encoding="utf-8").splitlines()
        for line in lines:
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                continue  # torn write

    @property
    def log_path(self) -> Path:
        return self._log_path

    @property
    def session_id(self) -> str:
        return self._session_id
