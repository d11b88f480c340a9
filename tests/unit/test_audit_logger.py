"""Tests for AuditLogger."""
from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from project_group_structure.audit.logger import (
    CREATION_ALLOWED,
    CREATION_REJECTED,
    AuditLogger,
)


@pytest.fixture()
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "audit.jsonl"


@pytest.fixture()
def audit(log_path: Path) -> AuditLogger:
    return AuditLogger(log_path, session_id="test-session-123")


class TestConstruction:
    def test_custom_session_id(self, log_path: Path) -> None:
        assert AuditLogger(log_path, session_id="my-session").session_id == "my-session"

    def test_auto_session_id_generated(self, log_path: Path) -> None:
        assert AuditLogger(log_path).session_id

    def test_log_path_property(self, log_path: Path) -> None:
        assert AuditLogger(log_path).log_path == log_path


# ---------------------------------------------------------------------------
# record
# ---------------------------------------------------------------------------


class TestRecord:
    def test_writes_json_line(self, audit: AuditLogger, log_path: Path) -> None:
        audit.record(CREATION_REJECTED, project="a b", reason="contains_whitespace")
        lines = log_path.read_text(encoding="utf-8").strip().splitlines()
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["event"] == CREATION_REJECTED
        assert entry["project"] == "a b"
        assert entry["session_id"] == "test-session-123"
        assert "timestamp" in entry

    def test_reserved_fields_win(self, audit: AuditLogger) -> None:
        audit.record(CREATION_ALLOWED, session_id="other", timestamp="yesterday")
        entry = audit.read_all()[0]
        assert entry["timestamp"] != "yesterday"
        assert entry["session_id"] == "test-session-123"

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        nested = tmp_path / "deep" / "nested" / "audit.jsonl"
        AuditLogger(nested).record(CREATION_ALLOWED)
        assert nested.exists()

    def test_non_json_values_stringified(self, audit: AuditLogger) -> None:
        audit.record(CREATION_ALLOWED, path=Path("/tmp/x"))
        assert audit.read_all()[0]["path"] == "/tmp/x"

    def test_concurrent_writers(self, audit: AuditLogger) -> None:
        threads = [
            threading.Thread(target=audit.record, args=(CREATION_ALLOWED,), kwargs={"n": i})
            for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert audit.count() == 20


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestRead:
    def test_empty_when_no_file(self, audit: AuditLogger) -> None:
        assert audit.read_all() == []
        assert audit.count() == 0

    def test_skips_malformed_and_blank_lines(self, audit: AuditLogger, log_path: Path) -> None:
        audit.record(CREATION_ALLOWED)
        with log_path.open("a", encoding="utf-8") as fh:
            fh.write("not-valid-json\n\n")
        audit.record(CREATION_REJECTED)
        assert audit.count() == 2

    def test_query_and_semantics(self, audit: AuditLogger) -> None:
        audit.record(CREATION_REJECTED, project="a")
        audit.record(CREATION_REJECTED, project="b")
        audit.record(CREATION_ALLOWED, project="a")
        assert len(audit.query(event=CREATION_REJECTED)) == 2
        assert len(audit.query(event=CREATION_REJECTED, project="a")) == 1
        assert audit.query(event="nonexistent") == []

    def test_last_n(self, audit: AuditLogger) -> None:
        for i in range(5):
            audit.record(CREATION_ALLOWED, index=i)
        results = audit.last_n(3)
        assert [r["index"] for r in results] == [2, 3, 4]
        assert len(audit.last_n(10)) == 5
        assert audit.last_n(0) == []
