"""Tests for JSON-lines audit logging."""

import json
import logging

from biblint.audit import AuditLogger, get_audit_logger


def read_events(path):
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


class TestAuditLogger:
    """Tests for audit event output."""

    def test_events_written_as_json_lines(self, tmp_path):
        log_file = tmp_path / "logs" / "audit.log"
        audit = AuditLogger(log_file=str(log_file), level="INFO")
        audit.log_parse("refs.bib", num_entries=3, num_symbols=1, num_syntax_errors=0)
        audit.log_clean(num_entries=2, removed={"contained": 1, "exact": 0},
                        execution_time_ms=1.5)
        audit.log_check(num_entries=2, num_diagnostics=4, execution_time_ms=0.5)
        audit.log_duplicates(num_groups=1, num_entries=2)
        audit.log_error("file_not_found", "missing.bib", {"source_path": "missing.bib"})
        audit.close()

        events = read_events(log_file)
        assert [e["event"] for e in events] == ["parse", "clean", "check", "duplicates", "error"]
        assert events[0]["num_entries"] == 3
        assert events[1]["removed"] == {"contained": 1, "exact": 0}
        assert events[3]["num_groups"] == 1
        assert events[4]["error_type"] == "file_not_found"
        assert events[4]["source_path"] == "missing.bib"
        assert all("timestamp" in e for e in events)

    def test_extra_metadata(self, tmp_path):
        log_file = tmp_path / "audit.log"
        audit = AuditLogger(log_file=str(log_file))
        audit.log_parse("a.bib", 0, 0, 2, encoding="utf-8")
        audit.close()
        assert read_events(log_file)[0]["encoding"] == "utf-8"

    def test_level_filters_events(self, tmp_path):
        log_file = tmp_path / "audit.log"
        audit = AuditLogger(log_file=str(log_file), level="ERROR")
        audit.log_check(num_entries=1, num_diagnostics=0, execution_time_ms=0.1)
        audit.log_error("decode_error", "bad bytes")
        audit.close()
        assert [e["event"] for e in read_events(log_file)] == ["error"]

    def test_no_file_discards(self, tmp_path):
        audit = AuditLogger(log_file=None)
        audit.log_check(num_entries=1, num_diagnostics=0, execution_time_ms=0.1)
        assert audit.log_file is None
        assert all(isinstance(h, logging.NullHandler) for h in audit.logger.handlers)
        assert list(tmp_path.iterdir()) == []

    def test_handlers_not_duplicated(self, tmp_path):
        AuditLogger(log_file=str(tmp_path / "a.log")).close()
        audit = AuditLogger(log_file=str(tmp_path / "b.log"))
        assert len(audit.logger.handlers) == 1
        audit.close()


class TestGetAuditLogger:
    """Tests for building the logger from config."""

    def test_disabled_by_default(self):
        assert get_audit_logger().log_file is None
        assert get_audit_logger({"enabled": False, "file": "x.log"}).log_file is None

    def test_enabled(self, tmp_path):
        log_file = tmp_path / "audit.log"
        audit = get_audit_logger({"enabled": True, "file": str(log_file), "level": "INFO"})
        assert audit.log_file == log_file
        audit.close()
