"""Tests for audit logging and settings."""

import pytest

from microspend.audit import AuditLogger, create_correlation_id
from microspend.config import (
    AppSettings,
    ExportSettings,
    StorageSettings,
    validate_all_settings,
)
from microspend.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity


class BrokenLogger:
    """Stands in for the structlog logger; every info call fails."""

    def __init__(self):
        self.errors = []

    def info(self, *args, **kwargs):
        raise RuntimeError("log sink unavailable")

    def error(self, event, **kwargs):
        self.errors.append(event)


class TestAuditLogger:
    """Tests for the audit logger."""

    def test_recent_events_newest_first(self):
        """Test that recent events list the newest first."""
        audit_logger = AuditLogger()
        audit_logger.log_expense_added("a", "1", "CAD")
        audit_logger.log_expense_deleted("a", existed=True)

        types = [e.event_type for e in audit_logger.recent_events]
        assert types == [AuditEventType.EXPENSE_DELETED, AuditEventType.EXPENSE_ADDED]

    def test_history_is_bounded(self):
        """Test that only the last history_size events are kept."""
        audit_logger = AuditLogger(history_size=3)
        for i in range(5):
            audit_logger.log_expense_added(f"e{i}", "1", "CAD")

        assert [e.entity_id for e in audit_logger.recent_events] == ["e4", "e3", "e2"]

    def test_history_size_must_be_positive(self):
        """Test that a zero-length history is refused."""
        with pytest.raises(ValueError):
            AuditLogger(history_size=0)

    def test_history_size_of_one(self):
        """Test that the smallest history keeps only the latest event."""
        audit_logger = AuditLogger(history_size=1)
        audit_logger.log_expense_added("e1", "1", "CAD")
        audit_logger.log_expense_added("e2", "1", "CAD")

        assert [e.entity_id for e in audit_logger.recent_events] == ["e2"]

    def test_correlation_id_is_carried(self):
        """Test that one correlation id ties an export's events together."""
        audit_logger = AuditLogger()
        correlation_id = create_correlation_id()

        audit_logger.log_export_requested(3, correlation_id)
        audit_logger.log_ad_gate(AuditEventType.AD_GATE_COMPLETED, correlation_id)

        assert {e.correlation_id for e in audit_logger.recent_events} == {correlation_id}

    def test_error_severity(self):
        """Test that export failures are logged as errors."""
        audit_logger = AuditLogger()
        assert audit_logger.log(AuditEventBuilder.export_failed("disk full", create_correlation_id()))
        assert audit_logger.recent_events[0].severity == AuditSeverity.ERROR

    def test_logging_failure_does_not_raise(self):
        """Test that a broken log sink never breaks the caller."""
        audit_logger = AuditLogger()
        broken = BrokenLogger()
        audit_logger._logger = broken

        assert audit_logger.log(AuditEventBuilder.expense_added("e1", "1", "CAD")) is False
        assert broken.errors == ["audit_log_failed"]


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test the defaults with no environment overrides."""
        for name in ("MICROSPEND_DEFAULT_CURRENCY", "MICROSPEND_MAX_NOTE_LENGTH"):
            monkeypatch.delenv(name, raising=False)

        app = AppSettings(_env_file=None)
        assert app.default_currency == "CAD"
        assert app.max_note_length == 200
        assert ExportSettings(_env_file=None).filename == "microspend_expenses.csv"

    def test_env_prefix(self, monkeypatch):
        """Test that each settings group reads its own env prefix."""
        monkeypatch.setenv("MICROSPEND_DB_PATH", "/tmp/other.db")
        monkeypatch.setenv("MICROSPEND_DEFAULT_CURRENCY", "npr")

        assert StorageSettings().path == "/tmp/other.db"
        assert AppSettings().default_currency == "NPR"

    def test_unsupported_currency_rejected(self):
        """Test that only the four known currencies are allowed."""
        with pytest.raises(ValueError):
            AppSettings(default_currency="EUR")

    def test_export_filename_must_be_bare(self):
        """Test that the export filename cannot contain a path."""
        with pytest.raises(ValueError):
            ExportSettings(filename="../escape.csv")

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        """Test that the startup check names the failing group."""
        monkeypatch.setenv("MICROSPEND_DEFAULT_CURRENCY", "EUR")

        results = validate_all_settings()

        assert results["storage"] is True
        assert results["app"] is False
        assert "EUR" in results["app_error"]
