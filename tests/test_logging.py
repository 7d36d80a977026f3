"""Tests for logging configuration, formatters and context propagation."""

import json
import logging

import pytest

from pagerduty_failure.config import LogFormat, LoggingConfig, PagerdutyConfig
from pagerduty_failure.domain.models import FailureRecord
from pagerduty_failure.logging import ComponentLoggerAdapter, get_logger
from pagerduty_failure.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
    configure_logging_from_config,
)
from pagerduty_failure.logging.context import (
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)
from pagerduty_failure.notifier import FailureNotifier


def make_record(name="test", msg="Incident triggered", extra=None):
    return logging.getLogger("test").makeRecord(
        name, logging.INFO, "test.py", 1, msg, (), None, extra=extra
    )


class TestLogContext:
    def test_push_and_pop(self):
        token = push_log_context(queue="mailers")
        assert get_log_context() == {"queue": "mailers"}

        pop_log_context(token)
        assert get_log_context() == {}

    def test_nested_scopes_restore_outer(self):
        with log_context(queue="mailers"):
            with log_context(job_class="jobs.SendMail", queue="billing"):
                assert get_log_context() == {"queue": "billing", "job_class": "jobs.SendMail"}
            assert get_log_context() == {"queue": "mailers"}
        assert get_log_context() == {}

    def test_restored_when_exception_raised(self):
        with pytest.raises(RuntimeError):
            with log_context(queue="mailers"):
                raise RuntimeError("boom")

        assert get_log_context() == {}

    def test_get_returns_copy(self):
        with log_context(queue="mailers"):
            get_log_context()["queue"] = "changed"
            assert get_log_context() == {"queue": "mailers"}


class TestFormatters:
    def test_json_formatter_fields(self):
        record = make_record(extra={"event": "notifier.report.sent", "attempt": 1, "sent": True})

        log_obj = json.loads(JSONFormatter().format(record))

        assert log_obj["level"] == "INFO"
        assert log_obj["message"] == "Incident triggered"
        assert log_obj["event"] == "notifier.report.sent"
        assert log_obj["attempt"] == 1
        assert log_obj["sent"] is True
        assert "name" not in log_obj

    def test_json_timestamp_format(self):
        timestamp = json.loads(JSONFormatter().format(make_record()))["timestamp"]

        assert timestamp.endswith("Z")
        assert len(timestamp) == 24  # 2026-10-18T10:30:00.123Z

    def test_json_formatter_stringifies_other_types(self):
        record = make_record(extra={"frames": ("a", "b"), "config": PagerdutyConfig()})

        log_obj = json.loads(JSONFormatter().format(record))

        assert log_obj["frames"] == "('a', 'b')"
        assert log_obj["config"].startswith("PagerdutyConfig(")

    def test_key_value_formatter(self):
        formatter = KeyValueFormatter("[%(levelname)s] %(name)s: %(message)s")
        record = make_record(extra={"event": "client.request", "url": "https://x", "note": "a b"})

        output = formatter.format(record)

        assert output.startswith("[INFO] test: Incident triggered")
        assert "event=client.request" in output
        assert "url=https://x" in output
        assert 'note="a b"' in output

    def test_contextual_filter_merges_context(self):
        record = make_record(extra={"queue": "explicit"})

        with log_context(queue="from-context", job_class="jobs.SendMail"):
            ContextualFilter(service="svc", environment="test").filter(record)

        assert record.service == "svc"
        assert record.environment == "test"
        assert record.job_class == "jobs.SendMail"
        assert record.queue == "explicit"


class TestGetLogger:
    def test_plain_logger(self):
        assert isinstance(get_logger("plain"), logging.Logger)

    def test_component_adapter_merges_extra(self):
        adapter = get_logger("with.component", component="notifier")
        assert isinstance(adapter, ComponentLoggerAdapter)

        _, kwargs = adapter.process("msg", {"extra": {"event": "x"}})

        assert kwargs["extra"] == {"component": "notifier", "event": "x"}


class TestConfigureLogging:
    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="LOUD")

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="Invalid log format"):
            configure_logging(format_type="xml")

    @pytest.mark.parametrize(
        "format_type,formatter_class",
        [("json", JSONFormatter), ("key-value", KeyValueFormatter)],
    )
    def test_installs_single_handler(self, restore_root_logger, format_type, formatter_class):
        configure_logging(level="DEBUG", format_type=format_type, environment="test")
        configure_logging(level="DEBUG", format_type=format_type, environment="test")

        root = restore_root_logger
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, formatter_class)
        assert root.level == logging.DEBUG

    def test_accepts_format_enum(self, restore_root_logger):
        configure_logging(format_type=LogFormat.JSON)
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_from_logging_config(self, restore_root_logger):
        configure_logging_from_config(
            LoggingConfig(level="WARNING", format="json"), environment="staging"
        )

        root = restore_root_logger
        handler = root.handlers[0]
        assert root.level == logging.WARNING
        assert isinstance(handler.formatter, JSONFormatter)
        assert handler.filters[0].environment == "staging"

    def test_environment_from_variable(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        configure_logging_from_config(LoggingConfig())

        handler = restore_root_logger.handlers[0]
        assert isinstance(handler.formatter, KeyValueFormatter)
        assert handler.filters[0].environment == "production"


def test_notifier_logs_with_failure_context(caplog, client_factory):
    notifier = FailureNotifier(PagerdutyConfig(service_key="ABC"), client_factory=client_factory)
    record = FailureRecord.from_exception(RuntimeError("boom"), "mailers", "jobs.SendMail")
    seen = []

    class CaptureContext(logging.Handler):
        def emit(self, log_record):
            seen.append(get_log_context())

    handler = CaptureContext()
    logging.getLogger("pagerduty_failure.notifier.service").addHandler(handler)
    try:
        with caplog.at_level(logging.DEBUG, logger="pagerduty_failure"):
            notifier.report(record)
    finally:
        logging.getLogger("pagerduty_failure.notifier.service").removeHandler(handler)

    events = [getattr(r, "event", None) for r in caplog.records]
    assert "notifier.report.started" in events
    assert "notifier.report.sent" in events
    assert all(r.component == "notifier" for r in caplog.records if hasattr(r, "event"))
    assert {"queue": "mailers", "job_class": "jobs.SendMail"} in seen
    assert get_log_context() == {}
