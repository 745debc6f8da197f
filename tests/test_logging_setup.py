"""Tests for picoclaw.logging_setup and the audit logger"""

import json
import logging
from unittest.mock import patch

from picoclaw.audit import AuditLogger
from picoclaw.logging_setup import JsonFormatter, setup_logging


class TestSetupLogging:

    def test_text_format(self):
        with patch("picoclaw.logging_setup.logging.basicConfig") as basic_config:
            setup_logging("warning", "text")

        kwargs = basic_config.call_args.kwargs
        assert kwargs["level"] == logging.WARNING
        assert kwargs["force"] is True
        assert not isinstance(kwargs["handlers"][0].formatter, JsonFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_json_format(self):
        with patch("picoclaw.logging_setup.logging.basicConfig") as basic_config:
            setup_logging("debug", "json")

        kwargs = basic_config.call_args.kwargs
        assert kwargs["level"] == logging.DEBUG
        assert isinstance(kwargs["handlers"][0].formatter, JsonFormatter)

    def test_json_formatter_output(self):
        record = logging.LogRecord("picoclaw.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)

        entry = json.loads(JsonFormatter().format(record))

        assert entry["message"] == "hello x"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "picoclaw.test"


class TestAuditLogger:

    def _events(self, caplog):
        return [json.loads(r.getMessage()) for r in caplog.records if r.name == "picoclaw.audit"]

    def test_provider_call(self, caplog):
        with caplog.at_level(logging.INFO, logger="picoclaw.audit"):
            AuditLogger(session_id="s1").log_provider_call(
                provider="openai", model="gpt-4o", success=True, duration_ms=12, tool_calls_count=2
            )

        event = self._events(caplog)[0]
        assert event["event_type"] == "provider_call"
        assert event["session_id"] == "s1"
        assert event["tool_calls_count"] == 2
        assert "error" not in event

    def test_failed_tool_logged_at_error(self, caplog):
        with caplog.at_level(logging.INFO, logger="picoclaw.audit"):
            AuditLogger().log_tool_execution("write_file", False, 3, 10, error="boom")

        record = [r for r in caplog.records if r.name == "picoclaw.audit"][0]
        assert record.levelno == logging.ERROR
        assert json.loads(record.getMessage())["error"] == "boom"

    def test_agent_iteration(self, caplog):
        with caplog.at_level(logging.INFO, logger="picoclaw.audit"):
            AuditLogger().log_agent_iteration(2, ["write_file"], final_answer=False)

        event = self._events(caplog)[0]
        assert event["iteration"] == 2
        assert event["tool_calls_count"] == 1
        assert event["final_answer"] is False
