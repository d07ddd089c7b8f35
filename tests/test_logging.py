"""
Tests for the logging module.

Tests verify:
- configure_logging renders JSON to stderr (or a given stream)
- DEBUG logs are suppressed at INFO level
- Definitions and rewrites emit debug events
- Context binding helpers
"""

import io
import json

import structlog
from structlog.testing import capture_logs

from enum_handler import EnumHandlerMixin
from enum_handler.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from tests._support.models import User


class TestConfigureLogging:
    def test_json_output_goes_to_stderr(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("test").info("hello", answer=42)

        captured = capsys.readouterr()
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert captured.out == ""
        assert record["event"] == "hello"
        assert record["answer"] == 42
        assert record["library"] == "enum-handler"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_explicit_stream(self):
        stream = io.StringIO()
        configure_logging(level="DEBUG", json_format=True, stream=stream)
        get_logger("test").debug("to_stream")
        assert json.loads(stream.getvalue())["event"] == "to_stream"

    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("test").debug("hidden")
        assert "hidden" not in capsys.readouterr().err

    def test_console_renderer(self, capsys):
        configure_logging(level="DEBUG", json_format=False)
        get_logger("test").debug("visible", attribute="status")
        err = capsys.readouterr().err
        assert "visible" in err
        assert "attribute" in err

    def test_reconfiguration_reaches_module_loggers(self):
        stream = io.StringIO()
        configure_logging(level="DEBUG", json_format=True, stream=stream)
        User.rewrite_conditions("status = ?", ["active"])
        events = [json.loads(line)["event"] for line in stream.getvalue().splitlines()]
        assert "conditions_rewritten" in events


class TestLibraryEvents:
    """Debug events emitted by the library."""

    def test_enum_defined(self):
        class Lamp(EnumHandlerMixin):
            pass

        with capture_logs() as logs:
            Lamp.define_enum("state", ["on", "off"], sets={"any": ["on", "off"]})

        event = next(e for e in logs if e["event"] == "enum_defined")
        assert event["model"] == "Lamp"
        assert event["attribute"] == "state"
        assert event["sets"] == ["any"]
        assert event["log_level"] == "debug"

    def test_keyed_enum_defined(self):
        class Meal(EnumHandlerMixin):
            pass

        with capture_logs() as logs:
            Meal.define_keyed_enum("course", "kind", {"dinner": ["soup", "main"]})

        assert any(e["event"] == "keyed_enum_defined" and e["keys"] == ["dinner"] for e in logs)

    def test_polymorphic_enabled(self):
        class Setting(EnumHandlerMixin):
            pass

        with capture_logs() as logs:
            Setting.supports_polymorphic_enum_handling("target")

        assert logs[0]["event"] == "polymorphic_enum_enabled"
        assert logs[0]["polymorphic_attribute"] == "target_type"

    def test_conditions_rewritten(self):
        with capture_logs() as logs:
            User.rewrite_conditions("status = ?", ["active"])

        event = next(e for e in logs if e["event"] == "conditions_rewritten")
        assert event["sql"] == "users.status = :p0"

    def test_non_strict_passthrough(self):
        class Note(EnumHandlerMixin):
            pass

        Note.define_enum("tone", ["calm"], strict=False)
        note = Note()
        with capture_logs() as logs:
            note.tone = "angry"

        assert [e["event"] for e in logs] == ["non_strict_passthrough"]
        assert logs[0]["value"] == "angry"


class TestContextHelpers:
    def teardown_method(self):
        clear_context()

    def test_bind_and_unbind(self):
        bind_context(model="User", attribute="status")
        assert structlog.contextvars.get_contextvars() == {"model": "User", "attribute": "status"}
        unbind_context("attribute")
        assert structlog.contextvars.get_contextvars() == {"model": "User"}

    def test_log_context(self):
        with LogContext(model="Book"):
            assert structlog.contextvars.get_contextvars()["model"] == "Book"
        assert "model" not in structlog.contextvars.get_contextvars()
