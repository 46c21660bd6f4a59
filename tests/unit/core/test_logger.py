"""
Unit tests for core.logger module.

Tests:
- Logger initialization and bind() context
- Structured key=value formatting and escaping
- JSON output mode
- StructuredFormatter output for records with and without structured data
"""

import json
import logging

import pytest

from mockstr.core import Logger, StructuredFormatter
from mockstr.core.logger import format_kv_pairs


class TestInit:
    """Logger initialization."""

    def test_name(self):
        logger = Logger("mockstr.test")
        assert logger.name == "mockstr.test"
        assert logger._logger.name == "mockstr.test"

    def test_default_not_json(self):
        assert Logger("test")._json_output is False

    def test_json_mode(self):
        assert Logger("test", json_output=True)._json_output is True


class TestFormatKvPairs:
    """Key-value pairs formatting and escaping."""

    def test_simple(self):
        assert format_kv_pairs({"key": "hello"}) == " key=hello"
        assert format_kv_pairs({"key": 123}) == " key=123"

    def test_with_spaces(self):
        assert format_kv_pairs({"key": "hello world"}) == ' key="hello world"'

    def test_json_frame_is_quoted(self):
        assert format_kv_pairs({"frame": '["EOSE","s"]'}) == ' frame="[\\"EOSE\\",\\"s\\"]"'

    def test_empty_value(self):
        assert format_kv_pairs({"key": ""}) == ' key=""'

    def test_empty_dict(self):
        assert format_kv_pairs({}) == ""

    def test_truncation(self):
        result = format_kv_pairs({"key": "x" * 1500}, max_value_length=1000)
        assert "truncated 500 chars" in result

    def test_no_truncation(self):
        assert "truncated" not in format_kv_pairs({"key": "x" * 1500}, max_value_length=None)

    def test_custom_prefix(self):
        assert format_kv_pairs({"key": "val"}, prefix="") == "key=val"


class TestBind:
    """Logger.bind() context propagation."""

    def test_bind_returns_new_logger(self):
        logger = Logger("test")
        bound = logger.bind(session="s1")
        assert bound is not logger
        assert bound.name == "test"
        assert logger._context == {}

    def test_bind_accumulates(self):
        bound = Logger("test").bind(session="s1").bind(url="ws://x")
        assert bound._context == {"session": "s1", "url": "ws://x"}

    def test_call_kwargs_override_context(self, caplog):
        with caplog.at_level(logging.INFO, logger="bind_test"):
            Logger("bind_test").bind(sub_id="a").info("opened", sub_id="b")
        assert caplog.records[0].structured_kv == {"sub_id": "b"}

    def test_bind_keeps_json_mode(self):
        assert Logger("test", json_output=True).bind(a=1)._json_output is True


class TestIntegration:
    """Integration tests with real logging."""

    def test_structured_extra(self, caplog):
        with caplog.at_level(logging.INFO, logger="integration_test"):
            Logger("integration_test").bind(session="s1").info("session_opened", url="ws://x")

        record = caplog.records[0]
        assert record.getMessage() == "session_opened"
        assert record.structured_kv == {"session": "s1", "url": "ws://x"}

    def test_json_log_to_handler(self, caplog):
        with caplog.at_level(logging.INFO, logger="json_test"):
            Logger("json_test", json_output=True).bind(session="s1").info("test", value=42)

        parsed = json.loads(caplog.records[0].getMessage())
        assert parsed["message"] == "test"
        assert parsed["level"] == "info"
        assert parsed["session"] == "s1"
        assert parsed["value"] == 42

    def test_disabled_level_skipped(self, caplog):
        with caplog.at_level(logging.INFO, logger="quiet_test"):
            Logger("quiet_test").debug("frame_sent", frame="x")
        assert caplog.records == []

    def test_exception_has_traceback(self, caplog):
        with caplog.at_level(logging.ERROR, logger="exc_test"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                Logger("exc_test").exception("failed")
        assert caplog.records[0].exc_info is not None

    @pytest.mark.parametrize("value", ["x" * 2000])
    def test_values_truncated_in_extra(self, caplog, value):
        with caplog.at_level(logging.INFO, logger="trunc_test"):
            Logger("trunc_test", max_value_length=10).info("msg", frame=value)
        assert caplog.records[0].structured_kv["frame"].startswith("x" * 10 + "...<truncated")


class TestStructuredFormatter:
    """StructuredFormatter rendering."""

    def _record(self, **extra):
        record = logging.LogRecord(
            "mockstr.relay", logging.INFO, __file__, 1, "event_published", None, None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_plain_record(self):
        assert StructuredFormatter().format(self._record()) == "info mockstr.relay event_published"

    def test_structured_record(self):
        record = self._record(structured_kv={"kind": 1621, "session": "s1"})
        assert StructuredFormatter().format(record) == (
            "info mockstr.relay event_published kind=1621 session=s1"
        )
