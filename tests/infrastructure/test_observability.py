"""Structured logging — formatter output and idempotent setup."""

import json
import logging
import sys

from callrelay.infrastructure.observability import (
    ConversationTextFormatter, JSONFormatter, setup_logging,
)


def _record(msg="hello", exc_info=None, **extra):
    record = logging.LogRecord(
        "callrelay.test", logging.WARNING, __file__, 1, msg, (), exc_info,
    )
    record.__dict__.update(extra)
    return record


def test_json_has_base_fields_and_known_extras():
    out = json.loads(JSONFormatter().format(
        _record(channel="c1", agent_id="agent-1", unrelated="x"),
    ))
    assert out["level"] == "WARNING"
    assert out["logger"] == "callrelay.test"
    assert out["service"] == "callrelay"
    assert out["message"] == "hello"
    assert out["channel"] == "c1"
    assert out["agent_id"] == "agent-1"
    assert "unrelated" not in out
    assert "tool_name" not in out


def test_json_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        record = _record(exc_info=sys.exc_info())
    out = json.loads(JSONFormatter().format(record))
    assert "ValueError: bad" in out["exception"]


def test_text_format_appends_conversation_scope():
    formatter = ConversationTextFormatter()
    assert formatter.format(_record(channel="c1", agent_id="agent-1")).endswith(
        "hello [c1 agent-1]",
    )
    assert formatter.format(_record()).endswith("callrelay.test: hello")


def test_setup_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        first = setup_logging("DEBUG", "text")
        second = setup_logging("INFO", "json")
        assert first not in root.handlers
        assert second in root.handlers
        assert isinstance(second.formatter, JSONFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = before
        root.setLevel(level)
