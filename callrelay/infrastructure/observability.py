"""Structured Logging — one JSON object per record, orchestration fields first-class.

Invariants:
    - Every record carries timestamp, level, logger, service and message
    - Orchestration extras (channel, agent_id, tool_name, state, ...) are copied when set
    - setup_logging() is idempotent: repeated calls replace our handler, never stack it
    - httpx/httpcore request chatter stays at WARNING (one line per agent-platform poll otherwise)

Design Decisions:
    - Stdlib logging + custom formatter, no structlog: callers only ever pass extra={...}
    - Text format appends "[channel agent_id]" so local tails stay grep-able per conversation
"""

import json
import logging
from datetime import datetime, timezone

SERVICE_NAME = "callrelay"

ORCHESTRATION_FIELDS = (
    "channel", "agent_id", "tool_name", "specialization", "state",
    "error_code", "path",
)
PROVIDER_FIELDS = ("attempt", "input_tokens", "output_tokens")

_QUIET_LOGGERS = ("httpx", "httpcore")
_HANDLER_NAME = "callrelay-root"


def record_extras(record: logging.LogRecord) -> dict:
    """Known extra= fields present on the record, in declaration order."""
    extras = {}
    for key in (*ORCHESTRATION_FIELDS, *PROVIDER_FIELDS):
        val = getattr(record, key, None)
        if val is not None:
            extras[key] = val
    return extras


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "message": record.getMessage(),
            **record_extras(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ConversationTextFormatter(logging.Formatter):
    """Human-readable line with the conversation identity appended."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        scope = " ".join(
            str(extras[k]) for k in ("channel", "agent_id") if k in extras
        )
        return f"{line} [{scope}]" if scope else line


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the root handler once per process (lifespan startup)."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else ConversationTextFormatter(),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
