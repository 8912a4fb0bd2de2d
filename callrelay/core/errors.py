"""Error Hierarchy — typed, categorized exceptions for all CallRelay failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller mistakes; infrastructure errors (500-level) are upstream failures
    - to_response() produces the REST envelope used by the global handlers
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CallRelayError base: FastAPI global handler catches all (ADR: uniform error shape)
    - Infrastructure errors are raised by adapters and converted to model-facing strings
      at the service boundary — only ToolArgumentsError is meant to reach HTTP from a turn
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    TIMEOUT = "timeout"
    AUTHENTICATION = "authentication"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    channel: str | None = None
    tool_name: str | None = None
    agent_id: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class CallRelayError(Exception):
    """Base exception for all CallRelay errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "channel": self.context.channel,
                    "tool_name": self.context.tool_name,
                    "agent_id": self.context.agent_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ToolArgumentsError(CallRelayError):
    """Tool call arguments are not valid JSON."""
    def __init__(self, tool_name: str, detail: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.tool_name = tool_name
        super().__init__(
            f"Malformed arguments for tool '{tool_name}': {detail}",
            "TOOL_ARGUMENTS_INVALID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.tool_name = tool_name


class UnsupportedVersionError(CallRelayError):
    """Requested API version has no tool catalogue."""
    def __init__(self, version: str, context: ErrorContext | None = None):
        super().__init__(
            f"API version '{version}' is not supported",
            "UNSUPPORTED_VERSION", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.version = version


class AuthenticationError(CallRelayError):
    """Bearer token missing or wrong."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid or missing token",
            "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(CallRelayError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class CompletionProviderError(CallRelayError):
    """Completion provider call failed after retries."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Completion provider error ({api_error_type}): {message}",
            "COMPLETION_PROVIDER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.api_error_type = api_error_type


class AgentPlatformError(CallRelayError):
    """Conversational-agent platform returned non-2xx or was unreachable."""
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        timed_out: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "AGENT_PLATFORM_ERROR",
            ErrorCategory.TIMEOUT if timed_out else ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.status_code = status_code
        self.timed_out = timed_out


class AgentNotFoundError(CallRelayError):
    """Agent platform has no record of the agent."""
    def __init__(self, agent_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.agent_id = agent_id
        super().__init__(
            f"Agent {agent_id} not found",
            "AGENT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )
        self.agent_id = agent_id


class SearchProviderError(CallRelayError):
    """Restaurant search backend failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "SEARCH_PROVIDER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
