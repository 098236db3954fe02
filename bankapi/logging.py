"""
Structured logging configuration for the Bank API service.

All logs are JSON-formatted with these standard fields:
- timestamp: ISO 8601 timestamp
- event: The log event name (first positional argument)
- request_id: UUID for tracing requests end-to-end
- account_number: Account number asserted by the caller's token (when known)
- duration_ms: Operation duration in milliseconds
- outcome: Result of the operation (login and authorization events)

Tokens, password hashes and signature internals are never logged.
"""
import time
import uuid
from contextvars import ContextVar
from typing import Any, Optional

import structlog

# Context variables for request-scoped data
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
account_number_ctx: ContextVar[Optional[int]] = ContextVar("account_number", default=None)


def add_context_vars(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor that adds context variables to log entries."""
    request_id = request_id_ctx.get()
    account_number = account_number_ctx.get()

    if request_id:
        event_dict["request_id"] = request_id
    if account_number is not None:
        event_dict.setdefault("account_number", account_number)

    return event_dict


def configure_logging() -> None:
    """Configure structlog with JSON output and context processors."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            add_context_vars,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def set_request_context(request_id: str) -> None:
    """Set the request context for logging."""
    request_id_ctx.set(request_id)


def set_account_context(account_number: int) -> None:
    """Attach the token's account number to subsequent log entries."""
    account_number_ctx.set(account_number)


def clear_request_context() -> None:
    """Clear the request context after request completion."""
    request_id_ctx.set("")
    account_number_ctx.set(None)


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


class TimedOperation:
    """Context manager for timing operations and logging duration."""

    def __init__(
        self,
        event: str,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        **extra_fields: Any,
    ):
        self.event = event
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time: float = 0
        self.duration_ms: float = 0

    def __enter__(self) -> "TimedOperation":
        self.start_time = time.perf_counter()
        self.logger.debug(f"{self.event}_started", **self.extra_fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(
                f"{self.event}_failed",
                duration_ms=round(self.duration_ms, 2),
                error=str(exc_val),
                **self.extra_fields,
            )
        else:
            self.logger.debug(
                f"{self.event}_completed",
                duration_ms=round(self.duration_ms, 2),
                **self.extra_fields,
            )


def log_authorization(
    logger: structlog.stdlib.BoundLogger,
    outcome: str,
    account_id: Optional[int] = None,
    reason: Optional[str] = None,
) -> None:
    """Log an authorization gate decision with standard fields."""
    fields: dict[str, Any] = {"outcome": outcome}
    if account_id is not None:
        fields["account_id"] = account_id
    if reason:
        fields["reason"] = reason

    if outcome == "allowed":
        logger.info("authorization_completed", **fields)
    else:
        logger.warning("authorization_denied", **fields)
