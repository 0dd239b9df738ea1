"""
Logging filters.

CorrelationIdFilter attaches a per-call correlation id to every LogRecord so the
statements issued for one boundary request (HTTP call, job, CLI invocation) can be
grouped. The id lives in a ContextVar, which follows the logical flow across
`await` points instead of the OS thread.

The boundary layer calls `set_correlation_id()` when it starts handling a request
and `reset_correlation_id(token)` when it is done; the DAO never sets it itself.
"""

import logging
import contextvars
from logging import LogRecord

_correlation_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(correlation_id: str | None) -> contextvars.Token:
    """Set the id for the current context and return the token for `reset_correlation_id`."""
    return _correlation_id_ctx.set(correlation_id)


def reset_correlation_id(token: contextvars.Token) -> None:
    _correlation_id_ctx.reset(token)


def get_correlation_id() -> str | None:
    return _correlation_id_ctx.get()


class CorrelationIdFilter(logging.Filter):
    """
    Guarantee every record has a `correlation_id` attribute.

    Precedence: an explicit `extra={"correlation_id": ...}`, then the context value,
    then the sentinel "-" (so `%(correlation_id)s` in a format string never fails).
    """

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = (
            getattr(record, "correlation_id", None) or get_correlation_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    """Mask record attributes whose name looks like a secret."""

    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "authorization", "dsn"}
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True


__all__ = [
    "CorrelationIdFilter",
    "RedactFilter",
    "set_correlation_id",
    "reset_correlation_id",
    "get_correlation_id",
]
