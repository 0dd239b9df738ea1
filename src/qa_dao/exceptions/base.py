"""
The closed error taxonomy raised by every repository operation.

Callers catch `DbError` (or a specific subclass) and render it with
`to_payload()` / `http_status()`. Store exceptions are always chained
(`raise ... from exc`) and never leak into the payload.
"""

from enum import Enum
from typing import Iterable


class DbErrorKind(str, Enum):
    CREATION = "creation"
    NOT_FOUND = "not_found"
    INVALID_UUID = "invalid_uuid"
    ACCESS = "access"
    FROM_ROW = "from_row"
    DELETION = "deletion"
    UPDATE = "update"
    COMMIT = "commit"


class DbError(Exception):
    """
    Base exception for data-access failures.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['question_id'])
    - constraint: optional DB constraint name (for logs only, never in payloads)
    - error_code: canonical short code, the value of the subclass `kind`
    """

    kind: DbErrorKind | None = None

    # Default HTTP status per kind; the boundary layer may override.
    ERROR_CODE_TO_STATUS = {
        DbErrorKind.CREATION.value: 400,
        DbErrorKind.NOT_FOUND.value: 404,
        DbErrorKind.INVALID_UUID.value: 400,
        DbErrorKind.ACCESS.value: 503,
        DbErrorKind.FROM_ROW.value: 500,
        DbErrorKind.DELETION.value: 500,
        DbErrorKind.UPDATE.value: 500,
        DbErrorKind.COMMIT.value: 500,
    }

    default_message = "Database operation failed"

    def __init__(self, message: str | None = None, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = self.kind.value if self.kind else None

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        JSON-serializable body for a transport response:
            {"detail": "...", "code": "not_found", "fields": [...]}
        `constraint` is deliberately left out.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 500)
        return 500


class CreationError(DbError):
    """Insert statement failed (constraint violation or store unavailable)."""
    kind = DbErrorKind.CREATION
    default_message = "Failed to create record"


class NotFoundError(DbError):
    """Targeted row does not exist, or the single-row fetch failed."""
    kind = DbErrorKind.NOT_FOUND
    default_message = "Not found"


class InvalidUuidError(DbError):
    """Identifier string is not a canonical UUID. Carries a static message only."""
    kind = DbErrorKind.INVALID_UUID
    default_message = "Invalid identifier: expected a UUID in canonical 8-4-4-4-12 hyphenated form"


class AccessError(DbError):
    """Bulk read or transaction begin failed."""
    kind = DbErrorKind.ACCESS
    default_message = "Failed to access the database"


class FromRowError(DbError):
    """A fetched row could not be mapped into its entity."""
    kind = DbErrorKind.FROM_ROW
    default_message = "Failed to map database row"


class DeletionError(DbError):
    kind = DbErrorKind.DELETION
    default_message = "Failed to delete record"


class UpdateError(DbError):
    kind = DbErrorKind.UPDATE
    default_message = "Failed to update record"


class CommitError(DbError):
    """Commit failed after every statement succeeded; the change may not be durable."""
    kind = DbErrorKind.COMMIT
    default_message = "Failed to commit transaction"


__all__ = [
    "DbErrorKind",
    "DbError",
    "CreationError",
    "NotFoundError",
    "InvalidUuidError",
    "AccessError",
    "FromRowError",
    "DeletionError",
    "UpdateError",
    "CommitError",
]
