import re
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .integrity_classifier import classify_integrity_error, ConstraintViolation
from .base import DbError, CreationError

logger = logging.getLogger(__name__)

# Exceptions that mean "the store failed". OSError covers drivers that surface
# socket errors on connect without wrapping them in a DBAPI error.
STORE_ERRORS: tuple[type[BaseException], ...] = (SQLAlchemyError, OSError)

# -----------------------
# Column extraction helpers
# -----------------------

def _extract_columns_postgres(msg: str) -> list[str] | None:
    """
    - 'null value in column "title" of relation "questions" violates not-null constraint'
    - 'DETAIL:  Key (question_id)=(...) is not present in table "questions".'
    """
    m = re.search(r'null value in column "(?P<col>[^"]+)"', msg, flags=re.IGNORECASE)
    if m:
        return [m.group("col")]

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _extract_columns_sqlite(msg: str) -> list[str] | None:
    # 'UNIQUE constraint failed: questions.title' / 'NOT NULL constraint failed: answers.answer'
    m = re.search(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols"))]
    return None


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    msg = str(exc.orig) if exc.orig is not None else str(exc)
    return _extract_columns_postgres(msg) or _extract_columns_sqlite(msg)


# -----------------------
# Mapper
# -----------------------

_VIOLATION_MESSAGES = {
    ConstraintViolation.UNIQUE: "{model} already exists",
    ConstraintViolation.NOT_NULL: "Missing required field for {model}",
    ConstraintViolation.FOREIGN_KEY: "{model} references a record that does not exist",
    ConstraintViolation.CHECK: "{model} business rule violated (check constraint)",
    ConstraintViolation.UNKNOWN: "{model} database integrity error",
}


def map_integrity_error(
    exc: IntegrityError,
    error_cls: type[DbError] = CreationError,
    model_name: str | None = None,
) -> DbError:
    """
    Build an `error_cls` instance describing an IntegrityError.

    The message is safe for clients; the raw driver text is only logged at DEBUG.
    """
    violation, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"

    message = _VIOLATION_MESSAGES[violation].format(model=model_part)
    if columns:
        message = f"{message}: {', '.join(columns)}"

    log = logger.warning if violation is ConstraintViolation.UNKNOWN else logger.info
    log(
        f"mapper.{violation.value}_violation",
        extra={"model": model_part, "fields": columns, "constraint": constraint_name},
    )
    logger.debug("mapper.integrity_raw", extra={"model": model_part, "raw": str(exc.orig)})

    return error_cls(message, fields=columns, constraint=constraint_name)


@contextmanager
def db_error_handler(
    error_cls: type[DbError],
    model_name: str | None = None,
    operation: str | None = None,
    message: str | None = None,
) -> Iterator[None]:
    """
    Translate store failures raised inside the block into `error_cls`.

    Usage:
        with db_error_handler(AccessError, "Question", "get_all"):
            result = await session.execute(...)

    - DbError raised inside the block passes through unchanged.
    - IntegrityError is classified (see map_integrity_error).
    - Any other store error becomes `error_cls(message)`, chained to the original.

    Rollback is not done here: the caller's session scope rolls back on close.
    """
    try:
        yield
    except DbError:
        raise
    except IntegrityError as exc:
        raise map_integrity_error(exc, error_cls, model_name) from exc
    except STORE_ERRORS as exc:
        logger.exception(
            "mapper.store_error",
            extra={"model": model_name, "operation": operation, "error_kind": error_cls.kind.value if error_cls.kind else None},
        )
        raise error_cls(message) from exc
