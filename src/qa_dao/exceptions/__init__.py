
# qa_dao/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # The DbError taxonomy (CreationError, NotFoundError, ...)
# │   ├── integrity_classifier.py    # SQL-level constraint classification
# │   └── mapper.py                  # Map store exceptions to DbError kinds

from .base import (
    DbErrorKind,
    DbError,
    CreationError,
    NotFoundError,
    InvalidUuidError,
    AccessError,
    FromRowError,
    DeletionError,
    UpdateError,
    CommitError,
)
from .mapper import db_error_handler, map_integrity_error

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
    "db_error_handler",
    "map_integrity_error",
]
