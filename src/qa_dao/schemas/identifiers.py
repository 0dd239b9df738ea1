"""
Untrusted identifier wrapper and its resolution into `uuid.UUID`.

`uuid.UUID()` on its own is too lenient for identifiers coming off the wire: it
also accepts braces, a `urn:uuid:` prefix and the 32-digit form without hyphens.
Only the canonical hyphenated form is accepted here.
"""

import re
import uuid
from dataclasses import dataclass

from qa_dao.exceptions.base import InvalidUuidError

_CANONICAL_UUID = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


@dataclass(frozen=True, slots=True)
class EntityId:
    """A caller-supplied identifier string, not yet known to be a valid UUID."""

    value: str

    def to_uuid(self) -> uuid.UUID:
        """
        Resolve the wrapped string.

        Raises:
            InvalidUuidError: if the value is not a string in canonical UUID form.
        """
        if not isinstance(self.value, str) or _CANONICAL_UUID.fullmatch(self.value) is None:
            raise InvalidUuidError()
        return uuid.UUID(self.value)


def resolve_entity_id(entity_id: EntityId) -> uuid.UUID:
    return entity_id.to_uuid()


__all__ = ["EntityId", "resolve_entity_id"]
