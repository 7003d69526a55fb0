"""
Tynda Backend — Identifier Parsing
===================================

Record ids travel as strings at the HTTP boundary and are UUIDs in the
store. Every service parses ids through `parse_id` before touching the
database, so a malformed id is always a 400 and never a query.
"""

import uuid
from typing import Any

from tynda.exceptions import ValidationError


def parse_id(raw: Any, message: str = "Invalid ID format", field: str = "id") -> uuid.UUID:
    """
    Convert a client-supplied id string into a UUID.

    Raises:
        ValidationError: `raw` is missing, not a string, or not a UUID.
    """
    if not raw or not isinstance(raw, str):
        raise ValidationError(message=message, field=field)
    try:
        return uuid.UUID(raw.strip())
    except ValueError:
        raise ValidationError(message=message, field=field, context={"value": raw[:64]})
