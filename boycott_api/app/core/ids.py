"""
Document identity parsing.

Identities are SQLite row ids and travel over the wire as ``_id``.
Clients may send them as JSON numbers or as strings (path parameters
are always strings).  Every service operation that accepts an id runs
it through ``parse_id`` before touching the store so that a malformed
value is reported as invalid input and never as "not found".
"""

from typing import Any

from .errors import InvalidInputError


def parse_id(raw: Any, field: str = "id") -> int:
    """Return ``raw`` as a positive integer identity.

    Accepts ints and strings of ASCII digits.  Booleans, floats, signed
    or padded strings and non-positive values are rejected with
    ``InvalidInputError``.
    """
    if isinstance(raw, bool):
        raise InvalidInputError(f"Invalid {field}", {field: raw})
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.isascii() and raw.isdigit():
        value = int(raw)
    else:
        raise InvalidInputError(f"Invalid {field}", {field: raw})
    if value <= 0 or value > 2**63 - 1:
        raise InvalidInputError(f"Invalid {field}", {field: raw})
    return value
