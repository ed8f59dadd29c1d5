"""Random short issue ids."""

from __future__ import annotations

import secrets
import string

from moth.defaults import MAX_ID_LENGTH, MIN_ID_LENGTH
from moth.errors import InvalidInputError

_FIRST_CHARS = string.ascii_lowercase
_CHARS = string.ascii_lowercase + string.digits


def generate_id(length: int) -> str:
    """Draw a random id of the given length.

    The first character is always a letter so an id never reads as the
    numeric order prefix of a filename. Uniqueness is up to the caller.
    """
    if not MIN_ID_LENGTH <= length <= MAX_ID_LENGTH:
        raise InvalidInputError(
            f"id_length must be between {MIN_ID_LENGTH} and {MAX_ID_LENGTH}, found {length}"
        )
    first = secrets.choice(_FIRST_CHARS)
    rest = "".join(secrets.choice(_CHARS) for _ in range(length - 1))
    return first + rest
