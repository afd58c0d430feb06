"""Encode list-valued columns as JSON text.

JSON keeps element order, and Python writes floats with the shortest repr
that parses back to the same value, so numbers survive unchanged.
"""

import json
from collections.abc import Sequence
from typing import Any

from weathersync.errors import ParseError


def encode_list(values: Sequence[Any] | None) -> str | None:
    if values is None:
        return None
    return json.dumps(list(values))


def decode_list(text: str | None) -> list[Any]:
    if text is None:
        return []
    try:
        values = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Malformed list column: {e}") from e
    if not isinstance(values, list):
        raise ParseError(f"Expected a JSON array, got {type(values).__name__}")
    return values
