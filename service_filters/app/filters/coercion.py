"""
Coercion of configured comparison literals.

Filter configuration stores comparison values as plain strings, so the
literal is converted to the runtime type of the value it is compared
against before any operator is applied.
"""

import math
import re
from decimal import Decimal
from typing import Any, Union

Number = Union[int, float, Decimal]

# Decimal or exponent notation, or an unsigned 0x/0o/0b integer literal
NUMERIC_TEXT = re.compile(
    r"^(?:[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+)$"
)


def coerce(origin: Any, literal: Any) -> Any:
    """Coerce ``literal`` to the type of ``origin``.

    bool is checked before the numeric types since it subclasses int.
    """
    if isinstance(origin, bool):
        return literal == "true"
    if isinstance(origin, (int, float, Decimal)):
        return to_number(literal)
    if isinstance(origin, str):
        return to_string(literal)
    return literal


def to_number(value: Any) -> Number:
    """Parse a literal as a number; unparseable input gives NaN.

    An unset literal (None) and blank text parse as 0. Only the spelled-out
    "Infinity" is accepted for infinities; digit separators and the bare
    "inf"/"nan" spellings are not numbers.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float, Decimal)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if text.lstrip("+-") == "Infinity":
            return -math.inf if text.startswith("-") else math.inf
        if "_" in text or not NUMERIC_TEXT.match(text):
            return math.nan
        try:
            return int(text)
        except ValueError:
            pass
        if text[:2].lower() in ("0x", "0o", "0b"):
            return int(text, 0)
        return float(text)
    return math.nan


def to_string(value: Any) -> str:
    """String form of a literal as it would appear in filter configuration."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
