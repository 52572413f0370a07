"""Attribute extraction and typed value parsing.

Every attribute access goes through ``get_attribute()``: an absent attribute
is always a ``MissingValue`` naming it, never a silent default. The parse
helpers report the offending raw text in ``XmlValueError``.

Booleans are written as ``"1"``/``"0"`` throughout ``maindoc.xml``, with one
exception: the ``scale`` attribute of file layers uses ``"true"``/``"false"``.
The two encodings are kept apart on purpose; ``parse_bool`` rejects the
words and ``parse_word_bool`` rejects the digits.
"""

import re
import uuid
from typing import Callable, TypeVar

from kra_reader.errors import MissingValue, ParseUuidError, XmlValueError
from kra_reader.tokenization import XmlEvent

T = TypeVar("T")

U8_MAX = 0xFF
U32_MAX = 0xFFFFFFFF
I32_MIN = -0x80000000
I32_MAX = 0x7FFFFFFF

_SIGNED_RE = re.compile(r"-?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")


def get_attribute(tag: XmlEvent, name: str) -> str:
    """Return the decoded value of attribute ``name`` on ``tag``.

    Raises:
        MissingValue: If the tag has no such attribute.
    """
    value = tag.get_attribute(name)
    if value is None:
        raise MissingValue(name)
    return value


def parse_typed(value: str, converter: Callable[[str], T]) -> T:
    """Parse ``value`` with ``converter``, mapping any ``ValueError`` to XmlValueError."""
    try:
        return converter(value)
    except ValueError:
        raise XmlValueError(value) from None


def _parse_integer(value: str, minimum: int, maximum: int) -> int:
    # ASCII digits only; int() also takes whitespace, underscores, signs and
    # non-ASCII digits.
    pattern = _SIGNED_RE if minimum < 0 else _UNSIGNED_RE
    if not pattern.fullmatch(value):
        raise XmlValueError(value)
    number = int(value)
    if not minimum <= number <= maximum:
        raise XmlValueError(value)
    return number


def parse_u8(value: str) -> int:
    """Parse an unsigned 8-bit integer (0-255)."""
    return _parse_integer(value, 0, U8_MAX)


def parse_u32(value: str) -> int:
    """Parse an unsigned 32-bit integer."""
    return _parse_integer(value, 0, U32_MAX)


def parse_i32(value: str) -> int:
    """Parse a signed 32-bit integer."""
    return _parse_integer(value, I32_MIN, I32_MAX)


def parse_float(value: str) -> float:
    """Parse a floating point number."""
    if not value or value != value.strip() or "_" in value or not value.isascii():
        raise XmlValueError(value)
    return parse_typed(value, float)


def parse_bool(value: str) -> bool:
    """Parse a ``"1"``/``"0"`` boolean."""
    if value == "1":
        return True
    if value == "0":
        return False
    raise XmlValueError(value)


def parse_word_bool(value: str) -> bool:
    """Parse a ``"true"``/``"false"`` boolean."""
    if value == "true":
        return True
    if value == "false":
        return False
    raise XmlValueError(value)


def parse_uuid(value: str) -> uuid.UUID:
    """Parse a unique identifier, with or without surrounding braces.

    Raises:
        ParseUuidError: If the value is not a 128-bit hexadecimal identifier.
    """
    try:
        return uuid.UUID(value)
    except ValueError:
        raise ParseUuidError(value) from None


def parse_string(value: str) -> str:
    """Identity parser for free-form string attributes."""
    return value
