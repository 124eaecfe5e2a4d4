"""Continuation token codec.

A token is the triple ``(order_value, offset, checksum)`` serialized as three
``_``-delimited ASCII segments, for example ``bfdew0_1_1jvdwz4``:

- the order value of the last record of the previous page: base-36 when it is
  an integer (epoch seconds for date fields), otherwise ``=`` followed by the
  base64 encoding of its string form. Other numbers (floats, decimals, bools)
  would not read back as numbers and are rejected;
- the number of trailing records of the previous page that share that order
  value, in decimal;
- the CRC-32 of those records' tie-break values, in base-36.

The checksum lets the pager notice that the records around the page boundary
changed since the token was issued, in which case it falls back to the first
page of records at or past the order value.
"""

from __future__ import annotations

import base64
import binascii
import numbers
import re
import zlib
from dataclasses import dataclass
from typing import Any, Iterable

from keypager.utils.exceptions import InvalidArgument, InvalidToken
from keypager.utils.types import TOKEN_DELIMITER

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_PLAIN_ORDER_PART = re.compile(r"^[0-9a-z]*$", re.IGNORECASE)
_STRING_PREFIX = "="
_MAX_CHECKSUM = 0xFFFFFFFF


def to_base36(value: int) -> str:
    """Encode an integer in lowercase base-36."""
    if value < 0:
        return "-" + to_base36(-value)
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def from_base36(value: str) -> int:
    """Decode a base-36 string. An empty string decodes to 0."""
    if value == "":
        return 0
    if value.strip() != value or "_" in value:
        raise ValueError(f"invalid base-36 literal {value!r}")
    return int(value, 36)


def compute_checksum(values: Iterable[Any]) -> int:
    """CRC-32 of the comma-joined string forms of ``values``."""
    joined = ",".join(str(value) for value in values)
    return zlib.crc32(joined.encode("utf-8")) & _MAX_CHECKSUM


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class PageToken:
    """Immutable continuation token.

    Attributes:
        order_value: Value used as starting point to cut the record set
        offset: How many records of the eligible set to skip
        checksum: CRC-32 of the first ``offset`` eligible records' tie-break values
    """

    order_value: Any
    offset: int
    checksum: int

    def __post_init__(self) -> None:
        if isinstance(self.order_value, numbers.Number) and not _is_integer(self.order_value):
            raise InvalidArgument(
                f"Order value {self.order_value!r} cannot be carried by a token; "
                "use an integer, date or string primary field"
            )
        if self.offset < 1:
            raise InvalidArgument("Offset cannot be less than 1")
        if not 0 <= self.checksum <= _MAX_CHECKSUM:
            raise InvalidArgument("Checksum must be an unsigned 32-bit integer")

    def __str__(self) -> str:
        if _is_integer(self.order_value):
            order_part = to_base36(self.order_value)
        else:
            encoded = base64.b64encode(str(self.order_value).encode("utf-8")).decode("ascii")
            order_part = _STRING_PREFIX + encoded

        return TOKEN_DELIMITER.join([order_part, str(self.offset), to_base36(self.checksum)])

    @classmethod
    def parse(cls, token: str) -> PageToken:
        """Parse a token string.

        Raises:
            InvalidToken: If the string is not a well-formed token
            InvalidArgument: If the encoded offset is less than 1
        """
        parts = token.split(TOKEN_DELIMITER)
        if len(parts) != 3:
            raise InvalidToken("Malformed token")

        order_part, offset_part, checksum_part = parts

        if order_part.startswith(_STRING_PREFIX):
            try:
                raw = base64.b64decode(order_part[1:], validate=True)
                order_value: Any = raw.decode("utf-8")
            except (binascii.Error, UnicodeDecodeError) as e:
                raise InvalidToken(f"Malformed token order value: {e}") from e
        else:
            try:
                order_value = from_base36(order_part)
            except ValueError as e:
                raise InvalidToken(f"Malformed token order value: {e}") from e

        try:
            offset = int(offset_part)
            checksum = from_base36(checksum_part)
        except ValueError as e:
            raise InvalidToken(f"Malformed token: {e}") from e

        if not 0 <= checksum <= _MAX_CHECKSUM:
            raise InvalidToken("Malformed token checksum")

        return cls(order_value, offset, checksum)

    @classmethod
    def is_valid(cls, token: str) -> bool:
        """Cheap shape check used to decide whether parse() is worth trying."""
        parts = token.split(TOKEN_DELIMITER)
        if len(parts) != 3:
            return False

        order_part = parts[0]
        return order_part.startswith(_STRING_PREFIX) or bool(_PLAIN_ORDER_PART.match(order_part))

    @classmethod
    def from_string(cls, value: str | None) -> PageToken | None:
        """Parse a raw request value, returning None when absent or not token-shaped."""
        if not value or not cls.is_valid(value):
            return None
        return cls.parse(value)
