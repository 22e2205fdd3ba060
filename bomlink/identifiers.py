"""Local Part Number (LPN) helpers.

An LPN looks like ``KL-00123-A3F142``: a two-letter prefix, a five-digit
sequence number reserved from the shared counter and a six-digit hex hash
of the manufacturer part number.

The hash must stay stable: identifiers already issued embed it. It is a
31-multiplier rolling hash over UTF-16 code units, folded to a signed
32-bit integer, and must not be changed or strengthened.
"""

import re
from typing import Any, Mapping, NamedTuple, Optional, Sequence

from .schema import IDENTIFIER_FIELD, LPN_PREFIX, MAX_SEQUENCE, MIN_SEQUENCE, MPN_FIELDS

_INT32_MASK = 0xFFFFFFFF


class IdentifierParts(NamedTuple):
    prefix: str
    sequence: int
    hash: str


def generate_part_hash(key: Optional[str]) -> str:
    """Six uppercase hex digits derived from a part key.

    The key is trimmed and uppercased first, so casing and surrounding
    whitespace never change the result. An empty key hashes to ``"000000"``.
    """
    if not key or not isinstance(key, str):
        return "000000"

    normalized = key.strip().upper()
    encoded = normalized.encode("utf-16-le")

    h = 0
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = (h * 31 + code_unit) & _INT32_MASK

    if h & 0x80000000:
        h -= 0x100000000
    return format(abs(h), "X").zfill(6)[-6:]


def format_sequence(sequence: int) -> str:
    """Zero-pad a sequence number to five digits.

    Raises:
        ValueError: If the number is outside 1..99999
    """
    try:
        number = int(sequence)
    except (TypeError, ValueError):
        raise ValueError(f"Sequence number must be an integer, got {sequence!r}")
    if number < MIN_SEQUENCE or number > MAX_SEQUENCE:
        raise ValueError(f"Sequence number must be between {MIN_SEQUENCE} and {MAX_SEQUENCE}")
    return f"{number:05d}"


def assemble_identifier(sequence: int, part_hash: str, prefix: str = LPN_PREFIX) -> str:
    return f"{prefix}-{format_sequence(sequence)}-{part_hash}"


def _pattern(prefix: str):
    return re.compile(r"^" + re.escape(prefix) + r"-(\d{5})-([0-9A-F]{6})$")


def validate_identifier_format(identifier: Optional[str], prefix: str = LPN_PREFIX) -> bool:
    if not identifier or not isinstance(identifier, str):
        return False
    return _pattern(prefix).match(identifier) is not None


def parse_identifier(identifier: Optional[str], prefix: str = LPN_PREFIX) -> Optional[IdentifierParts]:
    """Split an LPN into prefix, sequence and hash; None if malformed."""
    if not identifier or not isinstance(identifier, str):
        return None
    match = _pattern(prefix).match(identifier.strip())
    if not match:
        return None
    return IdentifierParts(prefix=prefix, sequence=int(match.group(1)), hash=match.group(2))


def has_identifier(record: Optional[Mapping[str, Any]], identifier_field: str = IDENTIFIER_FIELD) -> bool:
    if not record:
        return False
    value = record.get(identifier_field)
    return bool(value and str(value).strip())


def is_field_locked(
    field_name: str,
    record: Optional[Mapping[str, Any]],
    key_fields: Optional[Sequence[str]] = None,
    identifier_field: str = IDENTIFIER_FIELD,
) -> bool:
    """True if ``field_name`` is a part-number field on a record that has an LPN."""
    if not has_identifier(record, identifier_field):
        return False
    return field_name in (key_fields or MPN_FIELDS)


def can_edit_field(
    field_name: str,
    record: Optional[Mapping[str, Any]],
    key_fields: Optional[Sequence[str]] = None,
    identifier_field: str = IDENTIFIER_FIELD,
) -> bool:
    return not is_field_locked(field_name, record, key_fields, identifier_field)
