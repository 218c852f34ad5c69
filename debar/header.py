"""Decoder for the fixed size header in front of every ar member.

+--------+--------+------------------------------+---------------+
| Offset | Length | Name                         | Format        |
+--------+--------+------------------------------+---------------+
| 0      | 16     | File name                    | ASCII         |
| 16     | 12     | File modification timestamp  | Decimal       |
| 28     | 6      | Owner ID                     | Decimal       |
| 34     | 6      | Group ID                     | Decimal       |
| 40     | 8      | File mode                    | Octal (text)  |
| 48     | 10     | File size in bytes           | Decimal       |
| 58     | 2      | Header terminator            | 0x60 0x0A     |
+--------+--------+------------------------------+---------------+

All fields are space padded. Some archivers leave numeric fields blank; those
decode to 0.
"""

import re
from dataclasses import dataclass
from typing import Optional

from debar.errors import FormatError

HEADER_SIZE = 60
HEADER_TERMINATOR = b"\x60\x0a"

_DECIMAL = re.compile(rb"[+-]?[0-9]+")

_NAME_FIELD = ("name", 0, 16)
_MODE_FIELD = ("mode", 40, 48)
# Decimal fields, in header order: (attribute, start, end).
_NUMERIC_FIELDS = (
    ("timestamp", 16, 28),
    ("owner_id", 28, 34),
    ("group_id", 34, 40),
    ("size", 48, 58),
)


@dataclass(frozen=True)
class ArHeader:
    """Metadata of one archive member.

    Attributes:
      name: member name, with the SysV/GNU trailing '/' removed.
      timestamp: modification time, in seconds since the epoch.
      owner_id: numeric id of the user owning the file.
      group_id: numeric id of the group owning the file.
      mode: unix permission mode, as the octal digits found in the archive.
      size: size of the member data, in bytes.
    """
    name: str
    timestamp: int = 0
    owner_id: int = 0
    group_id: int = 0
    mode: str = ""
    size: int = 0


def parse_decimal(field: str, raw: bytes) -> Optional[int]:
    """Parse a space padded decimal field.

    Returns:
      the value, or None if the field is blank.
    Raises:
      FormatError: if the field holds anything but a decimal number.
    """
    text = bytes(raw).strip()
    if not text:
        return None
    if not _DECIMAL.fullmatch(text):
        raise FormatError(f"failed to parse entry {field}: {text!r} is not a decimal number")
    return int(text)


def _parse_text(field: str, raw: bytes) -> str:
    try:
        return bytes(raw).decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise FormatError(f"failed to parse entry {field}: {e}") from e


def parse_header(line: bytes) -> ArHeader:
    """Decode a 60 byte member header.

    Raises:
      FormatError: on a wrong length, bad terminator, or unparsable field.
    """
    if len(line) != HEADER_SIZE:
        raise FormatError(
            f"malformed file entry line length: expected {HEADER_SIZE} bytes, got {len(line)}")
    line = bytes(line)
    if line[58:60] != HEADER_TERMINATOR:
        raise FormatError(
            f"malformed file entry line endings: expected {HEADER_TERMINATOR!r}, got {line[58:60]!r}")

    field, start, end = _NAME_FIELD
    name = _parse_text(field, line[start:end])
    if name.endswith("/"):  # SysV variant
        name = name[:-1]
    field, start, end = _MODE_FIELD
    mode = _parse_text(field, line[start:end])

    values = {}
    for field, start, end in _NUMERIC_FIELDS:
        value = parse_decimal(field, line[start:end])
        values[field] = 0 if value is None else value
    if values["size"] < 0:
        raise FormatError(f"failed to parse entry size: negative size {values['size']}")

    return ArHeader(name=name, mode=mode, **values)
