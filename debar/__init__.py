"""Read-only access to Unix ar(1) archives, such as Debian .deb packages."""

from debar.ar_reader import AR_MAGIC, ArMember, ArReader, check_magic, open
from debar.errors import ArError, FormatError, SourceError
from debar.header import HEADER_SIZE, ArHeader, parse_header
from debar.section import SectionReader
from debar.source import BufferSource, ByteSource, FileSource, as_source

__version__ = "0.1"

__all__ = [
    "AR_MAGIC",
    "HEADER_SIZE",
    "ArError",
    "ArHeader",
    "ArMember",
    "ArReader",
    "BufferSource",
    "ByteSource",
    "FileSource",
    "FormatError",
    "SectionReader",
    "SourceError",
    "as_source",
    "check_magic",
    "open",
    "parse_header",
]
