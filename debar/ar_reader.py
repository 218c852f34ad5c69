"""Reader for the ar archive format (used in .deb packages).

This reads the common ("System V") variant described in
https://en.wikipedia.org/wiki/Ar_(Unix), without loading member data: each
member comes with a bounded reader over its bytes in the source.

Usage:
    with ArReader.open("foo.deb") as ar:
        while True:
            member = ar.next()
            if member is None:
                break
            print(member.name, member.size)
or
    for member in debar.open(data):
        content = member.data().read()

Upon a malformed archive, the reader raises FormatError.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Iterator, Optional

from debar.errors import FormatError
from debar.header import HEADER_SIZE, ArHeader, parse_header
from debar.section import SectionReader
from debar.source import ByteSource, FileSource, as_source

logger = logging.getLogger(__name__)

AR_MAGIC = b"!<arch>\n"


@dataclass(frozen=True)
class ArMember(ArHeader):
    """An archive member: its header plus where its data lives.

    Attributes:
      offset: absolute offset of the first data byte in the source.
      source: the byte source the archive is read from. Shared, not copied.
    """
    offset: int = 0
    source: Optional[ByteSource] = field(default=None, repr=False, compare=False)

    @property
    def data_range(self):
        """(offset, length) of the member data in the source."""
        return (self.offset, self.size)

    def data(self) -> SectionReader:
        """Return a new reader over the member data."""
        if self.source is None:
            raise ValueError(f"member {self.name!r} has no byte source to read from")
        return SectionReader(self.source, self.offset, self.size)


def check_magic(source: ByteSource) -> int:
    """Check that `source` starts with the ar magic string.

    Returns:
      the number of bytes consumed, which is where the first header starts.
    Raises:
      FormatError: if the source is not an ar archive.
    """
    magic = source.read_at(0, len(AR_MAGIC))
    if len(magic) < len(AR_MAGIC):
        raise FormatError(
            f"not an ar archive: short read of {len(magic)} bytes, expected {len(AR_MAGIC)}")
    if magic != AR_MAGIC:
        raise FormatError(f"not an ar archive: expected magic {AR_MAGIC!r}, got {magic!r}")
    logger.debug("found ar magic")
    return len(magic)


class ArReader:
    """Sequential reader over the members of an ar archive."""

    def __init__(self, source):
        """Initialize ArReader and validate the archive magic.

        Args:
            source: a ByteSource, a buffer, or a seekable binary file object.
        Raises:
            FormatError: if the source is not an ar archive.
        """
        self.source = as_source(source)
        self.offset = check_magic(self.source)
        self.done = False
        self.failed = False
        self._owns_source = False

    @classmethod
    def open(cls, path) -> "ArReader":
        """Open the archive at `path`. close() closes the file."""
        source = FileSource.open(path)
        try:
            reader = cls(source)
        except Exception:
            source.close()
            raise
        reader._owns_source = True
        return reader

    def next(self) -> Optional[ArMember]:
        """Return the next member, or None at the end of the archive."""
        if self.done:
            return None
        if self.failed:
            raise FormatError(f"archive reader already failed near offset {self.offset}")
        try:
            member = self._read_member()
        except FormatError:
            self.failed = True
            raise
        if member is None:
            self.done = True
        return member

    def _read_member(self) -> Optional[ArMember]:
        line = self.source.read_at(self.offset, HEADER_SIZE)
        # Some archives end with a blank line.
        if not line or line == b"\n":
            logger.debug("end of archive at offset %d", self.offset)
            return None
        if len(line) != HEADER_SIZE:
            raise FormatError(
                f"short read at end of archive: expected {HEADER_SIZE} byte header "
                f"at offset {self.offset}, got {len(line)} bytes")
        header = parse_header(line)

        data_offset = self.offset + HEADER_SIZE
        member = ArMember(
            **dataclasses.asdict(header), offset=data_offset, source=self.source)
        # Member data is padded to an even size.
        self.offset = data_offset + header.size + header.size % 2
        logger.debug("member %r: %d bytes at offset %d", member.name, member.size, data_offset)
        return member

    def __iter__(self) -> Iterator[ArMember]:
        while True:
            member = self.next()
            if member is None:
                return
            yield member

    def is_done(self) -> bool:
        """Return True if all members have been read."""
        return self.done

    def close(self):
        """Close the source, if this reader opened it."""
        if self._owns_source:
            self.source.close()

    def __enter__(self):
        return self

    def __exit__(self, t, v, traceback):
        self.close()


def open(source) -> ArReader:
    """Open an ar archive from a path, a buffer, a file object or a ByteSource."""
    if isinstance(source, (str, os.PathLike)):
        return ArReader.open(source)
    return ArReader(source)
