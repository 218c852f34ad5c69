"""Bounded reader over a byte range of a ByteSource."""

import io

from debar.source import ByteSource


class SectionReader(io.RawIOBase):
    """A read-only, seekable file object over [offset, offset + length).

    Reads never go past the end of the section, even when the underlying
    source holds more data. The position is private to the reader, so any
    number of readers may share one source.
    """

    def __init__(self, source: ByteSource, offset: int, length: int):
        super().__init__()
        if offset < 0 or length < 0:
            raise ValueError(f"invalid section: offset={offset}, length={length}")
        self.source = source
        self.offset = offset
        self.length = length
        self._pos = 0

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed section reader")
        n = min(len(b), self.length - self._pos)
        if n <= 0:
            return 0
        data = self.source.read_at(self.offset + self._pos, n)
        # A short read here means the source itself is truncated.
        b[:len(data)] = data
        self._pos += len(data)
        return len(data)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed section reader")
        if whence == io.SEEK_SET:
            pos = offset
        elif whence == io.SEEK_CUR:
            pos = self._pos + offset
        elif whence == io.SEEK_END:
            pos = self.length + offset
        else:
            raise ValueError(f"invalid whence: {whence}")
        if pos < 0:
            raise ValueError(f"negative seek position {pos}")
        self._pos = pos
        return pos

    def tell(self) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed section reader")
        return self._pos
