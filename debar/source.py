"""Random access byte sources that archives are read from.

A source only has to answer one question: "give me up to N bytes starting at
offset O". Fewer bytes than asked for means the end of the data was reached;
anything else that goes wrong is a SourceError.
"""

import logging
import mmap
import threading
from abc import ABC, abstractmethod

from debar.errors import SourceError

logger = logging.getLogger(__name__)


def _check_range(offset: int, length: int):
    if offset < 0:
        raise ValueError(f"negative offset: {offset}")
    if length < 0:
        raise ValueError(f"negative length: {length}")


class ByteSource(ABC):
    """Abstract base class for read-only, random access byte sources."""

    @abstractmethod
    def read_at(self, offset: int, length: int) -> bytes:
        """Return up to `length` bytes starting at `offset`.

        The result is shorter than `length` only when the end of the data is
        reached, and empty when `offset` is at or past the end.

        Raises:
            SourceError: if the bytes could not be read.
        """
        pass

    def close(self):
        """Release the underlying data. The default does nothing."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, t, v, traceback):
        self.close()


class BufferSource(ByteSource):
    """Byte source over an in-memory buffer: bytes, bytearray or an mmap."""

    def __init__(self, buffer):
        self._buffer = memoryview(buffer)
        self._view = self._buffer.cast("B")
        self._closed = False

    def __len__(self) -> int:
        return len(self._view)

    def read_at(self, offset: int, length: int) -> bytes:
        _check_range(offset, length)
        if self._closed:
            raise SourceError("read from closed buffer source")
        return bytes(self._view[offset:offset + length])

    def close(self):
        # Releasing the view lets the caller close an mmap it handed us.
        if not self._closed:
            self._closed = True
            self._view.release()
            self._buffer.release()


class FileSource(ByteSource):
    """Byte source over a seekable binary file object.

    Each read is a seek() followed by read() calls, done under a lock so that
    several member readers (or several archive readers) may share the same
    file object.
    """

    def __init__(self, fileobj, owned: bool = False):
        """Initialize FileSource.

        Args:
            fileobj: a binary file object supporting seek() and read().
            owned: if true, close() also closes fileobj.
        """
        self.fileobj = fileobj
        self.owned = owned
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path) -> "FileSource":
        """Open the file at `path` for reading. The source owns the file."""
        logger.debug("opening %s", path)
        try:
            f = open(path, "rb")
        except OSError as e:
            raise SourceError(f"cannot open {path}: {e}") from e
        return cls(f, owned=True)

    def read_at(self, offset: int, length: int) -> bytes:
        _check_range(offset, length)
        chunks = []
        remaining = length
        with self._lock:
            try:
                self.fileobj.seek(offset)
                # Raw file objects may return less than asked for before EOF.
                while remaining > 0:
                    chunk = self.fileobj.read(remaining)
                    if not chunk:
                        break
                    chunks.append(chunk)
                    remaining -= len(chunk)
            except (OSError, ValueError) as e:
                raise SourceError(
                    f"failed to read {length} bytes at offset {offset}: {e}") from e
        return b"".join(chunks)

    def close(self):
        if self.owned:
            self.fileobj.close()


def as_source(obj) -> ByteSource:
    """Return a ByteSource for `obj`.

    Accepts an existing ByteSource, an in-memory buffer (bytes, bytearray,
    memoryview, mmap) or a seekable binary file object.
    """
    if isinstance(obj, ByteSource):
        return obj
    if isinstance(obj, (bytes, bytearray, memoryview, mmap.mmap)):
        return BufferSource(obj)
    if hasattr(obj, "read") and hasattr(obj, "seek"):
        return FileSource(obj)
    raise TypeError(f"cannot read an archive from {type(obj).__name__}")
