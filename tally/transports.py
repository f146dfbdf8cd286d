"""In-memory transports used to size and decode serialized metric batches."""

from __future__ import annotations

MAX_UINT64 = (1 << 64) - 1


class CalcTransport:
    """A write-only transport that counts the bytes written to it.

    Writing a serialized element through it tells how large that element
    is on the wire, without keeping any of the data.
    """

    def __init__(self) -> None:
        self.count = 0
        self.closed = False

    def write(self, buf: bytes | bytearray | memoryview) -> int:
        """Count ``buf`` and return its length."""
        size = len(memoryview(buf).cast("B"))
        self.count += size
        return size

    def write_byte(self, byte: int) -> None:
        """Count a single byte."""
        self.count += 1

    def write_string(self, s: str) -> int:
        """Count the UTF-8 encoding of ``s`` and return its length in bytes."""
        size = len(s.encode("utf-8"))
        self.count += size
        return size

    def reset_count(self) -> None:
        """Set the byte count back to zero."""
        self.count = 0

    def read(self, size: int) -> bytes:
        """Nothing is ever read back; always empty.

        Raises ValueError for a negative ``size``.
        """
        if size < 0:
            raise ValueError("size must not be negative")
        return bytes(0)

    def read_byte(self) -> int:
        """Nothing is ever read back; always zero."""
        return 0

    def remaining_bytes(self) -> int:
        """Unknown, so the largest unsigned 64-bit value."""
        return MAX_UINT64

    def is_open(self) -> bool:
        """Always open: there is no connection behind it."""
        return True

    def open(self) -> None:
        """Mark the transport as in use; there is no connection to open."""
        self.closed = False

    def close(self) -> None:
        """Mark the transport as finished; the count is kept."""
        self.closed = True

    def flush(self) -> int:
        """Nothing is buffered; return the bytes counted so far."""
        return self.count


class BufferedReadTransport:
    """A transport that reads from an in-memory buffer."""

    def __init__(self, data: bytes | bytearray = b"") -> None:
        self._data = bytes(data)
        self._pos = 0
        self.closed = False

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes.

        Raises EOFError when the buffer is exhausted and bytes were asked for.
        """
        if self._pos >= len(self._data):
            if size == 0:
                return b""
            raise EOFError("end of file")
        chunk = self._data[self._pos:self._pos + size]
        self._pos += len(chunk)
        return chunk

    def remaining_bytes(self) -> int:
        """Number of bytes left to read."""
        return len(self._data) - self._pos

    def write(self, buf: bytes | bytearray) -> int:
        """Replace the buffer with ``buf`` and return its length."""
        self._data = bytes(buf)
        self._pos = 0
        return len(self._data)

    def is_open(self) -> bool:
        """Always open: there is no connection behind it."""
        return True

    def open(self) -> None:
        """Mark the transport as in use; there is no connection to open."""
        self.closed = False

    def close(self) -> None:
        """Mark the transport as finished; unread bytes stay readable."""
        self.closed = True

    def flush(self) -> None:
        """Nothing is written back; drop the bytes already read."""
        self._data = self._data[self._pos:]
        self._pos = 0