"""Byte sources and sinks used by the streaming reader and console writer.

The reader only needs "give me the next byte, or tell me the input is over";
the writer only needs "write these bytes verbatim". Adapters for binary
file-like objects, in-memory buffers and the process standard streams are
provided.
"""

import sys
from typing import BinaryIO, Optional, Protocol, runtime_checkable

from ..codec.core import ByteData


@runtime_checkable
class ByteSource(Protocol):
    """Anything that yields raw input bytes one at a time."""

    def read_byte(self) -> Optional[int]:
        """Return the next byte, or None once the source is exhausted."""
        ...


@runtime_checkable
class ByteSink(Protocol):
    """Anything that accepts raw output bytes."""

    def write(self, data: bytes) -> None:
        """Write ``data`` verbatim."""
        ...

    def flush(self) -> None:
        """Push buffered bytes to the underlying device."""
        ...


class BytesSource:
    """Byte source over an in-memory buffer."""

    def __init__(self, data: ByteData) -> None:
        self._data = bytes(data)
        self._position = 0

    def read_byte(self) -> Optional[int]:
        """Return the next buffered byte, or None past the end."""
        if self._position >= len(self._data):
            return None
        byte = self._data[self._position]
        self._position += 1
        return byte

    @property
    def remaining(self) -> int:
        """Bytes not yet handed out."""
        return len(self._data) - self._position


class BinaryStreamSource:
    """Byte source over a binary file-like object (file, pipe, console)."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def read_byte(self) -> Optional[int]:
        """Read one byte from the stream; an empty read means end of input."""
        chunk = self._stream.read(1)
        if not chunk:
            return None
        if isinstance(chunk, str):
            raise TypeError("BinaryStreamSource requires a binary stream")
        return chunk[0]


class BinaryStreamSink:
    """Byte sink over a binary writable file-like object."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def write(self, data: bytes) -> None:
        """Write ``data`` to the stream."""
        self._stream.write(data)

    def flush(self) -> None:
        """Flush the stream."""
        self._stream.flush()


class BufferSink:
    """Byte sink collecting output in memory."""

    def __init__(self) -> None:
        self._buffer = bytearray()
        self.flush_count = 0

    def write(self, data: bytes) -> None:
        """Append ``data`` to the buffer."""
        self._buffer.extend(data)

    def flush(self) -> None:
        """Count the flush; the bytes are already in memory."""
        self.flush_count += 1

    def getvalue(self) -> bytes:
        """All bytes written so far."""
        return bytes(self._buffer)


def standard_input_source() -> BinaryStreamSource:
    """Byte source reading the process standard input."""
    return BinaryStreamSource(sys.stdin.buffer)


def standard_output_sink() -> BinaryStreamSink:
    """Byte sink writing to the process standard output."""
    return BinaryStreamSink(sys.stdout.buffer)
