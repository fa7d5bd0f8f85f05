"""UTF-8 console writer.

Accepts text in any of the three representations, plus plain values, and
writes UTF-8 bytes to a byte sink.
"""

from dataclasses import dataclass
from numbers import Number
from typing import Any, Iterable, List, Optional

from ..codec.transcoder import Transcoder
from ..shared.config import WriterConfig
from .source import ByteSink


@dataclass(frozen=True)
class Utf16Text:
    """Text held as UTF-16 code units, for writing."""
    units: List[int]


@dataclass(frozen=True)
class Utf32Text:
    """Text held as code points, for writing."""
    code_points: List[int]


class ConsoleWriter:
    """Writes values to a byte sink as UTF-8.

    ``write`` returns the writer so calls can be chained::

        writer.write("total: ").write(42).end_line()
    """

    def __init__(
        self,
        sink: ByteSink,
        config: Optional[WriterConfig] = None,
        transcoder: Optional[Transcoder] = None,
    ) -> None:
        self.sink = sink
        self.config = config or WriterConfig()
        self.auto_flush = self.config.auto_flush
        self.bytes_written = 0
        self._transcoder = transcoder or Transcoder()

    def encode(self, value: Any) -> bytes:
        """Convert a value to the UTF-8 bytes ``write`` would emit.

        Raises:
            TypeError: For values that have no text form here
        """
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        if isinstance(value, str):
            return self._transcoder.utf32_to_utf8(value)
        if isinstance(value, Utf16Text):
            return self._transcoder.utf16_to_utf8(value.units)
        if isinstance(value, Utf32Text):
            return self._transcoder.utf32_to_utf8(value.code_points)
        # bool is a Number, so it must be checked first
        if isinstance(value, bool):
            return b"true" if value else b"false"
        if isinstance(value, Number):
            return str(value).encode("ascii")
        if isinstance(value, (list, tuple)):
            return self.config.line_separator.join(self.encode(item) for item in value)
        raise TypeError(f"Cannot write value of type {type(value).__name__}")

    def _emit(self, data: bytes) -> None:
        """Write non-empty output to the sink, flushing if auto_flush is set."""
        if data:
            self.sink.write(data)
            self.bytes_written += len(data)
        if self.auto_flush:
            self.sink.flush()

    def write(self, value: Any) -> "ConsoleWriter":
        """Write one value.

        ``bytes`` are written verbatim, text is encoded as UTF-8, booleans as
        ``true``/``false``, numbers through ``str()`` and lists or tuples
        item by item separated by newlines (no trailing newline).
        """
        self._emit(self.encode(value))
        return self

    def writeln(self, value: Any = b"") -> "ConsoleWriter":
        """Write a value followed by a newline."""
        self._emit(self.encode(value) + self.config.newline)
        return self

    def write_lines(self, lines: Iterable[Any]) -> "ConsoleWriter":
        """Write each item followed by a newline."""
        for line in lines:
            self.writeln(line)
        return self

    def end_line(self) -> "ConsoleWriter":
        """Write a newline and flush."""
        self._emit(self.config.newline)
        return self.flush()

    def flush(self) -> "ConsoleWriter":
        """Flush the sink."""
        self.sink.flush()
        return self
