"""Incremental UTF-8 text reader over a byte source.

The reader pulls raw bytes from its source only when it runs out of buffered
input, so it works the same whether input arrives from a file, a pipe or a
console that delivers one line at a time. Tokenization (words, lines, line
collections) happens on bytes; decoded variants transcode the byte result
leniently afterwards.

Buffer model: bytes before ``cursor`` have been consumed, bytes from
``cursor`` onward are pending. Refills only ever append.
"""

from typing import Generator, List, Optional, Type, TypeVar

from ..codec.transcoder import Transcoder, Utf16Sequence, Utf32Sequence
from ..shared.config import ReaderConfig
from ..shared.errors import EndOfInput, TokenParseError
from ..shared.logging import get_logger
from ..shared.result import ReaderStats
from .source import ByteSource

T = TypeVar("T", bytes, str, int, float)

_NUMERIC_KINDS = (int, float)


class StreamingReader:
    """Buffered reader exposing word, line and multi-line extraction.

    Not thread-safe: one reader serves one logical input stream and must be
    used from one thread at a time.
    """

    def __init__(
        self,
        source: ByteSource,
        config: Optional[ReaderConfig] = None,
        transcoder: Optional[Transcoder] = None,
        stream_id: Optional[str] = None,
    ) -> None:
        """Initialize the reader.

        Args:
            source: Where raw bytes come from
            config: Reader configuration (chunk size, whitespace set)
            transcoder: Transcoder used by the decoded read variants
            stream_id: Identifier attached to log records
        """
        self.source = source
        self.config = config or ReaderConfig()
        self.stats = ReaderStats()
        self._transcoder = transcoder or Transcoder()
        self._whitespace = frozenset(self.config.whitespace)
        self._newline = self.config.newline
        self._carriage_return = self.config.carriage_return
        self._buffer = bytearray()
        self._cursor = 0
        self.logger = get_logger(__name__, stream_id, "streaming_reader")

    # Buffer state

    @property
    def cursor(self) -> int:
        """Offset of the next unconsumed byte in the buffer."""
        return self._cursor

    @property
    def buffered(self) -> int:
        """Total bytes held in the buffer, consumed or not."""
        return len(self._buffer)

    @property
    def pending(self) -> int:
        """Bytes pulled from the source but not yet consumed."""
        return len(self._buffer) - self._cursor

    def byte_at(self, index: int) -> int:
        """Return the buffered byte at ``index``.

        Raises:
            IndexError: If ``index`` is outside the buffer
        """
        if not 0 <= index < len(self._buffer):
            raise IndexError(
                f"buffer index {index} out of range (buffered={len(self._buffer)})"
            )
        return self._buffer[index]

    def clear(self) -> None:
        """Discard all buffered bytes and reset the cursor."""
        self.logger.debug(
            "Clearing reader buffer",
            extra={"buffered": len(self._buffer), "cursor": self._cursor}
        )
        self._buffer = bytearray()
        self._cursor = 0

    close = clear

    def compact(self) -> None:
        """Drop consumed bytes from the buffer.

        Pending bytes and all future reads are unaffected.
        """
        if self._cursor:
            del self._buffer[:self._cursor]
            self._cursor = 0

    def __enter__(self) -> "StreamingReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.clear()

    # Byte level

    def _refill(self) -> bool:
        """Append up to one chunk from the source.

        Stops early after a line feed so interactive input is handed over a
        line at a time.

        Returns:
            False if the source produced no bytes (end of input)
        """
        chunk = bytearray()
        for _ in range(self.config.chunk_size):
            byte = self.source.read_byte()
            if byte is None:
                break
            chunk.append(byte)
            if byte == self._newline:
                break

        if not chunk:
            self.logger.debug("End of input reached", extra={"cursor": self._cursor})
            return False

        self._buffer.extend(chunk)
        self.stats.refills += 1
        self.stats.bytes_read += len(chunk)
        self.logger.debug("Buffer refilled", extra={"chunk_size": len(chunk)})
        return True

    def next_byte(self) -> Optional[int]:
        """Consume and return the next byte, refilling on demand.

        Returns:
            The byte value, or None at end of input
        """
        if self._cursor >= len(self._buffer):
            if not self._refill():
                return None
        byte = self._buffer[self._cursor]
        self._cursor += 1
        return byte

    def _unread(self) -> None:
        """Step back over the byte just consumed."""
        self._cursor -= 1

    def at_end(self) -> bool:
        """Return True if no further bytes can be read.

        May block on the source to find out; consumes nothing.
        """
        if self._cursor < len(self._buffer):
            return False
        return not self._refill()

    # Tokenization

    def read_word(self) -> bytes:
        """Read the next whitespace-delimited word.

        Leading whitespace is skipped. The whitespace byte ending the word is
        left in place unless it is a line feed, which is consumed so that a
        following line read starts on the next line.

        Returns:
            The word, or ``b""`` at end of input
        """
        byte = self.next_byte()
        while byte is not None and byte in self._whitespace:
            byte = self.next_byte()
        if byte is None:
            return b""
        self._unread()

        word = bytearray()
        while True:
            byte = self.next_byte()
            if byte is None:
                break
            if byte in self._whitespace:
                if byte != self._newline or not self.config.swallow_trailing_newline:
                    self._unread()
                break
            word.append(byte)

        self.stats.words += 1
        return bytes(word)

    def read_line(self) -> Optional[bytes]:
        """Read up to the next line feed.

        Carriage returns are dropped and the line feed is not included.

        Returns:
            The line, or None if the input was already exhausted
        """
        byte = self.next_byte()
        if byte is None:
            return None

        line = bytearray()
        while byte is not None and byte != self._newline:
            if byte != self._carriage_return:
                line.append(byte)
            byte = self.next_byte()

        self.stats.lines += 1
        return bytes(line)

    def read_lines(
        self,
        stop_on_empty_line: bool = False,
        stop_byte: Optional[int] = None,
    ) -> List[bytes]:
        """Collect lines until a terminating condition.

        Args:
            stop_on_empty_line: Stop at the first empty line, without
                recording it
            stop_byte: Byte that ends the current line and the whole
                collection; the line so far is recorded first

        Returns:
            Lines in read order. Reading also stops at end of input, where a
            non-empty partial line is recorded.
        """
        if stop_byte is not None and not 0 <= stop_byte <= 0xFF:
            raise ValueError(f"stop_byte must be a byte value, got {stop_byte}")

        lines: List[bytes] = []
        line = bytearray()
        while True:
            byte = self.next_byte()
            if byte is None:
                if line:
                    lines.append(bytes(line))
                break
            if byte == self._carriage_return:
                continue
            if byte == self._newline or byte == stop_byte:
                if stop_on_empty_line and not line:
                    break
                lines.append(bytes(line))
                line = bytearray()
                if byte == stop_byte:
                    break
            else:
                line.append(byte)

        self.stats.lines += len(lines)
        return lines

    def iter_words(self) -> Generator[bytes, None, None]:
        """Yield words until end of input."""
        while True:
            word = self.read_word()
            if not word:
                return
            yield word

    def iter_lines(self) -> Generator[bytes, None, None]:
        """Yield lines until end of input."""
        while True:
            line = self.read_line()
            if line is None:
                return
            yield line

    def __iter__(self) -> Generator[bytes, None, None]:
        return self.iter_lines()

    # Decoded variants

    def read_word_utf16(self) -> Utf16Sequence:
        """Read a word as UTF-16 units."""
        return self._transcoder.utf8_to_utf16(self.read_word())

    def read_word_utf32(self) -> Utf32Sequence:
        """Read a word as code points."""
        return self._transcoder.utf8_to_utf32(self.read_word())

    def read_word_text(self) -> str:
        """Read a word as ``str``."""
        return self._transcoder.utf8_to_text(self.read_word())

    def read_line_utf16(self) -> Optional[Utf16Sequence]:
        """Read a line as UTF-16 units; None at end of input."""
        line = self.read_line()
        return None if line is None else self._transcoder.utf8_to_utf16(line)

    def read_line_utf32(self) -> Optional[Utf32Sequence]:
        """Read a line as code points; None at end of input."""
        line = self.read_line()
        return None if line is None else self._transcoder.utf8_to_utf32(line)

    def read_line_text(self) -> Optional[str]:
        """Read a line as ``str``; None at end of input."""
        line = self.read_line()
        return None if line is None else self._transcoder.utf8_to_text(line)

    def read_lines_utf16(
        self, stop_on_empty_line: bool = False, stop_byte: Optional[int] = None
    ) -> List[Utf16Sequence]:
        """:meth:`read_lines` with each line as UTF-16 units."""
        return [
            self._transcoder.utf8_to_utf16(line)
            for line in self.read_lines(stop_on_empty_line, stop_byte)
        ]

    def read_lines_utf32(
        self, stop_on_empty_line: bool = False, stop_byte: Optional[int] = None
    ) -> List[Utf32Sequence]:
        """:meth:`read_lines` with each line as code points."""
        return [
            self._transcoder.utf8_to_utf32(line)
            for line in self.read_lines(stop_on_empty_line, stop_byte)
        ]

    def read_lines_text(
        self, stop_on_empty_line: bool = False, stop_byte: Optional[int] = None
    ) -> List[str]:
        """:meth:`read_lines` with each line as ``str``."""
        return [
            self._transcoder.utf8_to_text(line)
            for line in self.read_lines(stop_on_empty_line, stop_byte)
        ]

    # Typed extraction

    def read_value(self, kind: Type[T]) -> T:
        """Read the next word and convert it to ``kind``.

        The word is consumed whether or not conversion succeeds.

        Args:
            kind: One of ``bytes``, ``str``, ``int`` or ``float``

        Returns:
            The converted value

        Raises:
            TypeError: If ``kind`` is not supported (nothing is consumed)
            EndOfInput: If the input is exhausted
            TokenParseError: If the word does not parse as ``kind``
        """
        if kind not in (bytes, str) + _NUMERIC_KINDS:
            raise TypeError(f"Unsupported type for parsing: {kind!r}")

        token = self.read_word()
        if not token:
            raise EndOfInput("No token available: input exhausted")
        if kind is bytes:
            return token
        if kind is str:
            return self._transcoder.utf8_to_text(token)

        try:
            return kind(token.decode("ascii"))
        except (UnicodeDecodeError, ValueError) as e:
            self.stats.parse_errors += 1
            self.logger.warning(
                f"Parse error at token {token!r}: {e}",
                extra={"target": kind.__name__}
            )
            raise TokenParseError(token, kind.__name__, str(e)) from e

    def read_int(self) -> int:
        """Read the next word as an integer."""
        return self.read_value(int)

    def read_float(self) -> float:
        """Read the next word as a float."""
        return self.read_value(float)

    def read_char(self) -> str:
        """Read the next word and return its first character.

        The whole word is consumed. Malformed bytes decode to U+FFFD, so a
        word starting with a damaged sequence yields ``"\\ufffd"``.

        Raises:
            EndOfInput: If the input is exhausted
        """
        token = self.read_word()
        if not token:
            raise EndOfInput("No token available: input exhausted")
        return self._transcoder.utf8_to_text(token)[0]

