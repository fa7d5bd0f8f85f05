"""Tests for the incremental streaming reader."""

import io
import logging

import pytest

from utf8stream.shared.config import ReaderConfig
from utf8stream.shared.errors import EndOfInput, TokenParseError
from utf8stream.stream.reader import StreamingReader
from utf8stream.stream.source import BinaryStreamSource, BytesSource


def make_reader(data: bytes, **config_kwargs) -> StreamingReader:
    """Build a reader over in-memory bytes."""
    return StreamingReader(BytesSource(data), config=ReaderConfig(**config_kwargs))


class TestBufferManagement:
    """Test refills, cursor and buffer maintenance."""

    def test_initial_state(self):
        """Test a new reader holds nothing."""
        reader = make_reader(b"abc")
        assert reader.cursor == 0
        assert reader.buffered == 0
        assert reader.pending == 0

    def test_refill_stops_after_line_feed(self):
        """Test input is pulled a line at a time."""
        source = BytesSource(b"first\nsecond\n")
        reader = StreamingReader(source)

        # Act
        line = reader.read_line()

        # Assert
        assert line == b"first"
        assert source.remaining == len(b"second\n")
        assert reader.stats.refills == 1

    def test_refill_respects_chunk_size(self):
        """Test refills never exceed the configured chunk size."""
        reader = make_reader(b"abcdefg", chunk_size=3)

        assert reader.next_byte() == ord("a")
        assert reader.buffered == 3
        assert reader.read_word() == b"bcdefg"
        assert reader.stats.refills == 3
        assert reader.stats.bytes_read == 7

    def test_next_byte_end_marker(self):
        """Test None marks the end of input."""
        reader = make_reader(b"x")
        assert reader.next_byte() == ord("x")
        assert reader.next_byte() is None
        assert reader.next_byte() is None

    def test_at_end_does_not_consume(self):
        """Test at_end peeks without moving the cursor."""
        reader = make_reader(b"z")

        assert reader.at_end() is False
        assert reader.cursor == 0
        assert reader.next_byte() == ord("z")
        assert reader.at_end() is True

    def test_byte_at(self):
        """Test indexed access into the buffer."""
        reader = make_reader(b"hi\n")
        reader.next_byte()

        assert reader.byte_at(0) == ord("h")
        assert reader.byte_at(2) == ord("\n")
        with pytest.raises(IndexError):
            reader.byte_at(3)
        with pytest.raises(IndexError):
            reader.byte_at(-1)

    def test_clear(self):
        """Test clear discards buffered bytes and resets the cursor."""
        reader = make_reader(b"one two\nthree\n")
        reader.read_word()

        reader.clear()

        assert reader.cursor == 0
        assert reader.buffered == 0
        assert reader.read_line() == b"three"

    def test_compact_is_invisible(self):
        """Test compact drops consumed bytes only."""
        reader = make_reader(b"alpha beta\n")
        assert reader.read_word() == b"alpha"
        pending = reader.pending

        reader.compact()

        assert reader.cursor == 0
        assert reader.pending == pending
        assert reader.read_word() == b"beta"

    def test_context_manager_clears(self):
        """Test leaving the with block clears the buffer."""
        with make_reader(b"abc def\n") as reader:
            reader.read_word()
        assert reader.buffered == 0

    def test_end_of_input_logged(self, caplog):
        """Test end of input is logged at DEBUG."""
        reader = make_reader(b"")
        with caplog.at_level(logging.DEBUG, logger="utf8stream.stream.reader"):
            reader.next_byte()
        assert any("End of input" in record.message for record in caplog.records)


class TestReadWord:
    """Test word extraction."""

    def test_words_separated_by_whitespace_runs(self):
        """Test leading and repeated whitespace is skipped."""
        reader = make_reader(b"  hello   world\n")

        assert reader.read_word() == b"hello"
        assert reader.read_word() == b"world"
        assert reader.read_word() == b""

    def test_empty_input(self):
        """Test end of input yields an empty word."""
        assert make_reader(b"").read_word() == b""
        assert make_reader(b" \t\n ").read_word() == b""

    def test_trailing_space_left_in_stream(self):
        """Test the delimiter is left for the next read unless it is LF."""
        reader = make_reader(b"42 rest of line\nnext\n")

        assert reader.read_word() == b"42"
        assert reader.read_line() == b" rest of line"

    def test_trailing_newline_consumed(self):
        """Test a word-ending LF is swallowed so the next line is intact."""
        reader = make_reader(b"count\nline two\n")

        assert reader.read_word() == b"count"
        assert reader.read_line() == b"line two"

    def test_trailing_newline_kept_when_disabled(self):
        """Test swallow_trailing_newline=False leaves the LF."""
        reader = make_reader(b"count\nline two\n", swallow_trailing_newline=False)

        assert reader.read_word() == b"count"
        assert reader.read_line() == b""
        assert reader.read_line() == b"line two"

    def test_carriage_return_not_swallowed(self):
        """Test only a bare LF is consumed after a word."""
        reader = make_reader(b"word\r\nnext\n")

        assert reader.read_word() == b"word"
        assert reader.read_line() == b""
        assert reader.read_line() == b"next"

    def test_multibyte_word(self):
        """Test words containing non-ASCII UTF-8."""
        reader = make_reader("größe 世界\n".encode("utf-8"))
        assert reader.read_word() == "größe".encode("utf-8")
        assert reader.read_word_text() == "世界"

    def test_custom_whitespace(self):
        """Test a configured whitespace set."""
        reader = make_reader(b"a,b\nc", whitespace=b",\n")
        assert list(reader.iter_words()) == [b"a", b"b", b"c"]


class TestReadLine:
    """Test single line extraction."""

    def test_crlf_lines(self):
        """Test CR is dropped and a final unterminated line is returned."""
        reader = make_reader(b"abc\r\ndef")

        assert reader.read_line() == b"abc"
        assert reader.read_line() == b"def"
        assert reader.read_line() is None

    def test_empty_line_distinct_from_end(self):
        """Test an empty line is b'' while end of input is None."""
        reader = make_reader(b"\n")
        assert reader.read_line() == b""
        assert reader.read_line() is None

    def test_embedded_carriage_return_dropped(self):
        """Test CR anywhere in the line is removed."""
        assert make_reader(b"a\rb\n").read_line() == b"ab"

    def test_line_stats(self):
        """Test lines are counted."""
        reader = make_reader(b"a\nb\n")
        list(reader.iter_lines())
        assert reader.stats.lines == 2


class TestReadLines:
    """Test multi-line collection."""

    def test_stop_on_empty_line(self):
        """Test collection ends at the first empty line, which is not recorded."""
        reader = make_reader(b"a\nb\n\nc\n")

        # Act
        lines = reader.read_lines(stop_on_empty_line=True)

        # Assert
        assert lines == [b"a", b"b"]
        assert reader.read_line() == b"c"

    def test_until_end_of_input(self):
        """Test empty lines are kept when not stopping on them."""
        assert make_reader(b"a\n\nb\n").read_lines() == [b"a", b"", b"b"]

    def test_partial_last_line_recorded(self):
        """Test an unterminated final line is recorded."""
        assert make_reader(b"a\nb").read_lines() == [b"a", b"b"]

    def test_empty_input(self):
        """Test empty input yields no lines."""
        assert make_reader(b"").read_lines() == []

    def test_crlf_dropped(self):
        """Test CR bytes never appear in collected lines."""
        assert make_reader(b"x\r\ny\r\n").read_lines() == [b"x", b"y"]

    def test_stop_byte(self):
        """Test a custom stop byte records the line so far and stops."""
        reader = make_reader(b"x\ny;z\n")

        assert reader.read_lines(stop_byte=ord(";")) == [b"x", b"y"]
        assert reader.read_line() == b"z"

    def test_stop_byte_on_empty_line(self):
        """Test stop_on_empty_line applies to a stop byte at line start."""
        reader = make_reader(b"a\n;rest\n")
        assert reader.read_lines(stop_on_empty_line=True, stop_byte=ord(";")) == [b"a"]

    def test_stop_byte_never_seen(self):
        """Test end of input still terminates collection."""
        assert make_reader(b"a\nb\n").read_lines(stop_byte=ord("#")) == [b"a", b"b"]

    @pytest.mark.parametrize("stop_byte", [-1, 256])
    def test_invalid_stop_byte(self, stop_byte):
        """Test stop bytes must be byte values."""
        with pytest.raises(ValueError, match="stop_byte"):
            make_reader(b"a\n").read_lines(stop_byte=stop_byte)


class TestDecodedVariants:
    """Test UTF-16, UTF-32 and str read variants."""

    def test_word_variants(self):
        """Test words decoded to units and code points."""
        reader = make_reader("\U0001F600 é\n".encode("utf-8"))

        assert reader.read_word_utf16() == [0xD83D, 0xDE00]
        assert reader.read_word_utf32() == [0xE9]

    def test_line_variants(self):
        """Test lines decoded, with None at end of input."""
        reader = make_reader("€\nab\nz".encode("utf-8"))

        assert reader.read_line_utf16() == [0x20AC]
        assert reader.read_line_utf32() == [0x61, 0x62]
        assert reader.read_line_text() == "z"
        assert reader.read_line_text() is None
        assert reader.read_line_utf16() is None
        assert reader.read_line_utf32() is None

    def test_lines_variants(self):
        """Test collected lines decoded."""
        data = "α\nβ\n\nγ\n".encode("utf-8")

        assert make_reader(data).read_lines_text(stop_on_empty_line=True) == ["α", "β"]
        assert make_reader(data).read_lines_utf16() == [[0x3B1], [0x3B2], [], [0x3B3]]
        assert make_reader(data).read_lines_utf32(stop_byte=0x0A) == [[0x3B1]]

    def test_malformed_bytes_are_replaced(self):
        """Test decoded reads never fail on malformed input."""
        reader = make_reader(b"ok\xff\n")
        assert reader.read_line_text() == "ok�"


class TestTypedExtraction:
    """Test read_value and its shortcuts."""

    def test_numbers_and_text(self):
        """Test conversion of consecutive tokens."""
        reader = make_reader("12 -3.5 héllo raw\n".encode("utf-8"))

        assert reader.read_int() == 12
        assert reader.read_float() == -3.5
        assert reader.read_value(str) == "héllo"
        assert reader.read_value(bytes) == b"raw"

    def test_parse_failure_is_recoverable(self, caplog):
        """Test a failed conversion consumes the token and is logged."""
        reader = make_reader(b"abc 7\n")

        with caplog.at_level(logging.WARNING, logger="utf8stream.stream.reader"):
            with pytest.raises(TokenParseError) as exc_info:
                reader.read_int()

        assert exc_info.value.token == b"abc"
        assert exc_info.value.target == "int"
        assert reader.stats.parse_errors == 1
        assert "Parse error" in caplog.text
        assert reader.read_int() == 7

    def test_non_ascii_number(self):
        """Test non-ASCII tokens fail numeric conversion."""
        with pytest.raises(TokenParseError):
            make_reader("١٢".encode("utf-8")).read_int()

    def test_end_of_input(self):
        """Test typed reads at end of input raise EndOfInput."""
        reader = make_reader(b"   \n")
        with pytest.raises(EndOfInput):
            reader.read_int()

    def test_unsupported_kind_consumes_nothing(self):
        """Test unsupported target types are rejected up front."""
        reader = make_reader(b"token\n")

        with pytest.raises(TypeError, match="Unsupported type"):
            reader.read_value(list)

        assert reader.read_word() == b"token"

    def test_read_char_consumes_whole_word(self):
        """Test read_char returns the first character of each word."""
        reader = make_reader("é-tail \U0001F600x\nlast".encode("utf-8"))

        assert reader.read_char() == "é"
        assert reader.read_char() == "\U0001F600"
        assert reader.read_word() == b"last"

    def test_read_char_damaged_lead(self):
        """Test a word starting with malformed bytes yields U+FFFD."""
        reader = make_reader(b"\xc0\x80ok next\n")

        assert reader.read_char() == "\ufffd"
        assert reader.read_word() == b"next"

    def test_read_char_end_of_input(self):
        """Test read_char at end of input raises EndOfInput."""
        reader = make_reader(b" \n")
        with pytest.raises(EndOfInput):
            reader.read_char()


class TestIteration:
    """Test generators and binary stream sources."""

    def test_iter_words(self):
        """Test word iteration until end of input."""
        reader = make_reader(b"one two\nthree\n\n")
        assert list(reader.iter_words()) == [b"one", b"two", b"three"]
        assert reader.stats.words == 3

    def test_iter_lines_via_iter(self):
        """Test iterating the reader yields lines."""
        reader = make_reader(b"a\r\nb\n")
        assert list(reader) == [b"a", b"b"]

    def test_binary_stream_source(self):
        """Test reading from a binary file-like object."""
        reader = StreamingReader(BinaryStreamSource(io.BytesIO(b"x y\nz\n")))

        assert reader.read_word() == b"x"
        assert reader.read_lines() == [b" y", b"z"]
