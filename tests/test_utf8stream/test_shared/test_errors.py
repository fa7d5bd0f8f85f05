"""Tests for the exception hierarchy."""

import pytest

from utf8stream.shared.errors import (
    ConsoleCodePageError,
    EndOfInput,
    MalformedSequenceError,
    TokenParseError,
    Utf8StreamError,
)


class TestMalformedSequenceError:
    """Test MalformedSequenceError behaviour."""

    def test_is_unicode_decode_error(self):
        """Test that callers can catch it as a UnicodeDecodeError."""
        error = MalformedSequenceError(b"ab\xc0\x80", 2, 4, "overlong encoding")

        assert isinstance(error, UnicodeDecodeError)
        assert isinstance(error, Utf8StreamError)
        assert error.encoding == "utf-8"
        assert (error.start, error.end) == (2, 4)
        assert error.reason == "overlong encoding"

    def test_malformed_bytes_and_message(self):
        """Test the offending region is exposed and described."""
        error = MalformedSequenceError(bytearray(b"x\xed\xa0\x80"), 1, 4, "encoded surrogate")

        assert error.malformed_bytes == b"\xed\xa0\x80"
        assert str(error) == "malformed UTF-8 at bytes 1..4 (ed a0 80): encoded surrogate"

    def test_raise_and_catch(self):
        """Test raising through the base class."""
        with pytest.raises(Utf8StreamError):
            raise MalformedSequenceError(b"\xff", 0, 1, "invalid start byte")


class TestOtherErrors:
    """Test the remaining exception types."""

    def test_token_parse_error(self):
        """Test TokenParseError carries token and target."""
        error = TokenParseError(b"abc", "int", "invalid literal")

        assert isinstance(error, ValueError)
        assert error.token == b"abc"
        assert error.target == "int"
        assert "b'abc'" in str(error)
        assert "(invalid literal)" in str(error)

    def test_token_parse_error_without_cause(self):
        """Test message without a cause suffix."""
        assert str(TokenParseError(b"x", "float")).endswith("cannot convert to float")

    def test_end_of_input_is_eof_error(self):
        """Test EndOfInput can be handled as EOFError."""
        with pytest.raises(EOFError):
            raise EndOfInput("exhausted")

    def test_console_code_page_error(self):
        """Test ConsoleCodePageError is an OSError with the code page."""
        error = ConsoleCodePageError("cannot switch", code_page=65001)
        assert isinstance(error, OSError)
        assert error.code_page == 65001
