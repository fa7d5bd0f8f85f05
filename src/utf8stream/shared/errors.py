"""Exception hierarchy for utf8stream.

Lenient decoding never raises; these exceptions cover the strict decoding
path, typed token extraction and console environment setup.
"""

from typing import Optional


class Utf8StreamError(Exception):
    """Base exception for all utf8stream errors."""


class MalformedSequenceError(UnicodeDecodeError, Utf8StreamError):
    """Raised by strict decoding on the first malformed UTF-8 byte region.

    Behaves like a regular :class:`UnicodeDecodeError` with encoding
    ``"utf-8"``; ``start`` and ``end`` delimit the offending bytes (end
    exclusive).
    """

    def __init__(self, data: bytes, start: int, end: int, reason: str) -> None:
        super().__init__("utf-8", bytes(data), start, end, reason)

    @property
    def malformed_bytes(self) -> bytes:
        """The bytes of the rejected region."""
        return self.object[self.start:self.end]

    def __str__(self) -> str:
        return (
            f"malformed UTF-8 at bytes {self.start}..{self.end} "
            f"({self.malformed_bytes.hex(' ')}): {self.reason}"
        )


class TokenParseError(Utf8StreamError, ValueError):
    """Raised when a consumed token cannot be converted to the requested type.

    The token has already been removed from the stream; the reader stays
    usable.
    """

    def __init__(self, token: bytes, target: str, cause: Optional[str] = None) -> None:
        message = f"Parse error at token {token!r}: cannot convert to {target}"
        if cause:
            message = f"{message} ({cause})"
        super().__init__(message)
        self.token = token
        self.target = target


class EndOfInput(Utf8StreamError, EOFError):
    """Raised when a typed read finds the byte source exhausted."""


class ConsoleCodePageError(Utf8StreamError, OSError):
    """Raised when the console code page cannot be queried or changed."""

    def __init__(self, message: str, code_page: Optional[int] = None) -> None:
        super().__init__(message)
        self.code_page = code_page
