"""utf8stream.

Lenient conversion between UTF-8, UTF-16 and UTF-32 plus a buffered reader
and writer that let console programs read and write Unicode text safely.

Progressive API Disclosure:
- Level 1: Conversion functions - utf8_to_utf16(), utf16_to_utf8(), ...
- Level 2: Streams - StreamingReader and ConsoleWriter over any byte source
- Level 3: Console - console_session() with the process-wide reader and writer
"""

__version__ = "0.1.0"
__author__ = "utf8stream Team"

# Level 1: Conversion functions
from .codec import (
    Transcoder,
    TranscodeResult,
    decode_utf8_strict,
    to_text,
    utf8_to_utf16,
    utf8_to_utf32,
    utf8_to_utf32_strict,
    utf16_to_utf8,
    utf16_to_utf32,
    utf32_to_utf8,
    utf32_to_utf16,
)

# Level 3: Console environment
from .console import console_session, get_reader, get_writer, utf8_console

# Errors and configuration
from .shared import (
    EndOfInput,
    MalformedSequenceError,
    TokenParseError,
    Utf8StreamConfig,
    Utf8StreamError,
)

# Level 2: Streams
from .stream import (
    BinaryStreamSource,
    BufferSink,
    BytesSource,
    ConsoleWriter,
    StreamingReader,
    Utf16Text,
    Utf32Text,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Conversion functions
    "utf8_to_utf16",
    "utf16_to_utf8",
    "utf8_to_utf32",
    "utf32_to_utf8",
    "utf16_to_utf32",
    "utf32_to_utf16",
    "utf8_to_utf32_strict",
    "decode_utf8_strict",
    "to_text",
    "Transcoder",
    "TranscodeResult",

    # Level 2: Streams
    "StreamingReader",
    "ConsoleWriter",
    "BytesSource",
    "BinaryStreamSource",
    "BufferSink",
    "Utf16Text",
    "Utf32Text",

    # Level 3: Console environment
    "console_session",
    "get_reader",
    "get_writer",
    "utf8_console",

    # Errors and configuration
    "Utf8StreamConfig",
    "Utf8StreamError",
    "MalformedSequenceError",
    "TokenParseError",
    "EndOfInput",
]
