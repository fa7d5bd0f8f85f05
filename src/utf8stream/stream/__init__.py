"""Stream layer for utf8stream.

Byte sources and sinks, the incremental streaming reader and the console
writer.
"""

from .reader import StreamingReader
from .source import (
    BinaryStreamSink,
    BinaryStreamSource,
    BufferSink,
    ByteSink,
    ByteSource,
    BytesSource,
    standard_input_source,
    standard_output_sink,
)
from .writer import ConsoleWriter, Utf16Text, Utf32Text

__all__ = [
    "StreamingReader",
    "BinaryStreamSink",
    "BinaryStreamSource",
    "BufferSink",
    "ByteSink",
    "ByteSource",
    "BytesSource",
    "standard_input_source",
    "standard_output_sink",
    "ConsoleWriter",
    "Utf16Text",
    "Utf32Text",
]
