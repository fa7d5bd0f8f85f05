#!/usr/bin/env python3
"""
Quick Start Guide for utf8stream.

Walks through the three levels of the API: plain conversion functions,
readers and writers over in-memory bytes, and the strict decoding path.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from utf8stream import (
    BufferSink,
    BytesSource,
    ConsoleWriter,
    MalformedSequenceError,
    StreamingReader,
    Transcoder,
    Utf16Text,
    decode_utf8_strict,
    utf8_to_utf16,
    utf8_to_utf32,
    utf16_to_utf8,
)
from utf8stream.codec.core import code_point_label, units_label


def conversion_example():
    """Convert between the three encodings."""
    print("🔄 CONVERSIONS")
    print("=" * 40)

    data = "Grüße \U0001F600".encode("utf-8")
    units = utf8_to_utf16(data)
    code_points = utf8_to_utf32(data)

    print(f"UTF-8 bytes:   {len(data)}")
    print(f"UTF-16 units:  {len(units)} ({units_label(units)})")
    print(f"Code points:   {' '.join(code_point_label(cp) for cp in code_points)}")
    print(f"Round trip ok: {utf16_to_utf8(units) == data}")

    # Malformed input is repaired, never rejected
    result = Transcoder().inspect_utf8(b"bad \xc0\x80 byte \xff")
    print(f"\nRepaired text: {result.text!r}")
    for record in result.replacements:
        print(f"  - bytes {record.start}..{record.end}: {record.reason}")


def reader_writer_example():
    """Read words, numbers and lines, then write them back."""
    print("\n\n📖 READER AND WRITER")
    print("=" * 40)

    source = BytesSource("3 1.5 naïve\nfirst line\r\nsecond line\n\nignored\n".encode("utf-8"))
    reader = StreamingReader(source)
    sink = BufferSink()
    writer = ConsoleWriter(sink)

    count = reader.read_int()
    ratio = reader.read_float()
    word = reader.read_word_text()
    lines = reader.read_lines_text(stop_on_empty_line=True)

    writer.write("count=").write(count).write(" ratio=").write(ratio).end_line()
    writer.write("word=").write(Utf16Text(Transcoder().utf32_to_utf16(word))).end_line()
    writer.write_lines(lines)

    print(f"Parsed: count={count}, ratio={ratio}, word={word!r}")
    print(f"Lines:  {lines}")
    print(f"Writer output ({writer.bytes_written} bytes):")
    print(sink.getvalue().decode("utf-8"))
    print(f"Reader stats: {reader.stats}")


def strict_example():
    """Reject malformed input instead of repairing it."""
    print("\n🛑 STRICT DECODING")
    print("=" * 40)

    for data in ("ok".encode("utf-8"), b"ok\xed\xa0\x80"):
        try:
            code_points = decode_utf8_strict(data)
            print(f"{data!r}: {len(code_points)} code points")
        except MalformedSequenceError as e:
            print(f"{data!r}: {e}")


def main():
    """Main function."""
    try:
        conversion_example()
        reader_writer_example()
        strict_example()
        print("\n🎉 Quick start complete!")
    except Exception as e:
        print(f"\n❌ Error running examples: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
