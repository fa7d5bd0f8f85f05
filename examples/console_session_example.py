#!/usr/bin/env python3
"""
Interactive console session with utf8stream.

Switches the console to UTF-8 (on Windows), asks for a name and a list of
numbers, and answers in kind. Try typing non-Latin text or emoji.

    python examples/console_session_example.py
"""

import sys
from pathlib import Path

# Add src to path for running examples directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from utf8stream import EndOfInput, TokenParseError, Utf8StreamConfig, console_session
from utf8stream.console import get_transcoder


def main() -> int:
    """Run the interactive session."""
    with console_session(Utf8StreamConfig.interactive()) as (reader, writer):
        writer.write("Your name: ").flush()
        name = reader.read_line_text()
        if name is None:
            return 0
        units = get_transcoder().utf32_to_utf16(name)
        writer.writeln(f"Hello, {name}! ({len(name)} code points, {len(units)} UTF-16 units)")

        writer.writeln("Enter numbers, blank line to finish:")
        total = 0.0
        for line in reader.read_lines_text(stop_on_empty_line=True):
            for token in line.split():
                try:
                    total += float(token)
                except ValueError:
                    writer.writeln(f"  skipping {token!r}")
        writer.write("Total: ").write(total).end_line()

        writer.write("One more integer: ").flush()
        try:
            writer.writeln(f"Doubled: {reader.read_int() * 2}")
        except TokenParseError as e:
            writer.writeln(f"Not an integer: {e.token!r}")
        except EndOfInput:
            writer.writeln("No input.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
