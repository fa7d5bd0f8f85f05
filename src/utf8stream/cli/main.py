"""Main CLI entry point for the utf8stream command-line tool.

Reads UTF-8 text from a file or standard input and splits it into words or
lines, inspects code points, validates well-formedness or benchmarks the
codecs.
"""

import argparse
import json
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from utf8stream.codec.core import code_point_label, units_label
from utf8stream.codec.transcoder import Transcoder
from utf8stream.codec.validation import decode_utf8_strict, find_utf8_errors
from utf8stream.console.codepage import utf8_console
from utf8stream.shared.config import ConfigError, Utf8StreamConfig
from utf8stream.shared.errors import MalformedSequenceError
from utf8stream.shared.logging import configure_logging, get_logger
from utf8stream.stream.reader import StreamingReader
from utf8stream.stream.source import BinaryStreamSource, standard_output_sink
from utf8stream.stream.writer import ConsoleWriter
from utf8stream.tools.benchmarks import TranscodingBenchmark

logger = get_logger(__name__, component="cli")


def load_config(config_path: Optional[Path]) -> Utf8StreamConfig:
    """Load configuration from a JSON file, falling back to defaults."""
    if config_path is None:
        return Utf8StreamConfig()
    try:
        return Utf8StreamConfig.from_json(config_path.read_text(encoding="utf-8"))
    except (OSError, ConfigError) as e:
        print(f"Warning: Could not load config file: {e}", file=sys.stderr)
        return Utf8StreamConfig()


def byte_value(value: str) -> int:
    """Parse a byte value given in decimal, hex (0x3B) or octal (0o73).

    Raises:
        argparse.ArgumentTypeError: If the value is not an integer in 0..255
    """
    try:
        number = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid byte value: {value!r}") from None
    if not 0 <= number <= 0xFF:
        raise argparse.ArgumentTypeError(f"byte value must be in 0..255, got {number}")
    return number


@contextmanager
def open_input(path: Optional[Path]) -> Iterator[BinaryStreamSource]:
    """Byte source over ``path``, or standard input when no path is given."""
    if path is None or str(path) == "-":
        yield BinaryStreamSource(sys.stdin.buffer)
        return
    with path.open("rb") as stream:
        yield BinaryStreamSource(stream)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="utf8stream",
        description="Read, inspect and validate UTF-8 text streams",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_input(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "input",
            nargs="?",
            type=Path,
            default=None,
            help="Input file (default: standard input)"
        )

    words_parser = subparsers.add_parser("words", help="Print one word per line")
    add_input(words_parser)

    lines_parser = subparsers.add_parser("lines", help="Collect and print lines")
    add_input(lines_parser)
    lines_parser.add_argument(
        "--stop-on-empty",
        action="store_true",
        help="Stop at the first empty line"
    )
    lines_parser.add_argument(
        "--stop-byte",
        type=byte_value,
        default=None,
        help="Byte value (e.g. 0x3B) that ends the collection"
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Show code points and repairs for each line"
    )
    add_input(inspect_parser)
    inspect_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    validate_parser = subparsers.add_parser(
        "validate", help="Check that the input is well-formed UTF-8"
    )
    add_input(validate_parser)
    validate_parser.add_argument(
        "--all",
        action="store_true",
        help="Report every malformed region, not just the first"
    )

    benchmark_parser = subparsers.add_parser(
        "benchmark", help="Benchmark the codecs on built-in samples"
    )
    benchmark_parser.add_argument(
        "--runs",
        type=int,
        default=5,
        help="Timed runs per operation and sample"
    )
    benchmark_parser.add_argument(
        "--operation",
        action="append",
        dest="operations",
        help="Operation to benchmark (repeatable; default: all)"
    )

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="JSON configuration file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def cmd_words(args: argparse.Namespace, reader: StreamingReader, writer: ConsoleWriter) -> int:
    """Handle words command."""
    for word in reader.iter_words():
        writer.writeln(word)
    return 0


def cmd_lines(args: argparse.Namespace, reader: StreamingReader, writer: ConsoleWriter) -> int:
    """Handle lines command."""
    lines = reader.read_lines(
        stop_on_empty_line=args.stop_on_empty,
        stop_byte=args.stop_byte,
    )
    writer.write_lines(lines)
    return 0


def inspect_line(number: int, line: bytes, transcoder: Transcoder) -> Dict[str, Any]:
    """Describe one line: code points, unit counts and repaired regions."""
    result = transcoder.inspect_utf8(line)
    units = transcoder.utf32_to_utf16(result.code_points)
    return {
        "line": number,
        "text": result.text,
        "code_points": [code_point_label(cp) for cp in result.code_points],
        "utf8_bytes": len(line),
        "utf16_units": len(units),
        "utf16": units_label(units),
        "replacements": [entry.to_dict() for entry in result.diagnostics],
    }


def format_inspection(records: List[Dict[str, Any]], format_type: str) -> str:
    """Format inspection records for output."""
    if format_type == "json":
        return json.dumps(records, indent=2, ensure_ascii=False)

    lines = []
    for record in records:
        lines.append(f"{record['line']}: {record['text']}")
        lines.append(f"   {' '.join(record['code_points'])}")
        lines.append(
            f"   UTF-8 bytes: {record['utf8_bytes']}, "
            f"UTF-16 units: {record['utf16_units']}, "
            f"repairs: {len(record['replacements'])}"
        )
        for entry in record["replacements"][:3]:
            position = entry["position"]
            lines.append(
                f"   Repaired bytes {position['start']}..{position['end']}: "
                f"{entry['message']}"
            )
    return "\n".join(lines)


def cmd_inspect(args: argparse.Namespace, reader: StreamingReader, writer: ConsoleWriter) -> int:
    """Handle inspect command."""
    transcoder = Transcoder()
    records = [
        inspect_line(number, line, transcoder)
        for number, line in enumerate(reader.iter_lines(), start=1)
    ]
    if records:
        writer.writeln(format_inspection(records, args.format))
    return 0


def cmd_validate(args: argparse.Namespace, reader: StreamingReader, writer: ConsoleWriter) -> int:
    """Handle validate command."""
    data = bytes(iter(reader.next_byte, None))
    try:
        code_points = decode_utf8_strict(data)
    except MalformedSequenceError as e:
        print(f"Invalid: {e}", file=sys.stderr)
        if args.all:
            for record in find_utf8_errors(data)[1:]:
                print(
                    f"Invalid: malformed UTF-8 at bytes {record.start}..{record.end}: "
                    f"{record.reason}",
                    file=sys.stderr
                )
        return 1

    writer.writeln(f"Valid: {len(data)} bytes, {len(code_points)} code points")
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace, StreamingReader, ConsoleWriter], int]] = {
    "words": cmd_words,
    "lines": cmd_lines,
    "inspect": cmd_inspect,
    "validate": cmd_validate,
}


def cmd_benchmark(args: argparse.Namespace) -> int:
    """Handle benchmark command."""
    if args.runs <= 0:
        print("--runs must be > 0", file=sys.stderr)
        return 1
    benchmark = TranscodingBenchmark(benchmark_runs=args.runs)
    try:
        suite = benchmark.run(args.operations)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(suite.to_dict(), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = load_config(args.config)
    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.ERROR)
    else:
        configure_logging(config.global_.logging_level)

    try:
        if args.command == "benchmark":
            return cmd_benchmark(args)

        handler = COMMANDS.get(args.command)
        if handler is None:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

        with utf8_console(config.console), open_input(args.input) as source:
            stream_id = str(args.input) if args.input else "stdin"
            reader = StreamingReader(source, config=config.reader, stream_id=stream_id)
            writer = ConsoleWriter(standard_output_sink(), config=config.writer)
            try:
                return handler(args, reader, writer)
            finally:
                writer.flush()
                reader.clear()

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT
    except OSError as e:
        logger.debug(f"I/O failure: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
