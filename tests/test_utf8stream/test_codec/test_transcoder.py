"""Tests for whole-sequence transcoding."""

import itertools
import random

import pytest

from utf8stream.codec.core import REPLACEMENT_CHARACTER, is_surrogate
from utf8stream.codec.transcoder import (
    Transcoder,
    TranscodeResult,
    to_text,
    utf8_to_utf16,
    utf8_to_utf32,
    utf8_to_utf32_strict,
    utf16_to_utf8,
    utf16_to_utf32,
    utf32_to_utf8,
    utf32_to_utf16,
)
from utf8stream.codec.validation import find_utf8_errors
from utf8stream.shared.errors import MalformedSequenceError
from utf8stream.shared.result import DiagnosticSeverity

FFFD = REPLACEMENT_CHARACTER
SAMPLE = "Grüße, 世界 \U0001F600"


class TestLenientDirections:
    """Test the six lenient conversion directions."""

    def test_utf8_to_utf32_well_formed(self):
        """Test well-formed input decodes to its code points."""
        assert utf8_to_utf32(SAMPLE.encode("utf-8")) == [ord(c) for c in SAMPLE]

    def test_utf8_to_utf32_accepts_bytes_like(self):
        """Test bytearray and memoryview input."""
        data = "é".encode("utf-8")
        assert utf8_to_utf32(bytearray(data)) == [0xE9]
        assert utf8_to_utf32(memoryview(data)) == [0xE9]

    def test_utf8_to_utf32_repairs(self):
        """Test malformed regions are replaced and decoding continues."""
        data = b"a\xc0\x80b\xed\xa0\x80c\xe2\x82d\xff"

        # Act
        code_points = utf8_to_utf32(data)

        # Assert
        assert code_points == [
            ord("a"), FFFD, ord("b"), FFFD, ord("c"), FFFD, ord("d"), FFFD
        ]
        assert len(code_points) <= len(data)

    def test_empty_inputs(self):
        """Test every direction maps empty to empty."""
        assert utf8_to_utf32(b"") == []
        assert utf8_to_utf16(b"") == []
        assert utf16_to_utf8([]) == b""
        assert utf32_to_utf8([]) == b""
        assert utf16_to_utf32([]) == []
        assert utf32_to_utf16([]) == []

    def test_emoji_unit_counts(self):
        """Test one emoji is 4 bytes, 2 units and 1 code point."""
        data = "\U0001F600".encode("utf-8")

        units = utf8_to_utf16(data)

        assert len(data) == 4
        assert units == [0xD83D, 0xDE00]
        assert utf16_to_utf32(units) == [0x1F600]
        assert utf16_to_utf8(units) == data

    def test_utf16_lone_surrogates(self):
        """Test lone high and low surrogates are replaced unit by unit."""
        assert utf16_to_utf32([0xD83D, 0x41]) == [FFFD, 0x41]
        assert utf16_to_utf32([0xDE00, 0xD83D]) == [FFFD, FFFD]
        assert utf16_to_utf32([0x41, 0xD83D]) == [0x41, FFFD]

    def test_utf32_to_utf8_invalid_code_points(self):
        """Test surrogates and out-of-range values encode as U+FFFD."""
        assert utf32_to_utf8([0x41, 0xD800, 0x110000]) == b"A" + b"\xef\xbf\xbd" * 2

    def test_utf32_to_utf8_accepts_str(self):
        """Test str input, including a lone surrogate."""
        assert utf32_to_utf8(SAMPLE) == SAMPLE.encode("utf-8")
        assert utf32_to_utf8("a\ud800") == b"a\xef\xbf\xbd"

    def test_utf32_to_utf16(self):
        """Test splitting supplementary code points."""
        assert utf32_to_utf16([0x41, 0x1F600, 0xDC00]) == [0x41, 0xD83D, 0xDE00, FFFD]
        assert utf32_to_utf16("A\U0001F600") == [0x41, 0xD83D, 0xDE00]

    def test_round_trips_on_valid_text(self):
        """Test conversions are lossless for well-formed text."""
        data = SAMPLE.encode("utf-8")
        assert utf16_to_utf8(utf8_to_utf16(data)) == data
        assert utf32_to_utf8(utf8_to_utf32(data)) == data
        assert utf16_to_utf32(utf32_to_utf16(utf8_to_utf32(data))) == utf8_to_utf32(data)

    def test_to_text(self):
        """Test rendering code points as str."""
        assert to_text([0x48, 0x1F600]) == "H\U0001F600"
        assert to_text([0xD800, -3, 0x110000]) == "�" * 3
        assert to_text("a\ud800") == "a�"


class TestStrictDirection:
    """Test the strict UTF-8 to UTF-32 path."""

    def test_valid_input(self):
        """Test strict decoding of well-formed input."""
        assert utf8_to_utf32_strict("€".encode("utf-8")) == [0x20AC]

    def test_overlong_rejected(self):
        """Test C0 80 is rejected with its byte range."""
        with pytest.raises(MalformedSequenceError) as exc_info:
            utf8_to_utf32_strict(b"ok\xc0\x80")

        assert (exc_info.value.start, exc_info.value.end) == (2, 4)


class TestTranscoder:
    """Test the Transcoder facade."""

    def test_methods_delegate(self):
        """Test each method matches its module function."""
        transcoder = Transcoder()
        data = SAMPLE.encode("utf-8")
        units = utf8_to_utf16(data)
        code_points = utf8_to_utf32(data)

        assert transcoder.utf8_to_utf16(data) == units
        assert transcoder.utf16_to_utf8(units) == data
        assert transcoder.utf8_to_utf32(data) == code_points
        assert transcoder.utf32_to_utf8(code_points) == data
        assert transcoder.utf16_to_utf32(units) == code_points
        assert transcoder.utf32_to_utf16(code_points) == units
        assert transcoder.utf8_to_utf32_strict(data) == code_points
        assert transcoder.utf8_to_text(data) == SAMPLE

    def test_inspect_clean_input(self):
        """Test inspection of well-formed input."""
        result = Transcoder().inspect_utf8(b"plain")

        assert isinstance(result, TranscodeResult)
        assert result.is_clean
        assert result.replacement_count == 0
        assert result.text == "plain"
        assert result.input_size == 5
        assert result.diagnostics == []

    def test_inspect_reports_repairs(self):
        """Test every replacement region is reported in order."""
        data = b"a\xc0\x80b\xff"

        # Act
        result = Transcoder().inspect_utf8(data)

        # Assert
        assert result.text == "a�b�"
        assert result.replacement_count == result.code_points.count(FFFD) == 2
        assert [(r.start, r.end) for r in result.replacements] == [(1, 3), (4, 5)]
        assert result.replacements[0].reason == "overlong encoding"
        assert all(d.severity is DiagnosticSeverity.WARNING for d in result.diagnostics)
        assert result.diagnostics[1].position == {"start": 4, "end": 5}


# Lead bytes of every length, continuation edges and never-valid bytes
BYTE_POOL = [
    0x00, 0x41, 0x7F, 0x80, 0x8F, 0x90, 0x9F, 0xA0, 0xBF, 0xC0, 0xC1,
    0xC2, 0xDF, 0xE0, 0xED, 0xEF, 0xF0, 0xF4, 0xF5, 0xF8, 0xFF,
]
UNIT_POOL = [0x0000, 0x0041, 0x00E9, 0xD7FF, 0xD800, 0xDBFF, 0xDC00, 0xDFFF, 0xE000, 0xFFFF]


def byte_sequences():
    """Every 1-2 byte sequence, pool sequences up to 3 bytes and seeded random ones."""
    for length in (1, 2):
        for combo in itertools.product(range(0x100), repeat=length):
            yield bytes(combo)
    for combo in itertools.product(BYTE_POOL, repeat=3):
        yield bytes(combo)
    rng = random.Random(20240611)
    for _ in range(5000):
        yield bytes(rng.choice(BYTE_POOL) for _ in range(rng.randint(1, 8)))


class TestProperties:
    """Test decoder laws over arbitrary input."""

    def test_lenient_and_strict_agree_with_python_codec(self):
        """Test lenient never fails and strict accepts exactly what Python accepts."""
        for data in byte_sequences():
            lenient = utf8_to_utf32(data)
            assert len(lenient) <= len(data), data
            assert all(not is_surrogate(cp) and cp <= 0x10FFFF for cp in lenient), data
            # The pools cannot spell a literal EF BF BD
            assert lenient.count(FFFD) == len(find_utf8_errors(data)), data

            try:
                expected = data.decode("utf-8")
            except UnicodeDecodeError as python_error:
                with pytest.raises(MalformedSequenceError) as exc_info:
                    utf8_to_utf32_strict(data)
                error = exc_info.value
                assert error.start == python_error.start, data
                assert error.start < error.end <= len(data), data
            else:
                assert utf8_to_utf32_strict(data) == [ord(c) for c in expected]
                assert lenient == [ord(c) for c in expected]

    def test_repaired_output_is_well_formed(self):
        """Test re-encoding a lenient decode always yields valid UTF-8."""
        rng = random.Random(7)
        for _ in range(2000):
            data = bytes(rng.choice(BYTE_POOL) for _ in range(rng.randint(1, 12)))

            repaired = utf32_to_utf8(utf8_to_utf32(data))

            repaired.decode("utf-8")
            assert utf8_to_utf32_strict(repaired) == utf8_to_utf32(data)

    def test_utf16_units_never_fail(self):
        """Test arbitrary unit sequences decode to scalar values without raising."""
        rng = random.Random(11)
        sequences = [list(combo) for combo in itertools.product(UNIT_POOL, repeat=2)]
        sequences += [
            [rng.choice(UNIT_POOL) for _ in range(rng.randint(1, 8))]
            for _ in range(3000)
        ]

        for units in sequences:
            code_points = utf16_to_utf32(units)
            assert len(code_points) <= len(units), units
            assert all(not is_surrogate(cp) for cp in code_points), units
            utf16_to_utf8(units).decode("utf-8")

    def test_well_formed_utf16_matches_python_codec(self):
        """Test surrogate-free text round trips through UTF-16 like Python's codec."""
        rng = random.Random(3)
        for _ in range(1000):
            text = "".join(
                chr(rng.choice([rng.randint(0x20, 0xD7FF), rng.randint(0xE000, 0x10FFFF)]))
                for _ in range(rng.randint(0, 6))
            )
            encoded = text.encode("utf-16-le")
            expected_units = [
                int.from_bytes(encoded[i:i + 2], "little") for i in range(0, len(encoded), 2)
            ]

            assert utf32_to_utf16(text) == expected_units
            assert utf16_to_utf32(expected_units) == [ord(c) for c in text]
