"""Whole-sequence conversion between UTF-8, UTF-16 and UTF-32.

Every conversion here is lenient: malformed input is repaired locally with
U+FFFD and the conversion always succeeds. The one exception is
:func:`utf8_to_utf32_strict`, which rejects malformed input instead.

Representations:
    UTF-8   ``bytes`` (any bytes-like object is accepted as input)
    UTF-16  list of 16-bit code units
    UTF-32  list of code points; ``str`` is accepted wherever UTF-32 is input
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Union

from ..shared.result import DiagnosticEntry, DiagnosticSeverity
from .core import (
    REPLACEMENT_CHARACTER,
    ByteData,
    compose_utf16,
    decode_utf8_char,
    decompose_to_utf16,
    encode_utf8_char,
    is_high_surrogate,
    is_low_surrogate,
    is_valid_code_point,
)
from .validation import ReplacementRecord, Utf8Validator

CodePoint = int
Utf16Sequence = List[int]
Utf32Sequence = List[int]
Utf32Input = Union[str, Iterable[int]]


def _code_points(value: Utf32Input) -> Iterable[int]:
    """Iterate a UTF-32 input as ints, whether given as ``str`` or code points."""
    if isinstance(value, str):
        return (ord(char) for char in value)
    return value


def utf8_to_utf32(data: ByteData) -> Utf32Sequence:
    """Decode UTF-8 into code points, repairing malformed bytes.

    The result never has more entries than ``data`` has bytes.
    """
    # Fast path: well-formed input decodes identically through Python's codec
    try:
        return [ord(char) for char in bytes(data).decode("utf-8")]
    except UnicodeDecodeError:
        pass

    code_points: Utf32Sequence = []
    position = 0
    size = len(data)
    while position < size:
        code_point, consumed = decode_utf8_char(data, position)
        code_points.append(code_point)
        position += consumed
    return code_points


def utf8_to_utf32_strict(data: ByteData) -> Utf32Sequence:
    """Decode UTF-8 into code points, failing on the first malformed region.

    Raises:
        MalformedSequenceError: Identifying the offending byte range
    """
    return Utf8Validator().decode(data)


def utf32_to_utf8(code_points: Utf32Input) -> bytes:
    """Encode code points as UTF-8; invalid code points become U+FFFD."""
    if isinstance(code_points, str):
        try:
            return code_points.encode("utf-8")
        except UnicodeEncodeError:
            pass
    return b"".join(encode_utf8_char(code_point) for code_point in _code_points(code_points))


def utf16_to_utf32(units: Sequence[int]) -> Utf32Sequence:
    """Combine UTF-16 units into code points.

    Valid surrogate pairs are composed; a lone high or low surrogate becomes
    U+FFFD and decoding resumes at the next unit.
    """
    code_points: Utf32Sequence = []
    index = 0
    count = len(units)
    while index < count:
        unit = units[index]
        if (
            is_high_surrogate(unit)
            and index + 1 < count
            and is_low_surrogate(units[index + 1])
        ):
            code_points.append(compose_utf16(unit, units[index + 1]))
            index += 2
        else:
            code_points.append(compose_utf16(unit))
            index += 1
    return code_points


def utf32_to_utf16(code_points: Utf32Input) -> Utf16Sequence:
    """Split code points into UTF-16 units; invalid code points become U+FFFD."""
    units: Utf16Sequence = []
    for code_point in _code_points(code_points):
        units.extend(decompose_to_utf16(code_point))
    return units


def utf8_to_utf16(data: ByteData) -> Utf16Sequence:
    """Decode UTF-8 into UTF-16 units, repairing malformed bytes."""
    return utf32_to_utf16(utf8_to_utf32(data))


def utf16_to_utf8(units: Sequence[int]) -> bytes:
    """Encode UTF-16 units as UTF-8, repairing unpaired surrogates."""
    return utf32_to_utf8(utf16_to_utf32(units))


def to_text(code_points: Utf32Input) -> str:
    """Render code points as a ``str``; invalid code points become U+FFFD."""
    if isinstance(code_points, str):
        code_points = _code_points(code_points)
    return "".join(
        chr(code_point if is_valid_code_point(code_point) else REPLACEMENT_CHARACTER)
        for code_point in code_points
    )


@dataclass
class TranscodeResult:
    """Lenient decode result together with the regions that were repaired.

    Attributes:
        code_points: Decoded code points
        replacements: Malformed regions replaced with U+FFFD, in input order
        input_size: Number of input bytes
    """
    code_points: Utf32Sequence
    replacements: List[ReplacementRecord] = field(default_factory=list)
    input_size: int = 0

    @property
    def replacement_count(self) -> int:
        """Number of U+FFFD characters introduced by repair."""
        return len(self.replacements)

    @property
    def is_clean(self) -> bool:
        """True if the input was well-formed."""
        return not self.replacements

    @property
    def text(self) -> str:
        """Decoded code points as a ``str``."""
        return to_text(self.code_points)

    @property
    def diagnostics(self) -> List[DiagnosticEntry]:
        """One WARNING diagnostic per repaired region."""
        return [
            record.to_diagnostic(DiagnosticSeverity.WARNING)
            for record in self.replacements
        ]


class Transcoder:
    """Stateless facade over the conversion functions.

    Holds no state, so a single instance may be shared across threads.
    """

    def __init__(self) -> None:
        self._validator = Utf8Validator()

    def utf8_to_utf16(self, data: ByteData) -> Utf16Sequence:
        """Lenient UTF-8 to UTF-16."""
        return utf8_to_utf16(data)

    def utf16_to_utf8(self, units: Sequence[int]) -> bytes:
        """Lenient UTF-16 to UTF-8."""
        return utf16_to_utf8(units)

    def utf8_to_utf32(self, data: ByteData) -> Utf32Sequence:
        """Lenient UTF-8 to UTF-32."""
        return utf8_to_utf32(data)

    def utf32_to_utf8(self, code_points: Utf32Input) -> bytes:
        """Lenient UTF-32 to UTF-8."""
        return utf32_to_utf8(code_points)

    def utf16_to_utf32(self, units: Sequence[int]) -> Utf32Sequence:
        """Lenient UTF-16 to UTF-32."""
        return utf16_to_utf32(units)

    def utf32_to_utf16(self, code_points: Utf32Input) -> Utf16Sequence:
        """Lenient UTF-32 to UTF-16."""
        return utf32_to_utf16(code_points)

    def utf8_to_utf32_strict(self, data: ByteData) -> Utf32Sequence:
        """Strict UTF-8 to UTF-32; raises MalformedSequenceError."""
        return self._validator.decode(data)

    def utf8_to_text(self, data: ByteData) -> str:
        """Lenient UTF-8 to ``str``."""
        return to_text(utf8_to_utf32(data))

    def inspect_utf8(self, data: ByteData) -> TranscodeResult:
        """Decode leniently and report every repaired region.

        Never raises.
        """
        return TranscodeResult(
            code_points=utf8_to_utf32(data),
            replacements=self._validator.find_errors(data),
            input_size=len(data),
        )
