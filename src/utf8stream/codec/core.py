"""Single-character Unicode codec primitives.

Pure functions converting one character between UTF-8 byte sequences,
UTF-16 code units and code points. Nothing here performs I/O or keeps state,
so every function is safe to call from any thread.

Malformed input never raises: it is repaired with U+FFFD. The only hard
failure is asking for a position outside the input, which is a caller bug.
"""

from typing import Optional, Sequence, Tuple, Union

ByteData = Union[bytes, bytearray, memoryview]

REPLACEMENT_CHARACTER = 0xFFFD
MAX_CODE_POINT = 0x10FFFF

# Surrogate ranges
SURROGATE_START = 0xD800
SURROGATE_END = 0xDFFF
HIGH_SURROGATE_START = 0xD800
HIGH_SURROGATE_END = 0xDBFF
LOW_SURROGATE_START = 0xDC00
LOW_SURROGATE_END = 0xDFFF
SUPPLEMENTARY_START = 0x10000
MAX_UTF16_UNIT = 0xFFFF

# UTF-8 byte constants
ASCII_MAX = 0x80
UTF8_CONTINUATION_MIN = 0x80
UTF8_CONTINUATION_MAX = 0xC0
UTF8_2BYTE_MAX = 0xE0
UTF8_3BYTE_MAX = 0xF0
UTF8_4BYTE_MAX = 0xF8
CONTINUATION_MASK = 0xC0
CONTINUATION_TAG = 0x80
CONTINUATION_PAYLOAD = 0x3F

# Smallest code point that legitimately needs each sequence length
OVERLONG_2BYTE_THRESHOLD = 0x80
OVERLONG_3BYTE_THRESHOLD = 0x800
OVERLONG_4BYTE_THRESHOLD = 0x10000

# Reasons reported for malformed UTF-8 regions
REASON_UNEXPECTED_CONTINUATION = "unexpected continuation byte"
REASON_INVALID_START = "invalid start byte"
REASON_TRUNCATED = "truncated sequence"
REASON_INVALID_CONTINUATION = "invalid continuation byte"
REASON_OVERLONG = "overlong encoding"
REASON_SURROGATE = "encoded surrogate"
REASON_OUT_OF_RANGE = "code point above U+10FFFF"

# (payload mask, minimum code point) per sequence length
_LEAD_LAYOUT = {
    2: (0x1F, OVERLONG_2BYTE_THRESHOLD),
    3: (0x0F, OVERLONG_3BYTE_THRESHOLD),
    4: (0x07, OVERLONG_4BYTE_THRESHOLD),
}


def is_surrogate(value: int) -> bool:
    """Return True if ``value`` lies in U+D800..U+DFFF."""
    return SURROGATE_START <= value <= SURROGATE_END


def is_high_surrogate(unit: int) -> bool:
    """Return True if ``unit`` is a leading (high) surrogate."""
    return HIGH_SURROGATE_START <= unit <= HIGH_SURROGATE_END


def is_low_surrogate(unit: int) -> bool:
    """Return True if ``unit`` is a trailing (low) surrogate."""
    return LOW_SURROGATE_START <= unit <= LOW_SURROGATE_END


def is_valid_code_point(value: int) -> bool:
    """Return True for scalar values: 0..U+10FFFF excluding surrogates."""
    return 0 <= value <= MAX_CODE_POINT and not is_surrogate(value)


def utf8_sequence_length(lead_byte: int) -> int:
    """Number of bytes announced by a UTF-8 lead byte.

    Returns 0 for bytes that cannot start a sequence (continuation bytes and
    0xF8..0xFF).
    """
    if lead_byte < ASCII_MAX:
        return 1
    if lead_byte < UTF8_CONTINUATION_MAX:
        return 0
    if lead_byte < UTF8_2BYTE_MAX:
        return 2
    if lead_byte < UTF8_3BYTE_MAX:
        return 3
    if lead_byte < UTF8_4BYTE_MAX:
        return 4
    return 0


def scan_utf8_char(data: ByteData, position: int) -> Tuple[int, int, Optional[str]]:
    """Decode the character at ``position`` and explain any repair.

    Args:
        data: UTF-8 encoded bytes
        position: Index of the lead byte

    Returns:
        Tuple of (code point, bytes consumed, reason). ``reason`` is None for
        a well-formed character; otherwise the code point is U+FFFD and the
        reason names the defect.

    Raises:
        IndexError: If ``position`` is outside ``data``
    """
    size = len(data)
    if not 0 <= position < size:
        raise IndexError(f"position {position} out of range for {size} bytes")

    lead = data[position]
    length = utf8_sequence_length(lead)
    if length == 1:
        return lead, 1, None
    if length == 0:
        reason = (
            REASON_UNEXPECTED_CONTINUATION
            if lead < UTF8_CONTINUATION_MAX
            else REASON_INVALID_START
        )
        return REPLACEMENT_CHARACTER, 1, reason

    mask, minimum = _LEAD_LAYOUT[length]
    code_point = lead & mask
    consumed = 1
    for index in range(position + 1, position + length):
        if index >= size:
            return REPLACEMENT_CHARACTER, consumed, REASON_TRUNCATED
        byte = data[index]
        if byte & CONTINUATION_MASK != CONTINUATION_TAG:
            return REPLACEMENT_CHARACTER, consumed, REASON_INVALID_CONTINUATION
        code_point = (code_point << 6) | (byte & CONTINUATION_PAYLOAD)
        consumed += 1

    if code_point < minimum:
        return REPLACEMENT_CHARACTER, length, REASON_OVERLONG
    if is_surrogate(code_point):
        return REPLACEMENT_CHARACTER, length, REASON_SURROGATE
    if code_point > MAX_CODE_POINT:
        return REPLACEMENT_CHARACTER, length, REASON_OUT_OF_RANGE
    return code_point, length, None


def decode_utf8_char(data: ByteData, position: int) -> Tuple[int, int]:
    """Decode one UTF-8 character, repairing malformed input with U+FFFD.

    A bad or missing continuation byte ends the character before that byte,
    so it is examined again as the start of the next character. Complete
    sequences that are overlong, encode a surrogate or exceed U+10FFFF are
    replaced as a whole.

    Args:
        data: UTF-8 encoded bytes
        position: Index of the lead byte

    Returns:
        Tuple of (code point, bytes consumed); at least one byte is consumed

    Raises:
        IndexError: If ``position`` is outside ``data``
    """
    code_point, consumed, _ = scan_utf8_char(data, position)
    return code_point, consumed


def encode_utf8_char(code_point: int) -> bytes:
    """Encode one code point as UTF-8.

    Surrogates, negative values and values above U+10FFFF are encoded as
    U+FFFD (three bytes). Never fails.
    """
    if not is_valid_code_point(code_point):
        code_point = REPLACEMENT_CHARACTER

    if code_point < OVERLONG_2BYTE_THRESHOLD:
        return bytes((code_point,))
    if code_point < OVERLONG_3BYTE_THRESHOLD:
        return bytes((
            0xC0 | (code_point >> 6),
            CONTINUATION_TAG | (code_point & CONTINUATION_PAYLOAD),
        ))
    if code_point < OVERLONG_4BYTE_THRESHOLD:
        return bytes((
            0xE0 | (code_point >> 12),
            CONTINUATION_TAG | ((code_point >> 6) & CONTINUATION_PAYLOAD),
            CONTINUATION_TAG | (code_point & CONTINUATION_PAYLOAD),
        ))
    return bytes((
        0xF0 | (code_point >> 18),
        CONTINUATION_TAG | ((code_point >> 12) & CONTINUATION_PAYLOAD),
        CONTINUATION_TAG | ((code_point >> 6) & CONTINUATION_PAYLOAD),
        CONTINUATION_TAG | (code_point & CONTINUATION_PAYLOAD),
    ))


def compose_utf16(high_unit: int, low_unit: Optional[int] = None) -> int:
    """Combine UTF-16 code units into a code point.

    Args:
        high_unit: First unit
        low_unit: Following unit, if one is available

    Returns:
        ``high_unit`` itself when it is not a surrogate, the supplementary
        code point for a valid high/low pair, and U+FFFD for a lone high
        surrogate, a lone low surrogate or a value that is not a 16-bit unit.
        Only ``high_unit`` is interpreted when it is not a high surrogate.
    """
    if not 0 <= high_unit <= MAX_UTF16_UNIT:
        return REPLACEMENT_CHARACTER
    if not is_surrogate(high_unit):
        return high_unit
    if is_high_surrogate(high_unit) and low_unit is not None and is_low_surrogate(low_unit):
        return (
            SUPPLEMENTARY_START
            + ((high_unit - HIGH_SURROGATE_START) << 10)
            + (low_unit - LOW_SURROGATE_START)
        )
    return REPLACEMENT_CHARACTER


def decompose_to_utf16(code_point: int) -> Tuple[int, ...]:
    """Split a code point into one or two UTF-16 code units.

    Invalid code points (surrogates, negatives, above U+10FFFF) become the
    single unit U+FFFD.
    """
    if not is_valid_code_point(code_point):
        return (REPLACEMENT_CHARACTER,)
    if code_point < SUPPLEMENTARY_START:
        return (code_point,)
    offset = code_point - SUPPLEMENTARY_START
    return (
        HIGH_SURROGATE_START + (offset >> 10),
        LOW_SURROGATE_START + (offset & 0x3FF),
    )


def code_point_label(code_point: int) -> str:
    """Format a code point the usual way, e.g. ``U+1F600``."""
    return f"U+{code_point:04X}"


def units_label(units: Sequence[int]) -> str:
    """Format a run of 16-bit units, e.g. ``D83D DE00``."""
    return " ".join(f"{unit:04X}" for unit in units)
