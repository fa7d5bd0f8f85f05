"""Codec layer for utf8stream.

Single-character primitives, lenient whole-sequence transcoding between
UTF-8, UTF-16 and UTF-32, and strict UTF-8 validation.
"""

from .core import (
    MAX_CODE_POINT,
    REPLACEMENT_CHARACTER,
    compose_utf16,
    decode_utf8_char,
    decompose_to_utf16,
    encode_utf8_char,
    is_high_surrogate,
    is_low_surrogate,
    is_surrogate,
    is_valid_code_point,
)
from .transcoder import (
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
from .validation import (
    ReplacementRecord,
    Utf8Validator,
    decode_utf8_strict,
    find_utf8_errors,
)

__all__ = [
    # Modules
    "core",
    "transcoder",
    "validation",
    # Constants
    "MAX_CODE_POINT",
    "REPLACEMENT_CHARACTER",
    # Single-character primitives
    "compose_utf16",
    "decode_utf8_char",
    "decompose_to_utf16",
    "encode_utf8_char",
    "is_high_surrogate",
    "is_low_surrogate",
    "is_surrogate",
    "is_valid_code_point",
    # Whole-sequence conversion
    "Transcoder",
    "TranscodeResult",
    "to_text",
    "utf8_to_utf16",
    "utf8_to_utf32",
    "utf8_to_utf32_strict",
    "utf16_to_utf8",
    "utf16_to_utf32",
    "utf32_to_utf8",
    "utf32_to_utf16",
    # Strict validation
    "ReplacementRecord",
    "Utf8Validator",
    "decode_utf8_strict",
    "find_utf8_errors",
]
