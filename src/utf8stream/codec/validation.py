"""Strict UTF-8 validation.

The strict path accepts only well-formed UTF-8: minimal-length sequences with
correct continuation bytes, no encoded surrogates and nothing above U+10FFFF.
The first violation aborts decoding with :class:`MalformedSequenceError`;
no partial output is ever returned.
"""

from dataclasses import dataclass
from typing import List

from ..shared.errors import MalformedSequenceError
from ..shared.result import DiagnosticEntry, DiagnosticSeverity
from .core import ByteData, scan_utf8_char


@dataclass(frozen=True)
class ReplacementRecord:
    """A malformed byte region and why it was rejected or repaired.

    Attributes:
        start: Offset of the first byte of the region
        end: Offset one past the last byte of the region
        reason: Human-readable defect description
    """
    start: int
    end: int
    reason: str

    def __post_init__(self) -> None:
        """Validate region bounds."""
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid region {self.start}..{self.end}")

    @property
    def length(self) -> int:
        """Number of bytes in the region."""
        return self.end - self.start

    def to_diagnostic(self, severity: DiagnosticSeverity) -> DiagnosticEntry:
        """Describe this region as a diagnostic entry."""
        return DiagnosticEntry(
            severity=severity,
            message=f"Malformed UTF-8 ({self.reason})",
            component="utf8_validator",
            position={"start": self.start, "end": self.end},
        )


class Utf8Validator:
    """UTF-8 validator with overlong, surrogate and range checks."""

    def decode(self, data: ByteData) -> List[int]:
        """Decode well-formed UTF-8 into code points.

        Args:
            data: Bytes to decode

        Returns:
            Code points, one per character

        Raises:
            MalformedSequenceError: On the first malformed region
        """
        # Python's own codec applies the same well-formedness rules
        try:
            return [ord(char) for char in bytes(data).decode("utf-8")]
        except UnicodeDecodeError:
            pass

        code_points: List[int] = []
        position = 0
        size = len(data)
        while position < size:
            code_point, consumed, reason = scan_utf8_char(data, position)
            if reason is not None:
                raise MalformedSequenceError(
                    bytes(data), position, position + consumed, reason
                )
            code_points.append(code_point)
            position += consumed
        return code_points

    def is_valid(self, data: ByteData) -> bool:
        """Return True if ``data`` is entirely well-formed UTF-8."""
        try:
            bytes(data).decode("utf-8")
        except UnicodeDecodeError:
            return False
        return True

    def find_errors(self, data: ByteData) -> List[ReplacementRecord]:
        """List every malformed region without raising.

        The regions are exactly those the lenient decoder replaces with
        U+FFFD, in input order.
        """
        if self.is_valid(data):
            return []

        records: List[ReplacementRecord] = []
        position = 0
        size = len(data)
        while position < size:
            _, consumed, reason = scan_utf8_char(data, position)
            if reason is not None:
                records.append(ReplacementRecord(position, position + consumed, reason))
            position += consumed
        return records


_validator = Utf8Validator()


def decode_utf8_strict(data: ByteData) -> List[int]:
    """Strictly decode UTF-8 to code points; see :meth:`Utf8Validator.decode`."""
    return _validator.decode(data)


def find_utf8_errors(data: ByteData) -> List[ReplacementRecord]:
    """List malformed regions; see :meth:`Utf8Validator.find_errors`."""
    return _validator.find_errors(data)
