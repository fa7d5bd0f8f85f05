"""Diagnostic and statistics types shared by the codec and stream layers."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Input was repaired
    ERROR = auto()      # Input was rejected


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with position information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "position": self.position,
            "details": self.details,
        }


@dataclass
class ReaderStats:
    """Counters kept by a streaming reader over its lifetime."""

    bytes_read: int = 0
    refills: int = 0
    words: int = 0
    lines: int = 0
    parse_errors: int = 0

    @property
    def average_refill_size(self) -> float:
        """Average number of bytes obtained per refill."""
        if self.refills == 0:
            return 0.0
        return self.bytes_read / self.refills

    def reset(self) -> None:
        """Zero all counters."""
        self.bytes_read = 0
        self.refills = 0
        self.words = 0
        self.lines = 0
        self.parse_errors = 0
