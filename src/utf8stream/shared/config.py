"""Configuration classes for utf8stream.

This module provides configuration objects for the streaming reader, the
console writer and the console environment, plus an immutable aggregate that
can be overridden, serialised and loaded from JSON.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

# Default refill size for the streaming reader
DEFAULT_CHUNK_SIZE = 1024

# Windows code page identifier for UTF-8
CP_UTF8 = 65001

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_SECTIONS = ["reader", "writer", "console", "global_"]


@dataclass
class ReaderConfig:
    """Configuration for the streaming reader."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    whitespace: bytes = b" \t\n\r\f\v"
    newline: int = 0x0A
    carriage_return: int = 0x0D
    swallow_trailing_newline: bool = True

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        if isinstance(self.whitespace, str):
            self.whitespace = self.whitespace.encode("ascii")
        if not self.whitespace:
            raise ValueError("whitespace must contain at least one byte")
        if not (0 <= self.newline <= 0xFF):
            raise ValueError("newline must be a byte value")
        if not (0 <= self.carriage_return <= 0xFF):
            raise ValueError("carriage_return must be a byte value")


@dataclass
class WriterConfig:
    """Configuration for the console writer."""

    auto_flush: bool = False
    newline: bytes = b"\n"
    line_separator: bytes = b"\n"

    def __post_init__(self) -> None:
        """Validate writer configuration."""
        if isinstance(self.newline, str):
            self.newline = self.newline.encode("utf-8")
        if isinstance(self.line_separator, str):
            self.line_separator = self.line_separator.encode("utf-8")
        if not self.newline:
            raise ValueError("newline cannot be empty")


@dataclass
class ConsoleConfig:
    """Configuration for console code page handling."""

    switch_code_page: bool = True
    code_page: int = CP_UTF8

    def __post_init__(self) -> None:
        """Validate console configuration."""
        if not (0 < self.code_page <= 0xFFFF):
            raise ValueError("code_page must be between 1 and 65535")


@dataclass
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class Utf8StreamConfig:
    """Immutable configuration for all utf8stream components.

    Thread-safe to share because it is a frozen dataclass; use
    :meth:`override` to derive a modified copy.
    """

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    writer: WriterConfig = field(default_factory=WriterConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.reader.__post_init__()
            self.writer.__post_init__()
            self.console.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.reader.newline in self.reader.whitespace:
            return
        raise ConfigValidationError(
            "reader.newline must also be a whitespace byte",
            field_name="reader.whitespace",
            suggestions=["Add the newline byte to reader.whitespace"]
        )

    def override(self, **kwargs: Any) -> "Utf8StreamConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; nested fields use ``section__field``

        Returns:
            New Utf8StreamConfig instance with overrides applied

        Example:
            >>> config = Utf8StreamConfig()
            >>> config.override(reader__chunk_size=64).reader.chunk_size
            64
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                section, field_name = key.split("__", 1)
                if section not in _SECTIONS:
                    raise ConfigValidationError(
                        f"Unknown configuration section: {section}",
                        field_name=key,
                        suggestions=_SECTIONS
                    )
                nested_overrides.setdefault(section, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for section in _SECTIONS:
            current = getattr(self, section)
            if section in nested_overrides and isinstance(nested_overrides[section], dict):
                try:
                    new_fields[section] = replace(current, **nested_overrides[section])
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=section) from e
            elif section in nested_overrides:
                new_fields[section] = nested_overrides[section]

        for key, value in nested_overrides.items():
            if key not in _SECTIONS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary.

        Byte strings are rendered as latin-1 text so they survive a JSON
        round trip unchanged.
        """
        def _convert(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {name: _convert(getattr(obj, name)) for name in obj.__dataclass_fields__}
            if isinstance(obj, bytes):
                return obj.decode("latin-1")
            return obj

        result = _convert(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Utf8StreamConfig":
        """Create configuration from a dictionary produced by :meth:`to_dict`.

        Missing sections and fields keep their defaults; unknown fields are
        rejected.
        """
        section_types = {
            "reader": ReaderConfig,
            "writer": WriterConfig,
            "console": ConsoleConfig,
            "global_": GlobalConfig,
        }
        bytes_fields = {
            "reader": {"whitespace"},
            "writer": {"newline", "line_separator"},
        }

        values: Dict[str, Any] = {}
        for section, section_type in section_types.items():
            raw = data.get(section)
            if raw is None:
                continue
            if not isinstance(raw, dict):
                raise ConfigValidationError(
                    f"Section {section} must be an object", field_name=section
                )
            unknown = set(raw) - set(section_type.__dataclass_fields__)
            if unknown:
                raise ConfigValidationError(
                    f"Unknown fields in {section}: {sorted(unknown)}",
                    field_name=section
                )
            converted = dict(raw)
            for name in bytes_fields.get(section, ()):
                if isinstance(converted.get(name), str):
                    converted[name] = converted[name].encode("latin-1")
            try:
                values[section] = section_type(**converted)
            except ValueError as e:
                raise ConfigValidationError(str(e), field_name=section) from e

        if "name" in data:
            values["name"] = data["name"]
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "Utf8StreamConfig":
        """Create configuration from a JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON configuration: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def interactive(cls) -> "Utf8StreamConfig":
        """Preset for a human typing at a console: flush every write."""
        return cls(
            writer=WriterConfig(auto_flush=True),
            console=ConsoleConfig(switch_code_page=True),
            name="interactive",
        )

    @classmethod
    def batch(cls) -> "Utf8StreamConfig":
        """Preset for piped input: large refills, buffered output."""
        return cls(
            reader=ReaderConfig(chunk_size=64 * 1024),
            writer=WriterConfig(auto_flush=False),
            console=ConsoleConfig(switch_code_page=False),
            name="batch",
        )
