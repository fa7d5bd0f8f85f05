"""Component-aware logging for utf8stream.

Every record emitted through :class:`StreamLogger` carries the emitting
component and, when known, the identifier of the input stream it concerns, so
that output from several readers can be told apart.
"""

import logging
from typing import Any, Dict, Optional, Union

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class StreamLogger:
    """Logger that attaches component and stream information to each record."""

    def __init__(
        self,
        name: str,
        stream_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize the logger.

        Args:
            name: Logger name (typically __name__)
            stream_id: Optional identifier of the byte stream being processed
            component: Component name, defaults to the last dotted part of name
        """
        self.logger = logging.getLogger(name)
        self.stream_id = stream_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "stream_id": self.stream_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a record at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a debug message."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log an info message."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log a warning message."""
        self.logger.warning(message, extra=self._get_extra(extra), exc_info=exc_info)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log an error message, with traceback by default."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)


def get_logger(
    name: str,
    stream_id: Optional[str] = None,
    component: Optional[str] = None
) -> StreamLogger:
    """Get a component-aware logger.

    Args:
        name: Logger name (typically __name__)
        stream_id: Optional identifier of the byte stream being processed
        component: Component name for structured logging

    Returns:
        StreamLogger instance
    """
    return StreamLogger(name, stream_id, component)


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Configure the ``utf8stream`` logger hierarchy to log to stderr.

    Repeated calls only adjust the level; a handler is installed once.

    Args:
        level: Logging level as an int or a level name such as ``"DEBUG"``
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {level}")

    root = logging.getLogger("utf8stream")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root.addHandler(handler)
