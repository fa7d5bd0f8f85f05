"""Console environment for utf8stream.

Scoped UTF-8 code page switching and the process-wide reader and writer.
"""

from .codepage import CodePageState, load_console_api, utf8_console
from .globals import (
    configure,
    console_session,
    get_config,
    get_reader,
    get_transcoder,
    get_writer,
    shutdown,
)

__all__ = [
    "CodePageState",
    "load_console_api",
    "utf8_console",
    "configure",
    "console_session",
    "get_config",
    "get_reader",
    "get_transcoder",
    "get_writer",
    "shutdown",
]
