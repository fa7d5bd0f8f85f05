"""Scoped switching of the Windows console code page to UTF-8.

On entry the current input and output code pages are recorded and switched
to the configured code page (UTF-8 by default); on exit they are restored,
whether the block finishes normally or raises. Elsewhere the context manager
does nothing, since POSIX terminals take their encoding from the locale.
"""

import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from ..shared.config import ConsoleConfig
from ..shared.errors import ConsoleCodePageError
from ..shared.logging import get_logger

logger = get_logger(__name__, component="console_codepage")


@dataclass
class CodePageState:
    """Code pages found on entry and whether they were changed.

    A previous value of None means it was not queried; 0 means no console is
    attached to the process.
    """
    previous_input: Optional[int] = None
    previous_output: Optional[int] = None
    input_changed: bool = False
    output_changed: bool = False

    @property
    def changed(self) -> bool:
        """True if either code page was switched."""
        return self.input_changed or self.output_changed


def load_console_api() -> Optional[Any]:
    """Return the kernel32 console functions, or None off Windows."""
    if sys.platform != "win32":
        return None
    import ctypes
    return ctypes.windll.kernel32


def _switch(api: Any, setter: str, current: int, target: int, strict: bool) -> bool:
    """Set one code page through ``setter`` unless it is already ``target``.

    A current value of 0 means no console is attached and nothing is done.

    Returns:
        True if the code page was changed and must be restored later

    Raises:
        ConsoleCodePageError: If the call fails and ``strict`` is set
    """
    if current == 0 or current == target:
        return False
    if getattr(api, setter)(target):
        logger.info(f"{setter}: {current} -> {target}")
        return True
    message = f"{setter}({target}) failed, keeping code page {current}"
    if strict:
        raise ConsoleCodePageError(message, code_page=target)
    logger.warning(message)
    return False


def _restore(api: Any, setter: str, previous: Optional[int]) -> None:
    """Put back a code page recorded on entry, logging any failure."""
    if not getattr(api, setter)(previous):
        logger.warning(f"{setter}({previous}) failed while restoring code page")


@contextmanager
def utf8_console(
    config: Optional[ConsoleConfig] = None,
    api: Optional[Any] = None,
    strict: bool = False,
) -> Iterator[CodePageState]:
    """Switch the console to UTF-8 for the duration of a ``with`` block.

    Args:
        config: Console configuration; ``switch_code_page=False`` disables
            switching entirely
        api: Object providing GetConsoleCP, GetConsoleOutputCP, SetConsoleCP
            and SetConsoleOutputCP; defaults to kernel32 on Windows
        strict: Raise ConsoleCodePageError instead of logging a warning when
            a code page cannot be set

    Yields:
        CodePageState describing what was changed
    """
    config = config or ConsoleConfig()
    state = CodePageState()

    if api is None and config.switch_code_page:
        api = load_console_api()
    if api is None or not config.switch_code_page:
        logger.debug("Console code page switching skipped")
        yield state
        return

    state.previous_input = api.GetConsoleCP()
    state.previous_output = api.GetConsoleOutputCP()
    try:
        state.input_changed = _switch(
            api, "SetConsoleCP", state.previous_input, config.code_page, strict
        )
        state.output_changed = _switch(
            api, "SetConsoleOutputCP", state.previous_output, config.code_page, strict
        )
        yield state
    finally:
        if state.input_changed:
            _restore(api, "SetConsoleCP", state.previous_input)
        if state.output_changed:
            _restore(api, "SetConsoleOutputCP", state.previous_output)
