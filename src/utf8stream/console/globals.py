"""Process-wide reader, writer and transcoder.

The instances are created lazily on first use and torn down by
:func:`shutdown`, which is also registered to run at interpreter exit.
"""

import atexit
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from ..codec.transcoder import Transcoder
from ..shared.config import Utf8StreamConfig
from ..shared.logging import configure_logging, get_logger
from ..stream.reader import StreamingReader
from ..stream.source import standard_input_source, standard_output_sink
from ..stream.writer import ConsoleWriter
from .codepage import utf8_console

logger = get_logger(__name__, component="console_globals")

_lock = threading.RLock()
_config: Optional[Utf8StreamConfig] = None
_transcoder: Optional[Transcoder] = None
_reader: Optional[StreamingReader] = None
_writer: Optional[ConsoleWriter] = None
_atexit_registered = False


def _register_shutdown() -> None:
    global _atexit_registered
    if not _atexit_registered:
        atexit.register(shutdown)
        _atexit_registered = True


def configure(config: Utf8StreamConfig) -> None:
    """Set the configuration used when the global instances are created.

    Instances that already exist keep their configuration until
    :func:`shutdown`.
    """
    global _config
    with _lock:
        _config = config


def get_config() -> Utf8StreamConfig:
    """Current global configuration (defaults if never configured)."""
    global _config
    with _lock:
        if _config is None:
            _config = Utf8StreamConfig()
        return _config


def get_transcoder() -> Transcoder:
    """The shared stateless transcoder."""
    global _transcoder
    with _lock:
        if _transcoder is None:
            _transcoder = Transcoder()
        return _transcoder


def get_reader() -> StreamingReader:
    """The reader bound to standard input, created on first call."""
    global _reader
    with _lock:
        if _reader is None:
            _reader = StreamingReader(
                standard_input_source(),
                config=get_config().reader,
                transcoder=get_transcoder(),
                stream_id="stdin",
            )
            _register_shutdown()
            logger.debug("Global reader created")
        return _reader


def get_writer() -> ConsoleWriter:
    """The writer bound to standard output, created on first call."""
    global _writer
    with _lock:
        if _writer is None:
            _writer = ConsoleWriter(
                standard_output_sink(),
                config=get_config().writer,
                transcoder=get_transcoder(),
            )
            _register_shutdown()
            logger.debug("Global writer created")
        return _writer


def shutdown() -> None:
    """Flush the writer, release the reader buffer and drop all instances."""
    global _reader, _writer, _transcoder, _config
    with _lock:
        writer, reader = _writer, _reader
        _reader = None
        _writer = None
        _transcoder = None
        _config = None
    if writer is not None:
        try:
            writer.flush()
        except (OSError, ValueError) as e:
            # stdout may already be closed at interpreter exit
            logger.warning(f"Could not flush global writer: {e}")
    if reader is not None:
        reader.clear()


@contextmanager
def console_session(
    config: Optional[Utf8StreamConfig] = None,
) -> Iterator[Tuple[StreamingReader, ConsoleWriter]]:
    """Run a block with a UTF-8 console and the global reader and writer.

    The console code page is restored and the globals are shut down on every
    exit path.

    Yields:
        Tuple of (reader, writer)
    """
    if config is not None:
        configure(config)
    active = get_config()
    configure_logging(active.global_.logging_level)
    with utf8_console(active.console):
        try:
            yield get_reader(), get_writer()
        finally:
            shutdown()
