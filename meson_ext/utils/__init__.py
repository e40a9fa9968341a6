"""
Logging utilities for meson_ext
"""

import copy
import sys
import logging
from typing import Optional, TextIO

LOGGER_NAME = "meson_ext"


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'SUCCESS': '\033[92m',  # Bright Green
        'RESET': '\033[0m'
    }

    def __init__(self, fmt=None, datefmt=None, stream: Optional[TextIO] = None):
        super().__init__(fmt, datefmt=datefmt)
        self.stream = stream

    def format(self, record):
        stream = self.stream or sys.stdout
        if not stream.isatty():
            return super().format(record)

        # Color a copy so other handlers see the plain record
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']
        record.levelname = f"{color}{record.levelname}{reset}"
        record.msg = f"{color}{record.msg}{reset}"
        return super().format(record)


class _StdoutHandler(logging.StreamHandler):
    """StreamHandler that always writes to the current sys.stdout"""

    def __init__(self):
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stdout


class Logger:
    """meson_ext logger"""

    SUCCESS = 25  # Between INFO and WARNING

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None,
                 stream: Optional[TextIO] = None):
        """
        Initialize logger

        Args:
            verbose: Enable debug output
            log_file: Optional log file path
            stream: Console stream (defaults to stdout)
        """
        self.verbose = verbose

        logging.addLevelName(self.SUCCESS, "SUCCESS")

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG if verbose else logging.INFO)

        # Remove existing handlers
        self.logger.handlers.clear()

        if stream is None:
            console_handler = _StdoutHandler()
        else:
            console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

        if verbose:
            fmt = "%(asctime)s [%(levelname)s] %(message)s"
        else:
            fmt = "[%(levelname)s] %(message)s"

        console_handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", stream=stream))
        self.logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            self.logger.addHandler(file_handler)

    def debug(self, msg: str):
        self.logger.debug(msg)

    def info(self, msg: str):
        self.logger.info(msg)

    def warning(self, msg: str):
        self.logger.warning(msg)

    def error(self, msg: str):
        self.logger.error(msg)

    def success(self, msg: str):
        self.logger.log(self.SUCCESS, msg)


_default_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Return the shared default Logger, creating it on first use"""
    global _default_logger
    if _default_logger is None:
        _default_logger = Logger()
    return _default_logger


class Diagnostics:
    """
    Side channel for notices meant for the enclosing build orchestrator

    Each notice is written as a single ``<prefix>:<kind>=<message>`` line
    on the stream and mirrored to the logger at the matching level.
    """

    def __init__(self, logger: Optional[Logger] = None, prefix: str = LOGGER_NAME,
                 stream: Optional[TextIO] = None):
        self.logger = logger or get_logger()
        self.prefix = prefix
        self.stream = stream

    def _emit(self, kind: str, message: str):
        stream = self.stream or sys.stdout
        # One directive per line
        flat = " ".join(message.split())
        print(f"{self.prefix}:{kind}={flat}", file=stream, flush=True)

    def info(self, message: str):
        self._emit("info", message)
        self.logger.info(message)

    def warning(self, message: str):
        self._emit("warning", message)
        self.logger.warning(message)


__all__ = ["ColoredFormatter", "Logger", "Diagnostics", "get_logger", "LOGGER_NAME"]
