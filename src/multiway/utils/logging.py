"""Logging configuration for multiway.

Four verbosity levels are supported:

* ``QUIET``   - errors only
* ``NORMAL``  - progress and results (default)
* ``VERBOSE`` - adds solver details
* ``DEBUG``   - everything, including model construction

The level can be set programmatically with :func:`setup_logging` or through the
``MULTIWAY_LOG_LEVEL`` environment variable.
"""

import logging
import os
from enum import Enum

from tqdm import tqdm


class LogLevel(Enum):
    """Verbosity levels understood by :class:`MultiwayLogger`."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


class Colors:
    """ANSI color codes for terminal output."""

    BLUE = "\033[34m"
    GREEN = "\033[32m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    MAGENTA = "\033[35m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class Symbols:
    """Unicode symbols for status messages."""

    CHECK = "✓"
    CROSS = "✗"
    ROCKET = "🚀"
    GEAR = "⚙"
    INFO = "ℹ"
    WARNING = "⚠"
    SCALES = "⚖"


_LEVEL_COLORS = {
    logging.DEBUG: Colors.GRAY,
    logging.INFO: Colors.CYAN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED + Colors.BOLD,
}

# Python logging level applied to every multiway logger per LogLevel
_PYTHON_LEVELS = {
    LogLevel.QUIET: logging.ERROR,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}

_ANSI_PREFIX = "\033["

_EFFECTIVE_ENV = "MULTIWAY_EFFECTIVE_LOG_LEVEL"
_REQUESTED_ENV = "MULTIWAY_LOG_LEVEL"


class SimpleFormatter(logging.Formatter):
    """Colorize the message according to the record level.

    Messages from the ``MultiwayLogger`` helpers arrive already colored and
    are passed through unchanged.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if message.startswith(_ANSI_PREFIX):
            return message
        color = _LEVEL_COLORS.get(record.levelno, Colors.RESET)
        return f"{color}{message}{Colors.RESET}"


class MultiwayLogger:
    """Level-aware facade over the standard :mod:`logging` loggers."""

    _current_level: LogLevel = LogLevel.NORMAL
    _loggers: dict[str, logging.Logger] = {}

    @classmethod
    def set_level(cls, level: LogLevel) -> None:
        cls._current_level = level
        for logger in cls._loggers.values():
            cls._configure_logger(logger)

    @classmethod
    def get_level(cls) -> LogLevel:
        return cls._current_level

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Return (and cache) a logger configured for the current level."""
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            cls._configure_logger(logger)
            cls._loggers[name] = logger
        return cls._loggers[name]

    @classmethod
    def _effective_level(cls) -> LogLevel:
        # A level exported by setup_logging wins so that subprocesses agree
        env_level = os.environ.get(_EFFECTIVE_ENV)
        if env_level and env_level.upper() in LogLevel.__members__:
            return LogLevel[env_level.upper()]
        return cls._current_level

    @classmethod
    def _configure_logger(cls, logger: logging.Logger) -> None:
        logger.setLevel(_PYTHON_LEVELS[cls._effective_level()])

    @classmethod
    def progress(cls, message: str, symbol: str = Symbols.GEAR) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("multiway.progress").info(
                f"{Colors.BLUE}{symbol} {message}{Colors.RESET}"
            )

    @classmethod
    def success(cls, message: str, symbol: str = Symbols.CHECK) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("multiway.success").info(
                f"{Colors.GREEN}{symbol} {message}{Colors.RESET}"
            )

    @classmethod
    def detail(cls, message: str, indent: str = "  ") -> None:
        """Log a detail line, shown in VERBOSE mode and above."""
        if cls._current_level.value >= LogLevel.VERBOSE.value:
            cls.get_logger("multiway.detail").info(
                f"{Colors.GRAY}{indent}{message}{Colors.RESET}"
            )

    @classmethod
    def debug(cls, message: str, logger_name: str = "multiway.debug") -> None:
        if cls._current_level.value >= LogLevel.DEBUG.value:
            cls.get_logger(logger_name).debug(message)

    @classmethod
    def warning(cls, message: str, symbol: str = Symbols.WARNING) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("multiway.warning").warning(
                f"{Colors.YELLOW}{symbol} {message}{Colors.RESET}"
            )

    @classmethod
    def error(cls, message: str, symbol: str = Symbols.CROSS) -> None:
        # Errors are shown at every level
        cls.get_logger("multiway.error").error(
            f"{Colors.RED}{symbol} {message}{Colors.RESET}"
        )


def suppress_third_party_logs() -> None:
    """Silence chatty libraries below WARNING."""
    for name in ("pulp", "matplotlib", "urllib3", "numba", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure the root handler and the global multiway level.

    Args:
        level: Explicit level. When *None*, ``MULTIWAY_LOG_LEVEL`` is read and
            NORMAL is used if it is unset or invalid.
    """
    if level is None:
        requested = os.environ.get(_REQUESTED_ENV, "").upper()
        level = LogLevel[requested] if requested in LogLevel.__members__ else LogLevel.NORMAL

    os.environ[_EFFECTIVE_ENV] = level.name

    handler = logging.StreamHandler()
    handler.setFormatter(SimpleFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_PYTHON_LEVELS[level])

    MultiwayLogger.set_level(level)
    suppress_third_party_logs()


class ProgressTracker:
    """Step-wise progress bar that stays silent in QUIET mode."""

    def __init__(self, steps: list[str]):
        self.steps = steps
        self.current = 0
        self.pbar = None
        if MultiwayLogger.get_level() != LogLevel.QUIET:
            self.pbar = tqdm(
                total=len(steps),
                desc=f"{Colors.BLUE}{Symbols.SCALES} Partitioning{Colors.RESET}",
                bar_format="{desc}: {percentage:3.0f}%|{bar:30}| {n_fmt}/{total_fmt}",
            )

    def advance(self, message: str | None = None, status: str = "success") -> None:
        if self.pbar is None:
            self.current += 1
            return
        if message:
            color = {
                "success": Colors.GREEN,
                "warning": Colors.YELLOW,
                "error": Colors.RED,
            }.get(status, Colors.RESET)
            self.pbar.write(f"{color}{Symbols.CHECK} {message}{Colors.RESET}")
        self.pbar.update(1)
        self.current += 1

    def close(self) -> None:
        if self.pbar is None:
            return
        self.pbar.write(f"{Colors.GREEN}{Symbols.CHECK} Done{Colors.RESET}")
        self.pbar.close()


def log_progress(message: str) -> None:
    MultiwayLogger.progress(message, Symbols.GEAR)


def log_success(message: str) -> None:
    MultiwayLogger.success(message, Symbols.CHECK)


def log_detail(message: str) -> None:
    MultiwayLogger.detail(message, "  ")


def log_info(message: str) -> None:
    MultiwayLogger.progress(message, Symbols.INFO)


def log_warning(message: str) -> None:
    MultiwayLogger.warning(message, Symbols.WARNING)


def log_error(message: str) -> None:
    MultiwayLogger.error(message, Symbols.CROSS)


def log_debug(message: str, logger_name: str = "multiway.debug") -> None:
    MultiwayLogger.debug(message, logger_name)
