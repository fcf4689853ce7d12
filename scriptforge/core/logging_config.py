"""
ScriptForge Logging Configuration

Every module logs through a child of the ``scriptforge`` logger obtained
with get_logger(). Until the host application calls setup_logging() (or
setup_from_config()), the engine only reports warnings and above.

Levels used across the engine:
    DEBUG   - ignored mutations on stale ids, HTTP calls
    INFO    - revision history transactions, imports
    WARNING - lossy exports, failed service calls
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional
from enum import Enum


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


ROOT_LOGGER_NAME = "scriptforge"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(funcName)s | %(message)s"

# Level applied when nothing configured logging explicitly
UNCONFIGURED_LEVEL = LogLevel.WARNING

_loggers: Dict[str, logging.Logger] = {}
_initialized: bool = False
_log_file: Optional[Path] = None


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    log_file: Optional[Path] = None,
    verbose: bool = True,
    console_output: bool = True
) -> None:
    """
    Configure the ``scriptforge`` logger tree.

    Replaces any handlers installed by a previous call.

    Args:
        level: Minimum log level to capture
        log_file: Optional path to log file
        verbose: If True, use verbose format with line numbers
        console_output: If True, output to stderr
    """
    global _initialized, _log_file

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.value)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(VERBOSE_FORMAT if verbose else DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level.value)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    _log_file = None
    if log_file:
        _log_file = Path(log_file)
        _log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(_log_file, encoding='utf-8')
        file_handler.setLevel(level.value)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _initialized = True
    root_logger.debug(f"Logging initialized - Level: {level.name}, Verbose: {verbose}")


def setup_from_config(config, log_file: Optional[Path] = None) -> None:
    """
    Configure logging from an EngineConfig.

    ``verbose_logging`` selects DEBUG with the verbose format, otherwise INFO.
    """
    verbose = bool(getattr(config, "verbose_logging", False))
    setup_logging(
        level=LogLevel.DEBUG if verbose else LogLevel.INFO,
        log_file=log_file,
        verbose=verbose,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for an engine component.

    Args:
        name: Component name, e.g. "revisions.store"

    Returns:
        Logger named ``scriptforge.<name>``
    """
    if not _initialized:
        setup_logging(UNCONFIGURED_LEVEL, verbose=False)

    full_name = name if name.startswith(ROOT_LOGGER_NAME) else f"{ROOT_LOGGER_NAME}.{name}"

    if full_name not in _loggers:
        _loggers[full_name] = logging.getLogger(full_name)

    return _loggers[full_name]


def get_log_file() -> Optional[Path]:
    """Path of the active log file, if logging writes to one."""
    return _log_file


class LogContext:
    """Temporarily change a logger's level, e.g. to trace one editing session."""

    def __init__(self, logger: logging.Logger, level: LogLevel):
        self.logger = logger
        self.new_level = level.value
        self.old_level = logger.level

    def __enter__(self):
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.old_level)
        return False


def create_session_log(base_dir: Path, prefix: str = "session", level: LogLevel = LogLevel.INFO) -> Path:
    """
    Start logging to a fresh timestamped file.

    Args:
        base_dir: Directory to create log file in
        prefix: Prefix for log file name
        level: Minimum level written

    Returns:
        Path to created log file
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Path(base_dir) / f"{prefix}_{timestamp}.log"
    setup_logging(level=level, log_file=log_file, console_output=False)
    return log_file
