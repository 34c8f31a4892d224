"""Custom logging utilities for the RegexSolve application."""
# src/regexsolve/logging_utils.py

import logging
import sys
import time
from logging import FileHandler
from pathlib import Path

from . import paths


def _format_utc_time(formatter: logging.Formatter, record: logging.LogRecord, datefmt: str | None) -> str:
    """Format a record's creation time with 6-digit microseconds and a 'Z' for UTC."""
    ct = formatter.converter(record.created)
    s = time.strftime(datefmt, ct) if datefmt else time.strftime(formatter.default_time_format, ct)
    microseconds = int((record.created - int(record.created)) * 1_000_000)
    return f"{s}.{microseconds:06d}Z"


# Console Log Formatter
class ConsoleFormatter(logging.Formatter):
    """A formatter for console output that keeps lines short and user-friendly."""

    def __init__(self, version: str) -> None:
        """
        Initialize the formatter with the application version.

        Args:
            version: The RegexSolve application version.

        """
        super().__init__(
            fmt=f"%(asctime)s | RegexSolve - {version} | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        self.converter = time.gmtime

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the time with 6-digit microseconds and a 'Z' for UTC."""
        return _format_utc_time(self, record, datefmt)


# File Log Formatter
class FileFormatter(logging.Formatter):
    """A detailed formatter for debug log files, aimed at developers."""

    def __init__(self) -> None:
        """Initialize the detailed file formatter."""
        super().__init__(
            fmt="%(asctime)s | %(name)-28s | %(funcName)-22s:%(lineno)-4d | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        self.converter = time.gmtime

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the time with 6-digit microseconds and a 'Z' for UTC."""
        return _format_utc_time(self, record, datefmt)


def setup_logging(version: str, *, debug: bool = False, project_root: Path | None = None) -> None:
    """
    Configure the root logger for the RegexSolve application.

    Console output goes to stderr so that stdout stays reserved for JSON
    responses. Level is INFO by default, DEBUG if debug=True. In debug mode a
    detailed log is also written to '.regexsolve/logs/debug.log' when a project
    directory can be found from project_root.

    Args:
        version: The application version, included in console logs.
        debug: If True, enables detailed file logging and sets console level to DEBUG.
        project_root: Where to start looking for the project directory. Defaults to CWD.

    """
    root_logger = logging.getLogger()
    # Clear any handlers created by basicConfig or previous setups
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    level = logging.DEBUG if debug else logging.INFO
    root_logger.setLevel(level)

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(ConsoleFormatter(version))
    root_logger.addHandler(console_handler)

    if not debug:
        return

    try:
        log_dir = paths.get_log_dir(project_root)
    except FileNotFoundError:
        root_logger.debug("No project directory found; debug logs go to the console only.")
        return

    try:
        paths.ensure_dir_exists(log_dir)
        log_file_path = log_dir / "debug.log"

        # --- File Handler (DEBUG) ---
        file_handler = FileHandler(log_file_path, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(FileFormatter())
        root_logger.addHandler(file_handler)

        root_logger.info("Debug mode enabled. Detailed logs will be written to %s", log_file_path)
    except OSError:
        # If creating the log file fails, continue with console logging.
        root_logger.exception("Failed to create debug log file. Continuing with console logging only.")
