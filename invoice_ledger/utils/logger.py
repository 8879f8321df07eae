"""
Logging Configuration Module.

All ledger loggers live under the "invoice_ledger" namespace and share the
handlers installed by setup_logger(): a console handler, plus a rotating
file handler when enabled in settings.yaml.

Usage:
    from invoice_ledger.utils.logger import get_logger

    # Module level, once per module
    logger = get_logger(__name__)
    logger.info("Ingesting extraction batch...")

Author: ML Engineering Team
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, TextIO

import colorama
from colorama import Fore, Style

colorama.init()

ROOT_LOGGER_NAME = "invoice_ledger"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the level name only."""

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = self.LEVEL_COLORS.get(record.levelno)
        if color:
            record.levelname = f"{color}{original}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logger(
    level: str = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10485760,  # 10 MB
    backup_count: int = 5,
    colorize: bool = True,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Install the ledger's handlers on the "invoice_ledger" logger.

    Calling it again replaces the handlers installed before.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Record format, DEFAULT_FORMAT when None.
        date_format: Timestamp format, DEFAULT_DATE_FORMAT when None.
        log_file: Rotating log file. If None, file logging is disabled.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files kept.
        colorize: Colour level names when the stream is a terminal.
        stream: Console stream, stdout by default.

    Returns:
        The "invoice_ledger" logger.
    """
    log_format = log_format or DEFAULT_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT
    stream = stream or sys.stdout

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream)
    if colorize and hasattr(stream, "isatty") and stream.isatty():
        console_handler.setFormatter(ColoredFormatter(log_format, datefmt=date_format))
    else:
        console_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
    app_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
        app_logger.addHandler(file_handler)

    app_logger.propagate = False
    set_log_level(level)

    app_logger.debug(f"Logging initialized (level={level}, file={log_file})")
    return app_logger


def set_log_level(level: str) -> None:
    """Change the level of the ledger logger and of all its handlers."""
    numeric_level = getattr(logging, level.upper())
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(numeric_level)
    for handler in app_logger.handlers:
        handler.setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the invoice_ledger namespace.

    Example:
        >>> get_logger("main").name
        'invoice_ledger.main'
        >>> get_logger("invoice_ledger.engine.propagation").name
        'invoice_ledger.engine.propagation'
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logger_from_config() -> logging.Logger:
    """Configure logging from the `logging` section of settings.yaml."""
    from config import get_config

    log_file = None
    if get_config("logging.file.enabled", False):
        log_dir = Path(get_config("paths.log_dir", "logs"))
        log_file = str(log_dir / get_config("logging.file.name", "invoice_ledger.log"))

    return setup_logger(
        level=get_config("logging.level", "INFO"),
        log_format=get_config("logging.format"),
        date_format=get_config("logging.date_format"),
        log_file=log_file,
        max_bytes=get_config("logging.file.max_bytes", 10485760),
        backup_count=get_config("logging.file.backup_count", 5),
        colorize=get_config("logging.console.colorize", True)
    )
