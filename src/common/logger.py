"""Logging utilities with rich output.

All output goes to stderr: when the tool server runs over stdio, stdout is
reserved for protocol messages.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Fetching component index...")
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

# Shared stderr console so log lines never interleave with protocol output
console = Console(stderr=True)


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger with a rich stderr handler.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level name. If None, uses LOG_LEVEL or defaults to INFO.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if logger already configured
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(level.upper())
    logger.addHandler(_rich_handler())

    # Let pytest caplog see records
    logger.propagate = True

    return logger


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Configure logging once at the entry point.

    Module loggers keep their own rich handlers; the root logger only gets
    the optional file handler, so records are not printed twice.

    Args:
        level: Logging level for all modules. If None, uses LOG_LEVEL or INFO.
        log_file: Optional file path to also log to
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    # Module loggers created by get_logger follow the configured level
    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and logger.handlers:
            logger.setLevel(level)
