import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

_console = None
_log_file = None


def _log_level() -> int:
    if os.getenv("DEBUG"):
        return logging.DEBUG
    level = os.getenv("MARKET_LOG_LEVEL", "INFO").upper()
    return logging.getLevelNamesMapping().get(level, logging.INFO)


def _log_console() -> Console:
    """
    Console shared by all handlers.
    With MARKET_LOG_FILE set, logs go to that file so they don't draw over the TUI.
    """
    global _console, _log_file
    if _console is None:
        log_path = os.getenv("MARKET_LOG_FILE")
        if log_path:
            _log_file = open(log_path, "a", encoding="utf-8")
            _console = Console(file=_log_file, width=120)
        else:
            _console = Console(stderr=True)
    return _console


def get_logger(name=None) -> logging.Logger:
    """
    Creates and returns a logger configured with RichHandler for rich output.
    """
    if name is None:
        name = "market"
    logger = logging.getLogger(name)
    log_level = _log_level()
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = RichHandler(
            console=_log_console(),
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("[%(name)s]  %(message)s"))
        handler.setLevel(log_level)
        logger.addHandler(handler)

        logger.propagate = False
        logger.debug(f"Logger for '{name}' initialized with RichHandler.")

    return logger


def close_log_file() -> None:
    """Close the MARKET_LOG_FILE handle, later records go to stderr."""
    global _log_file
    if _log_file is None:
        return
    if _console is not None:
        _console.file = sys.stderr
    _log_file.close()
    _log_file = None
