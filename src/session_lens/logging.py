"""Logging for session-lens.

Every module logs through a child of the ``session_lens`` logger obtained
with get_logger(). Nothing is emitted until setup_logging() attaches
handlers to that package logger; by default records go to
~/.session-lens/logs/<name>.log and, optionally, stderr.
"""

import logging
import sys
from pathlib import Path

PACKAGE_LOGGER = "session_lens"

DEFAULT_LOG_DIR = Path.home() / ".session-lens" / "logs"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_handlers(log_file: Path, level: int, console: bool) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.FileHandler(log_file, encoding="utf-8")]
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    name: str,
    log_dir: Path | None = None,
    level: int = logging.INFO,
    console: bool = True,
) -> logging.Logger:
    """Attach handlers to the package logger and return a component logger.

    Calling again replaces the previous handlers, so a later call with a
    different log directory or console setting takes effect.

    Args:
        name: Component name, also the log file stem
        log_dir: Directory for log files (defaults to ~/.session-lens/logs/)
        level: Logging level (defaults to INFO)
        console: Whether to also log to stderr

    Returns:
        The ``session_lens.<name>`` logger
    """
    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    for handler in _build_handlers(log_dir / f"{name}.log", level, console):
        package_logger.addHandler(handler)

    return get_logger(name)


def get_logger(name: str) -> logging.Logger:
    """Get the ``session_lens.<name>`` logger."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
