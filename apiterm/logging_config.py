"""apiterm logging configuration.

apiterm logs through loguru. The curses UI owns the terminal, so the default
stderr sink is removed and records go to a rotating file instead
(default: ``~/.cache/apiterm/apiterm.log``, override with ``APITERM_LOG_PATH``).
Example: ``tail -f ~/.cache/apiterm/apiterm.log``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from loguru import logger

DEFAULT_LOG_PATH = Path("~/.cache/apiterm/apiterm.log")

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[logger_name]}:{function}:{line} | {message}"

logger.configure(extra={"logger_name": "apiterm"})


def get_logger(name: str):  # type: ignore[no-untyped-def]
    """Return a loguru logger bound to a module name."""
    return logger.bind(logger_name=name)


def resolve_log_path(path: Optional[str] = None) -> Path:
    """Pick the log file path from the argument, the environment, or the default."""
    raw = path or os.environ.get("APITERM_LOG_PATH") or str(DEFAULT_LOG_PATH)
    return Path(raw).expanduser()


def setup_logging(level: Optional[str] = None, path: Optional[str] = None) -> Path:
    """Configure apiterm logging.

    Args:
        level: Optional override for `APITERM_LOG_LEVEL`.
        path: Optional override for `APITERM_LOG_PATH`.

    Returns:
        The log file path in use.
    """
    effective_level = (level or os.environ.get("APITERM_LOG_LEVEL", "INFO")).upper()

    log_path = resolve_log_path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(log_path),
        format=_FILE_FORMAT,
        level=effective_level,
        rotation="10 MB",
        retention=3,
        backtrace=True,
        diagnose=False,
    )
    return log_path
