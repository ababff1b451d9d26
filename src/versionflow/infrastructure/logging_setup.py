"""
Logging configuration for runs driving versionflow.

The library only creates module loggers below ``versionflow``; a run calls
``setup_logging`` once at startup. Passing the console of the
ConsoleInteraction makes log records and operator prompts share one terminal.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from versionflow.domain.exceptions import UserConfigurationError

PACKAGE_LOGGER = "versionflow"

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers installed here carry this attribute so a second call replaces them
_INSTALLED = "_versionflow_handler"


def _level(name: str, value: str | int) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise UserConfigurationError(f"Unknown log level '{value}' for logger {name}.")
    return level


def _remove_installed_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _INSTALLED, False):
            logger.removeHandler(handler)
            handler.close()


def setup_logging(
    console: Console | None = None,
    log_file: str | Path | None = None,
    verbose: bool = False,
    levels: Mapping[str, str | int] | None = None,
) -> logging.Logger:
    """
    Install console and file handlers on the ``versionflow`` logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        console: Rich console for log records (a new one by default)
        log_file: Per-run log file at DEBUG level, None for none. Records
            name their thread since the roots of a run may be traversed
            concurrently.
        verbose: DEBUG on the console instead of INFO
        levels: Level per logger relative to ``versionflow``, e.g.
            ``{"application.capability": "WARNING"}`` to quiet resolution records

    Returns:
        The ``versionflow`` logger

    Raises:
        UserConfigurationError: If a level name is unknown
    """
    overrides = {
        f"{PACKAGE_LOGGER}.{name}": _level(name, value)
        for name, value in (levels or {}).items()
    }

    logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_installed_handlers(logger)
    logger.setLevel(logging.DEBUG)

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
    )
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    setattr(console_handler, _INSTALLED, True)
    logger.addHandler(console_handler)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        setattr(file_handler, _INSTALLED, True)
        logger.addHandler(file_handler)

    for name, level in overrides.items():
        logging.getLogger(name).setLevel(level)

    return logger
