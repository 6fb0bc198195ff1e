"""Logging setup for blueprint.

All package loggers hang off the "blueprint" logger. The CLI calls
configure_logging() once per invocation with its --verbose/--quiet flags.
"""

import logging
import sys
from typing import Any

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PACKAGE_LOGGER = "blueprint"

# Names accepted wherever a level is given as text (profiles, audit events)
LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

# Modules that log every statement, package or archive entry they touch.
# Held at WARNING unless running verbose.
TECHNICAL_MODULES = [
    "blueprint.site",
    "blueprint.resources",
    "blueprint.security",
]

THIRD_PARTY_LOGGERS = ["duckdb", "markdown_it"]


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, usually called with __name__."""
    return logging.getLogger(name)


def resolve_level(level: Any) -> int:
    """Turn a level name ("info", "warn", ...) or number into a logging constant."""
    if isinstance(level, int):
        return level
    return LOG_LEVELS.get(str(level).lower(), DEFAULT_LOG_LEVEL)


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Install the package handler and set levels for a run.

    Args:
        verbose: Log debug output, including statements and package handling
        quiet: Log warnings and errors only; ignored when verbose is set
    """
    if verbose:
        package_level = logging.DEBUG
        technical_level = logging.DEBUG
    elif quiet:
        package_level = logging.WARNING
        technical_level = logging.ERROR
    else:
        package_level = DEFAULT_LOG_LEVEL
        technical_level = logging.WARNING

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(package_level)

    # One handler per process, however often this is called
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    # stdout carries exported documents
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    package_logger.addHandler(handler)

    for module_name in TECHNICAL_MODULES:
        logging.getLogger(module_name).setLevel(technical_level)


def suppress_third_party_loggers() -> None:
    """Keep library loggers at WARNING so they do not drown the run output."""
    for logger_name in THIRD_PARTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
