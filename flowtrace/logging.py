"""Centralized logging for flowtrace.

All flowtrace loggers live under the ``flowtrace`` namespace and share one
handler installed on that namespace's root. Modules call
``get_logger(__name__)``; the CLI picks the level with
:func:`configure_verbosity`.

The handler writes to stderr. stdout belongs to results (``--stdout`` JSON).
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, Union

ROOT_LOGGER_NAME = "flowtrace"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LevelLike = Union[int, str]

# Handler owned by this module; None until the root logger is set up
_installed_handler: Optional[logging.Handler] = None


def _root() -> logging.Logger:
    return logging.getLogger(ROOT_LOGGER_NAME)


def _coerce_level(level: LevelLike) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'.")
    return value


def setup_root_logger(
    level: LevelLike = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Install the flowtrace handler once and return the namespace root.

    Later calls return the already configured root untouched; call
    :func:`reset_logging` first to reconfigure.

    Args:
        level: Initial level, as a number or a name such as ``"DEBUG"``.
        format_string: Record format; defaults to ``DEFAULT_FORMAT``.
        handler: Destination; defaults to a stderr stream handler.
    """
    global _installed_handler

    root = _root()
    if _installed_handler is not None:
        return root

    handler = handler or logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root.handlers = [handler]
    root.setLevel(_coerce_level(level))
    # Records still reach the root logger, where pytest's caplog listens
    root.propagate = True
    _installed_handler = handler
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``flowtrace`` namespace.

    Names outside the namespace are prefixed so that every logger inherits the
    shared handler and level, e.g. ``"scripts.demo"`` becomes
    ``"flowtrace.scripts.demo"``.
    """
    setup_root_logger()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    # Defer to the namespace root
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: LevelLike) -> int:
    """Apply ``level`` to the namespace root and its handlers; return it."""
    root = setup_root_logger()
    value = _coerce_level(level)
    root.setLevel(value)
    for handler in root.handlers:
        handler.setLevel(value)
    return value


def configure_verbosity(verbose: bool = False, quiet: bool = False) -> int:
    """Map CLI verbosity flags to a level, apply it, and return it.

    ``verbose`` wins over ``quiet`` when both are given.
    """
    if verbose:
        return set_global_log_level(logging.DEBUG)
    if quiet:
        return set_global_log_level(logging.WARNING)
    return set_global_log_level(logging.INFO)


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


@contextmanager
def debug_logging() -> Iterator[None]:
    """Log at DEBUG inside the block, then restore the previous level."""
    root = setup_root_logger()
    previous = root.level
    set_global_log_level(logging.DEBUG)
    try:
        yield
    finally:
        set_global_log_level(previous)


def reset_logging() -> None:
    """Remove the flowtrace handler and forget the configuration."""
    global _installed_handler

    root = _root()
    if _installed_handler is not None:
        root.removeHandler(_installed_handler)
    _installed_handler = None
    root.setLevel(logging.NOTSET)


setup_root_logger()
