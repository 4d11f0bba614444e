"""
Logging setup for deckbound using rich.logging.

The library itself only creates module loggers. Applications (or the demo
scripts) call setup_logging() once to get rich formatted output.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_logging_configured = False


def setup_logging(
    level: int = logging.INFO,
    show_time: bool = True,
    show_path: bool = False,
    rich_tracebacks: bool = True,
    console: Optional[Console] = None,
) -> None:
    """
    Install a RichHandler on the root logger.

    Only the first call has an effect, so repeated calls from demo scripts
    and applications do not stack handlers.

    Args:
        level: Root logging level
        show_time: Show timestamp column
        show_path: Show source file column
        rich_tracebacks: Render exceptions with rich tracebacks
        console: Console to write to (stderr console if None)

    Example:
        >>> import logging
        >>> from deckbound.logging_config import setup_logging
        >>> setup_logging(level=logging.DEBUG)
    """
    global _logging_configured

    if _logging_configured:
        return

    if console is None:
        console = Console(stderr=True)

    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=False,
        log_time_format="[%X]",
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a deckbound module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def set_module_level(module_name: str, level: int) -> None:
    """
    Set the level of one module's logger.

    Args:
        module_name: Full module name (e.g., 'deckbound.binding')
        level: Logging level

    Example:
        >>> set_module_level('deckbound.controller', logging.DEBUG)
    """
    logging.getLogger(module_name).setLevel(level)
