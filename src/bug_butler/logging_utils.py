# logging_utils.py
# Process-level loguru setup. Log lines go through rich so they do not
# tear the chat transcript on screen.

from loguru import logger
from rich.logging import RichHandler

from bug_butler import display

_CONFIGURED_LEVEL: str | None = None


def configure_logging(level: str = "WARNING") -> None:
    """Configure loguru once per process. Repeat calls with the same level are no-ops."""
    global _CONFIGURED_LEVEL
    level = level.upper()
    if level == _CONFIGURED_LEVEL:
        return

    logger.remove()
    logger.add(
        RichHandler(
            console=display.console,
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        ),
        level=level,
        format="{message}",
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED_LEVEL = level
