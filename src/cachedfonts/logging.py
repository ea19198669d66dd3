"""Diagnostic logging for cachedfonts.

Provides:
- VerboseLogger, an on/off capability each FontCache holds, so verbose
  output can be switched per cache instance and per test
- setup_logging(), which attaches a RichHandler for pretty console output

Nothing is printed unless verbose logging is enabled on the cache *and* the
"cachedfonts" logger has a handler, either from setup_logging() or from the
host application's own logging configuration.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "cachedfonts"
LOG_PREFIX = "[cachedfonts]"


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger under the cachedfonts namespace."""
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


class VerboseLogger:
    """Switchable diagnostic output for cache operations.

    Disabled by default. Toggle at any time; messages logged while disabled
    are dropped.

    Example:
        >>> verbose = VerboseLogger()
        >>> verbose.toggle(True)
        >>> verbose.log("Font has been loaded!")
    """

    def __init__(self, enabled: bool = False, logger: logging.Logger | None = None) -> None:
        self.enabled = enabled
        self._logger = logger or get_logger()

    def toggle(self, enabled: bool) -> None:
        """Enable or disable verbose output.

        The change itself is always logged, even when turning output off.
        """
        self.enabled = enabled
        self.log(
            f"{'Enabled' if enabled else 'Disabled'} verbose logging",
            force=True,
        )

    def log(self, *lines: str, force: bool = False) -> None:
        """Log lines as one message when enabled (or when force is set)."""
        if not (self.enabled or force):
            return
        self._logger.info("%s %s", LOG_PREFIX, "\n".join(lines))


def setup_logging(
    level: int = logging.INFO,
    console: Console | None = None,
) -> logging.Logger:
    """Attach a RichHandler to the cachedfonts logger.

    Calling this more than once replaces the previously installed handler
    instead of adding another.

    Args:
        level: Minimum level to emit.
        console: Optional Rich console; defaults to stderr.

    Returns:
        The configured "cachedfonts" logger.
    """
    logger = get_logger()
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger
