"""Logger factory for the sentiment client."""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


ROOT_LOGGER = 'sentiment_core'


def setup_logger(name: str = ROOT_LOGGER, level: Optional[int] = None,
                 console: Optional[Console] = None) -> logging.Logger:
    """
    Configure a logger that writes through rich.

    Only the first call attaches a handler; later calls just adjust the
    level, so it is safe to call from both the CLI and library code.

    :param name: Logger name (children such as 'sentiment_core.core.transport'
                 propagate to it)
    :param level: Logging level; defaults to DEBUG when DEBUG_SENTIMENT is
                  set, WARNING otherwise
    :param console: Console to render to (stderr console if omitted)
    :return: Configured logger instance
    """
    if level is None:
        level = logging.DEBUG if os.environ.get('DEBUG_SENTIMENT') else logging.WARNING

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid adding duplicate handlers
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return logger

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter('%(name)s: %(message)s'))
    logger.addHandler(handler)
    return logger
