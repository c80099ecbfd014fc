"""Loggers for the document build.

Every module logs through a child of the ``reactor_pdf`` logger, so one call
to :func:`configure_logging` from the command line decides what a build
prints. Library callers that never configure it get the host application's
logging setup through normal propagation.
"""

from __future__ import annotations

import logging
import typing as typ

PACKAGE_LOGGER = "reactor_pdf"
CONSOLE_FORMAT = "[reactor-pdf] %(levelname)s %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``reactor_pdf.<name>``, or the package logger without a name."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}" if name else PACKAGE_LOGGER)


def configure_logging(
    *, verbose: bool = False, stream: typ.TextIO | None = None
) -> logging.Logger:
    """Send build messages to the console.

    Parameters
    ----------
    verbose : bool, optional
        Emit DEBUG messages (interpolated descriptors, model dumps) as well
        as the INFO progress lines.
    stream : TextIO, optional
        Destination of the messages; ``sys.stderr`` when omitted.

    Returns
    -------
    logging.Logger
        The configured package logger. Repeated calls replace its handler
        rather than adding another one.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)
    return logger


__all__ = ["CONSOLE_FORMAT", "PACKAGE_LOGGER", "configure_logging", "get_logger"]
