"""Logging helpers."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOGGER_NAME = "subdomain_stream"

# urllib3 logs every connection at DEBUG, which drowns per-line stream logs.
NOISY_LOGGERS = ("urllib3",)


def configure_logging(verbose: bool = False, *, quiet: bool = False) -> None:
    """Configure root logging once for CLI usage.

    ``quiet`` keeps only warnings and errors so the live result listing is
    not interleaved with lifecycle messages.
    """
    if quiet:
        level = logging.WARNING
    else:
        level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if verbose else logging.WARNING)


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the package logger, or a child logger for ``component``."""
    if component:
        return logging.getLogger(f"{LOGGER_NAME}.{component}")
    return logging.getLogger(LOGGER_NAME)
