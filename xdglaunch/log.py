"""Logging configuration for the launcher."""

import logging
import os

LOG_LEVEL = os.environ.get("XDGLAUNCH_LOG_LEVEL", "WARNING").upper()

logging.basicConfig(
    format="%(asctime)s.%(msecs)03d %(name)-22s %(levelname)-5s %(message)s",
    datefmt="%H:%M:%S",
    level=getattr(logging, LOG_LEVEL, logging.WARNING),
)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the 'xdglaunch.' namespace.

    Level controlled by XDGLAUNCH_LOG_LEVEL env var (default WARNING).
    """
    return logging.getLogger(f"xdglaunch.{name}")
