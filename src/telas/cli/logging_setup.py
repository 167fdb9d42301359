"""Logging configuration for the command line."""

import logging


def setup_logging(log_level: int = logging.INFO) -> None:
    """Set up basic logging to stderr with timestamps."""
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
