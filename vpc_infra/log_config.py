"""Logging configuration for the VPC planner."""

import logging
import sys


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Args:
        name: Logger name, typically __name__ from calling module.
    """
    return logging.getLogger(name)


def set_global_log_level(level: int) -> None:
    """Set the logging level for the vpc_infra and vpc_api loggers.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    for package in ("vpc_infra", "vpc_api"):
        logging.getLogger(package).setLevel(level)
