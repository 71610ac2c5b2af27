"""General utilities for the signage player package."""

from __future__ import annotations

import os
import sys
import warnings

from loguru import logger
from urllib3.exceptions import InsecureRequestWarning

_LOGGER_CONFIGURED = False


def configure_logging(*, force: bool = False) -> None:
    """Set up the global Loguru logger with application defaults."""
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED and not force:
        return

    log_level = os.getenv("SIGNAGE_LOG_LEVEL", "INFO")
    diagnose = os.getenv("SIGNAGE_LOG_DIAGNOSE", "false").lower() in {
        "1",
        "true",
        "yes",
        "on",
    }

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        backtrace=False,
        diagnose=diagnose,
        enqueue=False,
        colorize=True,
    )

    _LOGGER_CONFIGURED = True


def suppress_insecure_request_warning(verify_ssl: bool) -> None:
    """Silence urllib3 insecure request warnings when SSL verification is disabled."""
    if verify_ssl:
        return

    warnings.filterwarnings(
        "ignore",
        category=InsecureRequestWarning,
        message="Unverified HTTPS request is being made to host",
    )


def parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


__all__ = [
    "configure_logging",
    "suppress_insecure_request_warning",
    "parse_bool",
    "logger",
]
