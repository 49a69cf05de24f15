"""
Logging for the storefront widget.

The root logger gets one stdout handler the first time this module is
imported. Modules take a named logger and report cart restores, storage
failures and UI wiring problems through it:

    from storefront.logging import get_logger
    logger = get_logger(__name__)

    logger.info("Restored cart with 2 line(s)")
    logger.error(f"Failed to save cart to storage: {e}")

Level comes from LOG_LEVEL. STOREFRONT_LOG_FORMAT=simple drops the
timestamp, which reads better under pytest's captured output.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Storage keys and product names are short; anything longer is cut
DEFAULT_SANITIZE_LENGTH = 50


def _level_from_env() -> int:
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _install_handler() -> None:
    root = logging.getLogger()
    if root.handlers:
        # Host application already set up logging
        return

    level = _level_from_env()
    fmt = LOG_FORMAT
    if os.environ.get("STOREFRONT_LOG_FORMAT", "").lower() == "simple":
        fmt = LOG_FORMAT_SIMPLE

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    root.setLevel(level)
    root.addHandler(handler)

    # upstash-redis talks REST over httpx, one INFO line per cart read/write
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


_install_handler()


@cache
def get_logger(name: str) -> logging.Logger:
    """Named logger for a storefront module (pass __name__)."""
    return logging.getLogger(name)


def _escape_control_chars(value: str) -> str:
    """Keep a value on one log line (CWE-117)."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_string_for_logging(value: str | None, max_length: int = DEFAULT_SANITIZE_LENGTH) -> str:
    """
    Prepare a product name, toast message or storage key for a log line.

    Persisted cart data is not trusted, so names restored from storage may
    contain newlines or be arbitrarily long.

    Returns:
        The escaped value, truncated with "..." past max_length,
        or "N/A" when empty.
    """
    if not value:
        return "N/A"
    safe = _escape_control_chars(str(value))
    if len(safe) > max_length:
        return safe[:max_length] + "..."
    return safe


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "get_logger",
    "sanitize_string_for_logging",
]
