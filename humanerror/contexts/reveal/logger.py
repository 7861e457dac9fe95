"""
Reveal context logger.

Provides logging interface for the reveal context with automatic [reveal] prefix.
Reveal problems are never user-visible, so everything here logs at debug level.
"""

from loguru import logger

CONTEXT_PREFIX = "[reveal]"


def _log_debug(message: str) -> None:
    """Log debug message with [reveal] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_reveal_started(slot: str, length: int) -> None:
    _log_debug(f"{slot}: revealing {length} characters")


def log_reveal_cancelled(slot: str, position: int, length: int) -> None:
    _log_debug(f"{slot}: cancelled at {position}/{length}")


def log_reveal_finished(slot: str, length: int) -> None:
    _log_debug(f"{slot}: done ({length} characters)")


def log_listener_error(slot: str, error: BaseException) -> None:
    """Log a subscriber that raised; the reveal carries on."""
    _log_debug(f"{slot}: listener raised {error!r}, ignoring")


def log_schedule_error(slot: str, error: BaseException) -> None:
    """Log a timer that could not be scheduled (e.g., the loop is already closed)."""
    _log_debug(f"{slot}: could not schedule timer: {error!r}")
