"""
Messaging context logger.

Provides logging interface for the messaging context with automatic [message] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[message]"


def _log_debug(message: str) -> None:
    """Log debug message with [message] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [message] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def log_template_fallback(role: str) -> None:
    """Log a role without templates being served from Default's list."""
    _log_warning(f"No templates for '{role}', using Default templates")


def log_message_generated(role: str, message) -> None:
    """Log the values drawn for one generated message."""
    cost = "none" if message.cost is None else f"${message.cost}.99"
    _log_debug(
        f"Generated message for '{role}': months={message.months} "
        f"viability={message.viability} cost={cost}"
    )
