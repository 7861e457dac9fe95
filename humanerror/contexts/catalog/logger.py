"""
Catalog context logger.

Provides logging interface for the catalog context with automatic [catalog] prefix.
All catalog modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[catalog]"


def _log_info(message: str) -> None:
    """Log info message with [catalog] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [catalog] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [catalog] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_catalog_loaded(catalog_path: Path, role_count: int, alias_count: int) -> None:
    """Log a successfully loaded and validated catalog."""
    _log_info(f"Loaded {role_count} roles ({alias_count} aliases)")
    _log_debug(f"  Source: {catalog_path}")


def log_validation_failure(problems: list[str]) -> None:
    """Log every problem found by startup validation."""
    _log_error(f"Catalog validation failed with {len(problems)} problem(s)")
    for problem in problems:
        _log_error(f"  {problem}")
