"""
Analysis context logger.

Provides logging interface for the analysis context with automatic [analysis] prefix,
plus setup for command-line sessions.
"""

from pathlib import Path

from loguru import logger

from humanerror.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[analysis]"


def setup_analysis_logger(log_dir: Path = None, catalog_path: Path = None, verbose: bool = False) -> Path:
    """
    Setup logger for an analysis session.

    Args:
        log_dir: Directory for this session (default: a new directory under LOGS_PATH)
        catalog_path: Catalog in use, recorded in the provenance header
        verbose: Show debug output on the console

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="analysis",
        log_dir=log_dir,
        extra_provenance={"Catalog": catalog_path} if catalog_path else None,
        console_level="DEBUG" if verbose else "WARNING",
    )


def _log_info(message: str) -> None:
    """Log info message with [analysis] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [analysis] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [analysis] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_precomputed(session_id: str, matched_role: str) -> None:
    _log_debug(f"Stored resolution for session {session_id}: {matched_role}")


def log_consumed(session_id: str, matched_role: str) -> None:
    _log_debug(f"Consumed stored resolution for session {session_id}: {matched_role}")


def log_stale_session(session_id: str, error: BaseException) -> None:
    """Log a stored resolution that could not be used; the title is resolved again."""
    _log_warning(f"Discarding stored resolution for session {session_id}: {error}")


def log_analysis(job_title: str, result) -> None:
    """Log the outcome of one analysis."""
    _log_info(
        f'"{job_title}" -> {result.resolution.matched_role} '
        f"(safe={result.resolution.is_safe}, months={result.message.months})"
    )
