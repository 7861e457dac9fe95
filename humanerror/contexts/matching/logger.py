"""
Matching context logger.

Provides logging interface for the matching context with automatic [match] prefix.
All matching modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[match]"


def _log_info(message: str) -> None:
    """Log info message with [match] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [match] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [match] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level matching-specific logging helpers


def log_resolution(text: str, matched_role: str, stage: str, is_safe: bool) -> None:
    """Log the outcome of one resolution and the stage that decided it."""
    safety = "safe" if is_safe else "replaceable"
    _log_info(f'"{text}" -> {matched_role} via {stage} ({safety})')


def log_fuzzy_scores(text: str, best_key: str, best_score: float, threshold: float) -> None:
    """Log the winning fuzzy candidate and whether it cleared the threshold."""
    verdict = "accepted" if best_score >= threshold else "rejected"
    _log_debug(
        f'Fuzzy best for "{text}": {best_key} score={best_score:.3f} '
        f"threshold={threshold:.2f} ({verdict})"
    )


def log_classifier_failure(text: str, error: BaseException) -> None:
    """Log a classifier failure; resolution continues with the fuzzy matcher."""
    _log_warning(f'Classifier failed for "{text}", falling back to local matching: {error!r}')


def log_classifier_ignored(text: str, answer: object) -> None:
    """Log a classifier answer that is not a catalog key."""
    _log_warning(f'Classifier answered unknown role {answer!r} for "{text}", treating as Default')
