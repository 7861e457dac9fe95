"""
Fuzzy matching of free text against canonical role keys.

Scoring is lexical only:
- identical strings score 1.0
- containment (either string inside the other) scores 0.8 plus up to 0.2 for
  how close the lengths are
- everything else scores difflib's SequenceMatcher ratio

The best-scoring candidate wins; the first candidate in catalog order wins ties.
A best score under the threshold means no confident match (Default).
"""

import difflib
from typing import Sequence, Tuple

from humanerror.contexts.catalog import DEFAULT_ROLE
from humanerror.contexts.matching.logger import log_fuzzy_scores
from humanerror.utils.text_processing import casefold_key

DEFAULT_THRESHOLD = 0.6

CONTAINMENT_BASE = 0.8
CONTAINMENT_SPAN = 0.2


def similarity(a: str, b: str) -> float:
    """
    Score two case-folded strings in [0.0, 1.0].

    Args:
        a: First string (already normalized)
        b: Second string (already normalized)

    Returns:
        Similarity score, 0.0 if either string is empty

    Examples:
        >>> similarity("nurse", "nurse")
        1.0
        >>> similarity("engineer", "software engineer") > 0.8
        True
    """
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0

    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    if shorter in longer:
        return CONTAINMENT_BASE + CONTAINMENT_SPAN * len(shorter) / len(longer)

    return difflib.SequenceMatcher(None, a, b, autojunk=False).ratio()


def score_candidates(text: str, candidates: Sequence[str]) -> Tuple[str, float]:
    """
    Find the best candidate and its score, ignoring the threshold.

    Args:
        text: Raw input
        candidates: Candidate role keys in catalog order (Default is skipped)

    Returns:
        (best_key, best_score); (Default, 0.0) when nothing scores above zero
    """
    needle = casefold_key(text)
    best_key, best_score = DEFAULT_ROLE, 0.0

    for candidate in candidates:
        if candidate == DEFAULT_ROLE:
            continue
        score = similarity(needle, casefold_key(candidate))
        # Strictly greater keeps the earliest candidate on ties
        if score > best_score:
            best_key, best_score = candidate, score

    return best_key, best_score


def find_best_match(
    text: str, candidates: Sequence[str], threshold: float = DEFAULT_THRESHOLD
) -> str:
    """
    Return the single best-matching canonical key, or Default.

    Deterministic: identical input and candidate order always give the same key.

    Args:
        text: Raw job title
        candidates: Canonical role keys in catalog order
        threshold: Minimum score for a match to be accepted

    Returns:
        Best candidate key, or "Default" if the best score is below threshold

    Examples:
        >>> find_best_match("sofware enginer", ["Software Engineer", "Nurse"])
        'Software Engineer'
        >>> find_best_match("jbo", ["Software Engineer", "Nurse"])
        'Default'
    """
    best_key, best_score = score_candidates(text, candidates)
    log_fuzzy_scores(text, best_key, best_score, threshold)

    if best_score < threshold:
        return DEFAULT_ROLE
    return best_key
