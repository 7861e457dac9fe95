"""
Text normalization helpers shared by the catalog and matching contexts.

Job titles arrive straight from a text box, so they may carry smart quotes,
non-breaking spaces, stray zero-width characters and uneven whitespace.
"""

import re
import unicodedata

# Unicode replacements: problematic char → ASCII equivalent
UNICODE_REPLACEMENTS = {
    # Spaces
    "\N{NO-BREAK SPACE}": " ",
    "\N{NARROW NO-BREAK SPACE}": " ",
    # Zero-width characters → remove
    "\N{ZERO WIDTH SPACE}": "",
    "\N{ZERO WIDTH NON-JOINER}": "",
    "\N{ZERO WIDTH JOINER}": "",
    "\N{WORD JOINER}": "",
    "\N{ZERO WIDTH NO-BREAK SPACE}": "",  # BOM
    # Quotes
    "\N{LEFT SINGLE QUOTATION MARK}": "'",
    "\N{RIGHT SINGLE QUOTATION MARK}": "'",
    "\N{LEFT DOUBLE QUOTATION MARK}": '"',
    "\N{RIGHT DOUBLE QUOTATION MARK}": '"',
    # Dashes
    "\N{EN DASH}": "-",
    "\N{EM DASH}": "-",
}

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """
    Normalize a raw job title for display and comparison.

    Applies NFKC normalization, replaces problematic unicode with ASCII
    equivalents, collapses internal whitespace and trims the ends.

    Args:
        text: Raw user input (None is treated as empty)

    Returns:
        Normalized text, possibly empty

    Examples:
        >>> normalize_text("  Branch  Manager ")
        'Branch Manager'
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFKC", text)
    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)

    return _WHITESPACE.sub(" ", text).strip()


def casefold_key(text: str) -> str:
    """Normalize and case-fold text for case-insensitive lookups."""
    return normalize_text(text).casefold()
