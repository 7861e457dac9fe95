"""
Shared utilities for Human Error 404.

Common functionality used across contexts:
- Logger setup
- Text normalization
- LLM provider access
"""

from humanerror.utils.text_processing import casefold_key, normalize_text

__all__ = ["casefold_key", "normalize_text"]
