"""Custom exceptions for the matching context."""

from typing import Optional


class ClassifierError(Exception):
    """
    Exception raised when the upstream role classifier cannot give an answer.

    Always caught by the resolver, which falls back to local fuzzy matching.

    Attributes:
        message: Error description
        original_error: The provider or parsing error that caused the failure
    """

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        self.message = message
        self.original_error = original_error

        parts = [message]
        if original_error:
            parts.append(f"Original error: {original_error!r}")

        super().__init__("\n".join(parts))
