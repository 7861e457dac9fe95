"""Custom exceptions for the catalog context."""

from pathlib import Path
from typing import List, Optional


class CatalogLoadError(Exception):
    """
    Exception raised when a catalog file cannot be read or has the wrong shape.

    Attributes:
        message: Error description
        catalog_path: Path of the catalog being loaded, if any
    """

    def __init__(self, message: str, catalog_path: Optional[Path] = None):
        self.message = message
        self.catalog_path = catalog_path

        parts = [message]
        if catalog_path:
            parts.append(f"Catalog: {catalog_path}")

        super().__init__("\n".join(parts))


class CatalogIntegrityError(ValueError):
    """
    Exception raised when startup validation finds a broken catalog.

    A catalog without a usable Default template list, or with aliases claimed by
    more than one role, cannot guarantee that every input yields a message, so it
    is rejected before any request is served.

    Attributes:
        problems: Every integrity problem found (validation does not stop at the first)
    """

    def __init__(self, problems: List[str]):
        self.problems = list(problems)

        lines = [f"Role catalog failed validation ({len(self.problems)} problem(s)):"]
        lines.extend(f"  - {problem}" for problem in self.problems)

        super().__init__("\n".join(lines))
