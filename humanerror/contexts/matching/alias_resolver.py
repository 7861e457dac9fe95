"""
Exact alias resolution.

Maps a job title to its canonical role when it exactly matches (case-insensitively)
a canonical role name or one of its aliases. Anything looser is left to the fuzzy
matcher.
"""

from typing import Dict, Optional

from humanerror.contexts.catalog import DEFAULT_ROLE, RoleCatalog
from humanerror.utils.text_processing import casefold_key


class AliasResolver:
    """
    Case-folded index from every canonical name and alias to its owning role.

    The index is built once per catalog; lookups are a single dict access.
    Default is never a lookup target.
    """

    def __init__(self, catalog: RoleCatalog):
        self._index: Dict[str, str] = {}
        for entry in catalog:
            if entry.key == DEFAULT_ROLE:
                continue
            for term in (entry.key, *entry.aliases):
                # First owner wins; validated catalogs have no collisions
                self._index.setdefault(casefold_key(term), entry.key)

    def resolve(self, text: str) -> Optional[str]:
        """
        Resolve text to a canonical role key by exact alias or name match.

        Args:
            text: Raw job title

        Returns:
            Canonical role key, or None when there is no exact match

        Examples:
            >>> resolver.resolve("  branch MANAGER ")
            'Branch Manager'
            >>> resolver.resolve("Regional Manager")
            'Branch Manager'
            >>> resolver.resolve("jbo") is None
            True
        """
        needle = casefold_key(text)
        if not needle:
            return None
        return self._index.get(needle)

    def __len__(self) -> int:
        return len(self._index)


def resolve_alias(text: str, catalog: RoleCatalog) -> Optional[str]:
    """One-off alias lookup. Prefer AliasResolver when resolving repeatedly."""
    return AliasResolver(catalog).resolve(text)
