"""Resolution result shared between the matching, messaging and analysis contexts."""

from dataclasses import dataclass
from typing import Any, Dict

from humanerror.contexts.catalog import DEFAULT_ROLE, RoleCatalog


@dataclass(frozen=True)
class ResolutionResult:
    """
    Outcome of resolving one job title.

    Attributes:
        matched_role: Canonical role key, or "Default" when nothing matched
        is_safe: Whether matched_role is a safe role (always derived from the catalog)
    """

    matched_role: str
    is_safe: bool

    @classmethod
    def for_role(cls, role: str, catalog: RoleCatalog) -> "ResolutionResult":
        """Build a result whose safety flag comes from the catalog."""
        return cls(matched_role=role, is_safe=catalog.is_safe(role))

    @property
    def is_default(self) -> bool:
        return self.matched_role == DEFAULT_ROLE

    def archetype_label(self, job_title: str) -> str:
        """Label shown to the user: the typed title for Default, the role otherwise."""
        return job_title if self.is_default else self.matched_role

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for a session store."""
        return {"matchedRole": self.matched_role, "isSafe": self.is_safe}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], catalog: RoleCatalog) -> "ResolutionResult":
        """
        Rebuild a stored result, re-deriving the safety flag from the catalog.

        Args:
            data: Dict produced by to_dict()
            catalog: Catalog the stored role must belong to

        Returns:
            ResolutionResult

        Raises:
            ValueError: If the data is malformed or names a role the catalog lacks
        """
        if not isinstance(data, dict):
            raise ValueError(f"Stored resolution must be a dict, got {type(data).__name__}")

        role = data.get("matchedRole")
        if not isinstance(role, str) or role not in catalog:
            raise ValueError(f"Stored resolution names unknown role: {role!r}")

        return cls.for_role(role, catalog)
