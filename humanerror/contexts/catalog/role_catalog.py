"""
Role Catalog

Immutable mapping from canonical role names to their aliases, roast templates
and safety classification. A catalog is built explicitly (from a dict or a YAML
file) and handed to the resolver and generator; nothing reads it from global state.

Catalog YAML layout:
    safe_roles:
      - Plumber
    roles:
      Software Engineer:
        aliases: [Developer, Programmer]
        templates:
          - "You have {months} months left."
      Default:
        templates:
          - "Unknown role. Viability: {viability}%."

Role order in the file is preserved; the fuzzy matcher relies on it for tie-breaks.
"""

import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from humanerror.contexts.catalog.exceptions import CatalogIntegrityError, CatalogLoadError
from humanerror.contexts.catalog.logger import log_catalog_loaded, log_validation_failure
from humanerror.utils.text_processing import casefold_key, normalize_text

load_dotenv()
BUNDLED_CATALOG_PATH = Path(__file__).parent / "data" / "roles.yaml"
ROLE_CATALOG_PATH = Path(os.getenv("ROLE_CATALOG_PATH") or BUNDLED_CATALOG_PATH)

# Reserved key meaning "no confident match"
DEFAULT_ROLE = "Default"

# Placeholder names a template may use. "days" is a legacy spelling of "months".
PLACEHOLDERS = ("months", "days", "viability")

PLACEHOLDER_PATTERN = re.compile(r"\{\s*([A-Za-z_]\w*)\s*\}")

# Template engine block and comment delimiters, reserved in catalog templates
BLOCK_START = "<%%"
BLOCK_END = "%%>"
COMMENT_START = "<#"
COMMENT_END = "#>"


@dataclass(frozen=True)
class RoleEntry:
    """
    Everything the engine knows about one canonical role.

    Attributes:
        key: Canonical role name (unique within the catalog)
        aliases: Case-insensitive synonyms, in catalog order
        templates: Roast templates, in catalog order
        is_safe: Whether the role is immune from replacement
    """

    key: str
    aliases: Tuple[str, ...] = ()
    templates: Tuple[str, ...] = ()
    is_safe: bool = False


class RoleCatalog:
    """
    Ordered, read-only collection of RoleEntry objects.

    Example:
        >>> catalog = RoleCatalog.from_dict({
        ...     "safe_roles": ["Plumber"],
        ...     "roles": {
        ...         "Plumber": {"aliases": ["Pipefitter"], "templates": ["Safe."]},
        ...         "Default": {"templates": ["{months} months left."]},
        ...     },
        ... })
        >>> catalog.is_safe("Plumber")
        True
    """

    def __init__(self, entries: Iterable[RoleEntry], safe_roles: Optional[Iterable[str]] = None):
        """
        Args:
            entries: Role entries in catalog order
            safe_roles: Optional safe role keys; when given, they override each
                        entry's is_safe flag and are checked by validate()
        """
        self._declared_safe_roles: Tuple[str, ...] = tuple(safe_roles or ())
        self._entries: Dict[str, RoleEntry] = {}
        for entry in entries:
            if safe_roles is not None:
                entry = replace(entry, is_safe=entry.key in self._declared_safe_roles)
            if entry.key in self._entries:
                raise CatalogLoadError(f"Duplicate role key: '{entry.key}'")
            self._entries[entry.key] = entry

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoleCatalog":
        """
        Build a catalog from plain data (the parsed YAML layout).

        Args:
            data: Dict with a "roles" mapping and an optional "safe_roles" list

        Returns:
            RoleCatalog (not yet validated)

        Raises:
            CatalogLoadError: If the data does not have the expected shape
        """
        if not isinstance(data, dict) or not isinstance(data.get("roles"), dict):
            raise CatalogLoadError("Catalog must contain a 'roles' mapping")

        safe_roles = data.get("safe_roles") or []
        if not isinstance(safe_roles, list):
            raise CatalogLoadError("'safe_roles' must be a list of role names")
        safe_roles = [str(key) for key in safe_roles]

        entries = []
        for key, body in data["roles"].items():
            body = body or {}
            if not isinstance(body, dict):
                raise CatalogLoadError(f"Role '{key}' must be a mapping")

            aliases = _dedupe(normalize_text(alias) for alias in body.get("aliases") or [])
            templates = tuple(str(template) for template in body.get("templates") or [])

            entries.append(
                RoleEntry(
                    key=str(key),
                    aliases=tuple(alias for alias in aliases if alias),
                    templates=templates,
                )
            )

        return cls(entries, safe_roles=safe_roles)

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def keys(self) -> Tuple[str, ...]:
        """Return canonical role keys in catalog order (Default included)."""
        return tuple(self._entries)

    def entries(self) -> Tuple[RoleEntry, ...]:
        """Return all entries in catalog order."""
        return tuple(self._entries.values())

    def entry(self, key: str) -> Optional[RoleEntry]:
        """Return the entry for a canonical key, or None."""
        return self._entries.get(key)

    def is_safe(self, key: str) -> bool:
        """Return True if the role is in the safe set. Unknown keys are never safe."""
        entry = self._entries.get(key)
        return entry.is_safe if entry else False

    def safe_roles(self) -> Tuple[str, ...]:
        """Return safe role keys in catalog order."""
        return tuple(entry.key for entry in self._entries.values() if entry.is_safe)

    def templates_for(self, key: str) -> Tuple[str, ...]:
        """
        Return the templates for a role, falling back to Default's.

        Args:
            key: Canonical role key (unknown keys fall back too)

        Returns:
            Tuple of template strings (empty only for a catalog that failed validation)
        """
        entry = self._entries.get(key)
        if entry and entry.templates:
            return entry.templates

        default = self._entries.get(DEFAULT_ROLE)
        return default.templates if default else ()

    @property
    def alias_count(self) -> int:
        return sum(len(entry.aliases) for entry in self._entries.values())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[RoleEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    # =========================================================================
    # SEARCH TERMS
    # =========================================================================

    def all_terms(self) -> Tuple[str, ...]:
        """
        Return every searchable term: canonical names followed by their aliases.

        Default is not a searchable term. Duplicates (case-insensitive) are dropped,
        keeping the first spelling seen.
        """
        terms = []
        for entry in self._entries.values():
            if entry.key == DEFAULT_ROLE:
                continue
            terms.append(entry.key)
            terms.extend(entry.aliases)
        return _dedupe(terms)

    def suggest(self, query: str, limit: int = 10) -> List[str]:
        """
        Autocomplete suggestions: terms containing the query, case-insensitively.

        Args:
            query: Partial job title typed so far
            limit: Maximum number of suggestions

        Returns:
            Matching terms in catalog order (empty for an empty query)
        """
        needle = casefold_key(query)
        if not needle:
            return []

        matches = [term for term in self.all_terms() if needle in term.casefold()]
        return matches[:limit]

    def is_known_term(self, text: str) -> bool:
        """Return True if text exactly matches a canonical name or alias (case-insensitive)."""
        needle = casefold_key(text)
        return bool(needle) and any(term.casefold() == needle for term in self.all_terms())

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate(self) -> None:
        """
        Check catalog integrity.

        Collects every problem before raising, so a broken catalog is reported in
        one pass.

        Raises:
            CatalogIntegrityError: If Default is missing or has no templates, a safe
                role is not a catalog key, an alias is claimed twice, or a template
                uses an unknown or malformed placeholder or a reserved delimiter
        """
        problems = []

        default = self._entries.get(DEFAULT_ROLE)
        if default is None:
            problems.append(f"Missing required '{DEFAULT_ROLE}' role")
        elif not default.templates:
            problems.append(f"'{DEFAULT_ROLE}' role has no templates")

        for safe_key in self._declared_safe_roles:
            if safe_key not in self._entries:
                problems.append(f"Safe role '{safe_key}' is not a catalog key")

        owners: Dict[str, str] = {}
        for entry in self._entries.values():
            if entry.key == DEFAULT_ROLE:
                if entry.aliases:
                    problems.append(f"'{DEFAULT_ROLE}' role cannot have aliases")
                continue
            for term in (entry.key, *entry.aliases):
                folded = term.casefold()
                owner = owners.get(folded)
                if owner is not None and owner != entry.key:
                    problems.append(f"Term '{term}' is claimed by both '{owner}' and '{entry.key}'")
                else:
                    owners[folded] = entry.key

        for entry in self._entries.values():
            for index, template in enumerate(entry.templates):
                problems.extend(_template_problems(entry.key, index, template))

        if problems:
            log_validation_failure(problems)
            raise CatalogIntegrityError(problems)


def _template_problems(key: str, index: int, template: str) -> List[str]:
    """Return placeholder and delimiter problems for one template."""
    problems = []
    found = PLACEHOLDER_PATTERN.findall(template)

    for name in found:
        if name not in PLACEHOLDERS:
            problems.append(f"'{key}' template #{index} uses unknown placeholder '{{{name}}}'")

    # Any brace outside a well-formed placeholder would break rendering
    if template.count("{") != len(found) or template.count("}") != len(found):
        problems.append(f"'{key}' template #{index} has malformed braces")

    for delimiter in (BLOCK_START, COMMENT_START):
        if delimiter in template:
            problems.append(f"'{key}' template #{index} contains reserved sequence '{delimiter}'")

    return problems


def _dedupe(values: Iterable[str]) -> Tuple[str, ...]:
    """Drop case-insensitive duplicates, keeping first occurrence and order."""
    seen = set()
    result = []
    for value in values:
        folded = value.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        result.append(value)
    return tuple(result)


def load_catalog(catalog_path: Path = None) -> RoleCatalog:
    """
    Load and validate a role catalog from YAML.

    Args:
        catalog_path: Path to catalog YAML (defaults to ROLE_CATALOG_PATH env variable,
                      then the catalog bundled with the package)

    Returns:
        Validated RoleCatalog

    Raises:
        CatalogLoadError: If the file is missing, unreadable or has the wrong shape
        CatalogIntegrityError: If the catalog fails startup validation
    """
    if catalog_path is None:
        catalog_path = ROLE_CATALOG_PATH
    catalog_path = Path(catalog_path)

    if not catalog_path.exists():
        raise CatalogLoadError("Catalog file not found", catalog_path)

    try:
        data = OmegaConf.to_container(OmegaConf.load(catalog_path), resolve=True)
    except (OmegaConfBaseException, OSError, ValueError) as e:
        raise CatalogLoadError(f"Could not parse catalog: {e}", catalog_path) from e

    try:
        catalog = RoleCatalog.from_dict(data)
    except CatalogLoadError as e:
        raise CatalogLoadError(e.message, catalog_path) from e

    catalog.validate()
    log_catalog_loaded(catalog_path, len(catalog), catalog.alias_count)
    return catalog
