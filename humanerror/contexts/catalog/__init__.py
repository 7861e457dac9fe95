"""
Catalog Context

Responsibilities:
- Loads the role catalog (aliases, templates, safe roles) from YAML
- Validates catalog integrity at startup
- Answers lookups and autocomplete queries over canonical names and aliases

Owns: Role data and its integrity rules
Never: Matches free text or picks templates
"""

from humanerror.contexts.catalog.exceptions import CatalogIntegrityError, CatalogLoadError
from humanerror.contexts.catalog.role_catalog import (
    DEFAULT_ROLE,
    PLACEHOLDERS,
    RoleCatalog,
    RoleEntry,
    load_catalog,
)

__all__ = [
    "CatalogIntegrityError",
    "CatalogLoadError",
    "DEFAULT_ROLE",
    "PLACEHOLDERS",
    "RoleCatalog",
    "RoleEntry",
    "load_catalog",
]
