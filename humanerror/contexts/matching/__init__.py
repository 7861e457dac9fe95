"""
Matching Context

Responsibilities:
- Resolves exact aliases and canonical names case-insensitively
- Scores free text against canonical roles with a lexical fuzzy matcher
- Consults an optional upstream classifier with a local fallback

Owns: The mapping from free text to a canonical role
Never: Picks templates or touches reveal state
"""

from humanerror.contexts.matching.alias_resolver import AliasResolver, resolve_alias
from humanerror.contexts.matching.classifier import (
    FunctionClassifier,
    LLMRoleClassifier,
    NullClassifier,
    RoleClassifier,
)
from humanerror.contexts.matching.exceptions import ClassifierError
from humanerror.contexts.matching.fuzzy_matcher import DEFAULT_THRESHOLD, find_best_match, similarity
from humanerror.contexts.matching.resolution import ResolutionResult
from humanerror.contexts.matching.resolver import RoleResolver

__all__ = [
    "AliasResolver",
    "ClassifierError",
    "DEFAULT_THRESHOLD",
    "FunctionClassifier",
    "LLMRoleClassifier",
    "NullClassifier",
    "ResolutionResult",
    "RoleClassifier",
    "RoleResolver",
    "find_best_match",
    "resolve_alias",
    "similarity",
]
