"""
Role resolution pipeline.

Order of stages for one job title:
1. Alias resolver (exact name/alias hit ends resolution immediately)
2. Upstream classifier, awaited once; a non-default catalog key wins outright
3. Fuzzy matcher over catalog keys, with Default below the threshold

Classifier failures never reach the caller: they are logged and handled like a
"Default" answer, so resolution always completes with a role.
"""

from typing import Optional

from humanerror.contexts.catalog import DEFAULT_ROLE, RoleCatalog
from humanerror.contexts.matching.alias_resolver import AliasResolver
from humanerror.contexts.matching.classifier import NullClassifier, RoleClassifier
from humanerror.contexts.matching.fuzzy_matcher import DEFAULT_THRESHOLD, find_best_match
from humanerror.contexts.matching.logger import (
    log_classifier_failure,
    log_classifier_ignored,
    log_resolution,
)
from humanerror.contexts.matching.resolution import ResolutionResult
from humanerror.utils.text_processing import normalize_text

# Stage names reported in logs and via RoleResolver.last_stage
STAGE_EMPTY = "empty-input"
STAGE_ALIAS = "alias"
STAGE_CLASSIFIER = "classifier"
STAGE_FUZZY = "fuzzy"


class RoleResolver:
    """
    Resolves free-text job titles against one catalog.

    Args:
        catalog: Validated role catalog
        classifier: Optional upstream classifier (default: NullClassifier)
        threshold: Fuzzy acceptance threshold
    """

    def __init__(
        self,
        catalog: RoleCatalog,
        classifier: Optional[RoleClassifier] = None,
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self.catalog = catalog
        self.classifier = classifier or NullClassifier()
        self.threshold = threshold
        self.aliases = AliasResolver(catalog)
        self.last_stage: Optional[str] = None

    async def resolve(self, text: str) -> ResolutionResult:
        """
        Resolve a job title to a ResolutionResult.

        Args:
            text: Raw job title (empty or malformed input resolves to Default)

        Returns:
            ResolutionResult whose is_safe flag comes from the catalog
        """
        role, stage = await self._resolve_role(text)
        self.last_stage = stage

        result = ResolutionResult.for_role(role, self.catalog)
        log_resolution(normalize_text(text), result.matched_role, stage, result.is_safe)
        return result

    async def _resolve_role(self, text: str) -> tuple[str, str]:
        if not normalize_text(text):
            return DEFAULT_ROLE, STAGE_EMPTY

        alias_hit = self.aliases.resolve(text)
        if alias_hit is not None:
            return alias_hit, STAGE_ALIAS

        classified = await self._classify(text)
        if classified != DEFAULT_ROLE:
            return classified, STAGE_CLASSIFIER

        return find_best_match(text, self.catalog.keys(), self.threshold), STAGE_FUZZY

    async def _classify(self, text: str) -> str:
        """Ask the classifier once; any failure or unknown answer counts as Default."""
        try:
            answer = await self.classifier.classify(text)
        except Exception as e:
            log_classifier_failure(text, e)
            return DEFAULT_ROLE

        if answer == DEFAULT_ROLE:
            return DEFAULT_ROLE
        if not isinstance(answer, str) or answer not in self.catalog:
            log_classifier_ignored(text, answer)
            return DEFAULT_ROLE
        return answer
