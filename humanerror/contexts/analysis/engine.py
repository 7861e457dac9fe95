"""
End-to-end analysis: job title in, resolved archetype and finished roast out.

The engine accepts either a fresh job title or a resolution precomputed by an
earlier step and parked in a session store. A stored resolution is consumed
exactly once (removed from the store as it is read), so navigating back never
replays a stale result.
"""

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from omegaconf import DictConfig

from humanerror.config import load_settings
from humanerror.contexts.analysis.logger import (
    log_analysis,
    log_consumed,
    log_precomputed,
    log_stale_session,
)
from humanerror.contexts.analysis.session_store import (
    InMemorySessionStore,
    JsonFileSessionStore,
    SessionStore,
    SessionStoreError,
)
from humanerror.contexts.catalog import RoleCatalog, load_catalog
from humanerror.contexts.matching import (
    LLMRoleClassifier,
    NullClassifier,
    ResolutionResult,
    RoleClassifier,
    RoleResolver,
)
from humanerror.contexts.messaging import GeneratedMessage, MessageGenerator
from humanerror.contexts.reveal import (
    DEFAULT_SECONDARY_DELAY,
    DEFAULT_TICK_INTERVAL,
    MessageReveal,
)
from humanerror.utils.text_processing import normalize_text


@dataclass(frozen=True)
class AnalysisResult:
    """
    Everything a display layer needs for one analysis.

    Attributes:
        job_title: Title as entered (normalized)
        resolution: Matched role and safety flag
        message: Generated roast and optional replacement-cost line
        archetype_label: Label to show; the entered title when nothing matched
        from_session: True if the resolution came from a session store
    """

    job_title: str
    resolution: ResolutionResult
    message: GeneratedMessage
    archetype_label: str
    from_session: bool = False


class RoastEngine:
    """
    Wires catalog, resolver, generator and session store together.

    Args:
        catalog: Validated role catalog
        resolver: Role resolver (default: no classifier, default threshold)
        generator: Message generator (default: non-deterministic randomness)
        store: Session store for precomputed resolutions (default: in memory)
        tick_interval: Reveal tick in seconds, used by new_reveal()
        secondary_delay: Delay before the secondary reveal, used by new_reveal()
    """

    def __init__(
        self,
        catalog: RoleCatalog,
        resolver: Optional[RoleResolver] = None,
        generator: Optional[MessageGenerator] = None,
        store: Optional[SessionStore] = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        secondary_delay: float = DEFAULT_SECONDARY_DELAY,
    ):
        self.catalog = catalog
        self.resolver = resolver or RoleResolver(catalog)
        self.generator = generator or MessageGenerator(catalog)
        self.store = store or InMemorySessionStore()
        self.tick_interval = tick_interval
        self.secondary_delay = secondary_delay

    @classmethod
    def from_settings(
        cls,
        settings: Optional[DictConfig] = None,
        catalog: Optional[RoleCatalog] = None,
        classifier: Optional[RoleClassifier] = None,
        rng: Optional[random.Random] = None,
    ) -> "RoastEngine":
        """
        Build an engine from settings, validating the catalog up front.

        Args:
            settings: Settings from load_settings() (loaded if omitted)
            catalog: Catalog to use (default: load_catalog())
            classifier: Explicit classifier, overriding the classifier settings
            rng: Random source for message generation

        Returns:
            RoastEngine

        Raises:
            CatalogLoadError, CatalogIntegrityError: If the catalog is unusable
        """
        if settings is None:
            settings = load_settings()
        if catalog is None:
            catalog = load_catalog()

        if classifier is None:
            if settings.classifier.enabled:
                classifier = LLMRoleClassifier(
                    catalog.keys(),
                    provider_name=settings.classifier.provider,
                    model=settings.classifier.model,
                    timeout_s=settings.classifier.timeout_s,
                )
            else:
                classifier = NullClassifier()

        generator = MessageGenerator(catalog, rng=rng)
        generator.registry.warm(catalog)

        store_path = settings.session.store_path
        store = JsonFileSessionStore(Path(store_path)) if store_path else InMemorySessionStore()

        return cls(
            catalog,
            resolver=RoleResolver(catalog, classifier, threshold=settings.matching.threshold),
            generator=generator,
            store=store,
            tick_interval=settings.reveal.tick_interval_ms / 1000,
            secondary_delay=settings.reveal.secondary_delay_ms / 1000,
        )

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    async def precompute(self, session_id: str, job_title: str) -> ResolutionResult:
        """
        Resolve a job title now and park the result for a later analyze() call.

        Args:
            session_id: Key the result is stored under
            job_title: Raw job title

        Returns:
            The stored ResolutionResult
        """
        resolution = await self.resolver.resolve(job_title)
        self.store.put(session_id, resolution.to_dict())
        log_precomputed(session_id, resolution.matched_role)
        return resolution

    async def resolve(
        self, job_title: str, session_id: Optional[str] = None
    ) -> tuple[ResolutionResult, bool]:
        """
        Resolve a job title, preferring a stored resolution for the session.

        Returns:
            (resolution, from_session)
        """
        if session_id is not None:
            stored = self._consume_stored(session_id)
            if stored is not None:
                return stored, True

        return await self.resolver.resolve(job_title), False

    def _consume_stored(self, session_id: str) -> Optional[ResolutionResult]:
        """Take the stored resolution out of the store; None if absent or unusable."""
        try:
            entry = self.store.pop(session_id)
        except SessionStoreError as e:
            log_stale_session(session_id, e)
            return None

        if entry is None:
            return None

        try:
            resolution = ResolutionResult.from_dict(entry, self.catalog)
        except ValueError as e:
            log_stale_session(session_id, e)
            return None

        log_consumed(session_id, resolution.matched_role)
        return resolution

    # =========================================================================
    # ANALYSIS
    # =========================================================================

    async def analyze(self, job_title: str, session_id: Optional[str] = None) -> AnalysisResult:
        """
        Resolve a job title and generate its roast.

        Args:
            job_title: Raw job title
            session_id: Optional session whose precomputed resolution should be used

        Returns:
            AnalysisResult
        """
        title = normalize_text(job_title)
        resolution, from_session = await self.resolve(title, session_id)
        message = self.generator.generate(resolution.matched_role, resolution.is_safe)

        result = AnalysisResult(
            job_title=title,
            resolution=resolution,
            message=message,
            archetype_label=resolution.archetype_label(title),
            from_session=from_session,
        )
        log_analysis(title, result)
        return result

    def new_reveal(self) -> MessageReveal:
        """Create a MessageReveal with this engine's timing settings."""
        return MessageReveal(tick_interval=self.tick_interval, secondary_delay=self.secondary_delay)
