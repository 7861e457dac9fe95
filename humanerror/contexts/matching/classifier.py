"""
Upstream role classifiers.

A classifier is a best-effort collaborator that maps a job title to a catalog key
(or "Default" when it is not sure). The resolver awaits it at most once per
resolution and treats any failure as a "Default" answer.

Implementations:
- NullClassifier: never has an opinion (used when no classifier is configured)
- FunctionClassifier: wraps any async callable, e.g. a deterministic test stub
- LLMRoleClassifier: asks an LLM provider to pick one catalog key
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Sequence

from humanerror.contexts.catalog import DEFAULT_ROLE
from humanerror.contexts.matching.exceptions import ClassifierError
from humanerror.utils.llm import LLMProvider, get_provider, parse_json_object

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

_SYSTEM_PROMPT = """\
You are a job title classifier. Map the job title you are given to exactly one of
the allowed role archetypes. Return ONLY a JSON object of the form {"role": "<archetype>"}.
If no archetype is a reasonable fit, return {"role": "Default"}."""

_USER_PROMPT_TEMPLATE = """\
Allowed archetypes:
{archetypes}

Job title: {job_title}"""


class RoleClassifier(ABC):
    """Capability interface for upstream role classification."""

    @abstractmethod
    async def classify(self, text: str) -> str:
        """
        Classify a job title.

        Args:
            text: Job title as typed by the user

        Returns:
            A role key, or "Default" when the classifier is not confident

        Raises:
            ClassifierError: (or any other exception) on failure; callers must
                treat failures like a "Default" answer
        """


class NullClassifier(RoleClassifier):
    """Classifier that always defers to local matching."""

    async def classify(self, text: str) -> str:
        return DEFAULT_ROLE


class FunctionClassifier(RoleClassifier):
    """Adapter turning an async function into a RoleClassifier."""

    def __init__(self, func: Callable[[str], Awaitable[str]]):
        self._func = func

    async def classify(self, text: str) -> str:
        return await self._func(text)


class LLMRoleClassifier(RoleClassifier):
    """
    Classifier backed by an LLM provider.

    Each call is a single attempt (no retries) run in a worker thread so the
    event loop keeps ticking, bounded by timeout_s.

    Example:
        classifier = LLMRoleClassifier(catalog.keys(), provider_name="openai")
        role = await classifier.classify("code monkey")
    """

    def __init__(
        self,
        candidates: Sequence[str],
        provider: Optional[LLMProvider] = None,
        provider_name: Optional[str] = None,
        model: Optional[str] = None,
        timeout_s: float = 5.0,
    ):
        self.candidates = [key for key in candidates if key != DEFAULT_ROLE]
        self.timeout_s = timeout_s
        self._provider = provider
        self._provider_name = provider_name
        self._model = model

    def _get_provider(self) -> LLMProvider:
        # Created lazily so a missing API key only matters once classification is attempted
        if self._provider is None:
            self._provider = get_provider(
                provider_name=self._provider_name, model=self._model, timeout=self.timeout_s
            )
        return self._provider

    def build_prompt(self, text: str) -> str:
        """Build the user prompt listing the allowed archetypes."""
        archetypes = "\n".join(f"- {key}" for key in self.candidates)
        return _USER_PROMPT_TEMPLATE.format(archetypes=archetypes, job_title=text[:200])

    async def classify(self, text: str) -> str:
        try:
            provider = self._get_provider()
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    provider.generate, _SYSTEM_PROMPT, self.build_prompt(text), max_attempts=1
                ),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise ClassifierError(f"Classifier timed out after {self.timeout_s:.1f}s", e) from e
        except Exception as e:
            raise ClassifierError("Classifier request failed", e) from e

        role = parse_json_object(response.content).get("role")
        if not isinstance(role, str) or not role.strip():
            raise ClassifierError(f"Malformed classifier response: {response.content[:200]!r}")

        return role.strip()
