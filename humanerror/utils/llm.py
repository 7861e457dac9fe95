"""
LLM provider access for the role classifier.

A provider wraps one vendor SDK behind `generate(system_prompt, user_prompt)`.
SDKs are imported lazily, so the engine runs without them unless the classifier
is enabled. Classification answers are short JSON objects; `parse_json_object`
digs one out of whatever the model actually returned.
"""

import importlib
import json
import os
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Optional, TypeVar

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

# Retry configuration
MAX_RETRIES = 5
BASE_DELAY = 1.0

# A classification answer is one short JSON object
MAX_OUTPUT_TOKENS = 256

T = TypeVar("T")


def _retry_with_backoff(
    operation: Callable[[], T],
    retryable_exception: type[Exception],
    error_message: str,
    max_attempts: int = MAX_RETRIES,
) -> T:
    """
    Run operation, retrying with exponential backoff on one exception type.

    Args:
        operation: Zero-argument callable performing the request
        retryable_exception: Exception type that triggers another attempt
        error_message: Prefix for the retry warning (e.g., "Rate limit hit")
        max_attempts: Total attempts; 1 means no retries
    """
    attempt = 1
    while True:
        try:
            return operation()
        except retryable_exception:
            if attempt >= max_attempts:
                raise
            delay = BASE_DELAY * 2 ** (attempt - 1)
            logger.warning(f"{error_message}, retrying in {delay:.1f}s ({attempt}/{max_attempts})")
            time.sleep(delay)
            attempt += 1


@dataclass
class LLMResponse:
    """Text returned by a provider plus token accounting."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int


# =============================================================================
# PROVIDERS
# =============================================================================


class LLMProvider(ABC):
    """
    Base class for vendor providers.

    Subclasses declare the SDK package, API key variable and default model, and
    implement `_connect` (build the client) and `_call_api` (one request).
    Test doubles may skip `__init__` entirely; they only need `_call_api`,
    `_retryable_exception`, `_retry_message` and a call to `update_model`.
    """

    _provider_prefix: str
    _package: str
    _api_key_env: str
    _default_model: str
    _retry_message: str = "Provider busy"
    _retryable_exception: type[Exception]

    name: str
    model: str

    def __init__(self, model: Optional[str] = None, timeout: Optional[float] = None):
        try:
            sdk = importlib.import_module(self._package)
        except ImportError:
            raise ImportError(
                f"{self._package} package required. Install with: pip install 'humanerror[llm]'"
            )

        api_key = os.getenv(self._api_key_env)
        if not api_key:
            raise ValueError(f"{self._api_key_env} environment variable not set")

        client_kwargs: Dict[str, Any] = {"api_key": api_key}
        if timeout is not None:
            client_kwargs["timeout"] = timeout

        self.client = self._connect(sdk, client_kwargs)
        self.update_model(model or self._default_model)

    def update_model(self, model: str):
        """Switch model and refresh the display name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    def _connect(self, sdk, client_kwargs: Dict[str, Any]):
        """Build the SDK client and record the SDK's retryable exception."""
        raise NotImplementedError

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """One request, no retries."""

    def generate(
        self, system_prompt: str, user_prompt: str, max_attempts: int = MAX_RETRIES
    ) -> LLMResponse:
        """Send a prompt pair, retrying the provider's transient error up to max_attempts."""
        return _retry_with_backoff(
            partial(self._call_api, system_prompt, user_prompt),
            self._retryable_exception,
            self._retry_message,
            max_attempts=max_attempts,
        )


class AnthropicProvider(LLMProvider):
    _provider_prefix = "anthropic"
    _package = "anthropic"
    _api_key_env = "ANTHROPIC_API_KEY"
    _default_model = "claude-3-5-haiku-latest"
    _retry_message = "API overloaded"

    def _connect(self, sdk, client_kwargs):
        self._retryable_exception = sdk.OverloadedError
        return sdk.Anthropic(**client_kwargs)

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=MAX_OUTPUT_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        usage = response.usage
        return LLMResponse(response.content[0].text, self.model, usage.input_tokens, usage.output_tokens)


class OpenAIProvider(LLMProvider):
    _provider_prefix = "openai"
    _package = "openai"
    _api_key_env = "OPENAI_API_KEY"
    _default_model = "gpt-4o-mini"
    _retry_message = "Rate limit hit"

    def _connect(self, sdk, client_kwargs):
        self._retryable_exception = sdk.RateLimitError
        return sdk.OpenAI(**client_kwargs)

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=MAX_OUTPUT_TOKENS,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        usage = response.usage
        return LLMResponse(
            response.choices[0].message.content or "",
            self.model,
            usage.prompt_tokens,
            usage.completion_tokens,
        )


PROVIDERS: Dict[str, type[LLMProvider]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
}


def get_provider(
    provider_name: Optional[str] = None, model: Optional[str] = None, timeout: Optional[float] = None
) -> LLMProvider:
    """
    Create a provider by name.

    Args:
        provider_name: Key of PROVIDERS (default: LLM_PROVIDER env var, then "openai")
        model: Model name (default: the provider's default)
        timeout: Client-side request timeout in seconds

    Raises:
        ValueError: Unknown provider name or missing API key
        ImportError: Vendor SDK not installed
    """
    name = (provider_name or os.getenv("LLM_PROVIDER") or "openai").lower()
    if name not in PROVIDERS:
        raise ValueError(f"Unknown provider: {name}. Use one of: {', '.join(PROVIDERS)}")
    return PROVIDERS[name](model=model, timeout=timeout)


# =============================================================================
# RESPONSE PARSING
# =============================================================================

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")
_FLAT_OBJECT = re.compile(r"\{[^{}]*\}", re.DOTALL)


def parse_json_object(text: Optional[str]) -> dict:
    """
    Recover a JSON object from a model answer.

    Tries, in order: the whole answer, the answer without markdown code fences,
    and the first flat {...} span inside surrounding chatter.

    Returns:
        Parsed dict, or {} if no object could be recovered
    """
    text = (text or "").strip()
    unfenced = _CODE_FENCE.sub("", text)
    match = _FLAT_OBJECT.search(unfenced)

    for candidate in (text, unfenced, match.group(0) if match else None):
        if not candidate:
            continue
        try:
            result = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(result, dict):
            return result
    return {}
