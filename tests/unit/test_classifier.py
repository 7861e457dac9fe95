"""Unit tests for upstream role classifiers and LLM response parsing."""

import asyncio
import time

import pytest

from humanerror.contexts.catalog import DEFAULT_ROLE
from humanerror.contexts.matching import (
    ClassifierError,
    FunctionClassifier,
    LLMRoleClassifier,
    NullClassifier,
)
from humanerror.utils.llm import LLMProvider, LLMResponse, get_provider, parse_json_object


class FakeProvider(LLMProvider):
    """Provider returning canned content, or raising, without network access."""

    _provider_prefix = "fake"
    _retry_message = "Fake overload"

    def __init__(self, content='{"role": "Nurse"}', error=None, delay=0.0):
        self._retryable_exception = RuntimeError
        self.content = content
        self.error = error
        self.delay = delay
        self.calls = []
        self.update_model("test-model")

    def _call_api(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.content, model=self.model, input_tokens=1, output_tokens=1)


CANDIDATES = ["Software Engineer", "Nurse", DEFAULT_ROLE]


# =============================================================================
# SIMPLE CLASSIFIERS
# =============================================================================


@pytest.mark.unit
def test_null_classifier_always_default():
    """Test that NullClassifier never has an opinion."""
    assert asyncio.run(NullClassifier().classify("Nurse")) == DEFAULT_ROLE


@pytest.mark.unit
def test_function_classifier_wraps_callable():
    """Test that FunctionClassifier awaits the wrapped function."""

    async def classify(text):
        return text.upper()

    assert asyncio.run(FunctionClassifier(classify).classify("nurse")) == "NURSE"


# =============================================================================
# LLM CLASSIFIER
# =============================================================================


@pytest.mark.unit
def test_llm_classifier_returns_role():
    """Test a successful classification."""
    provider = FakeProvider(content='{"role": " Nurse "}')
    classifier = LLMRoleClassifier(CANDIDATES, provider=provider)

    assert asyncio.run(classifier.classify("RN on night shift")) == "Nurse"
    assert len(provider.calls) == 1


@pytest.mark.unit
def test_llm_classifier_prompt_lists_candidates():
    """Test that the prompt lists every non-default archetype and the title."""
    classifier = LLMRoleClassifier(CANDIDATES, provider=FakeProvider())
    prompt = classifier.build_prompt("code monkey")

    assert "- Software Engineer" in prompt
    assert "- Nurse" in prompt
    assert "- Default" not in prompt
    assert "Job title: code monkey" in prompt
    assert classifier.candidates == ["Software Engineer", "Nurse"]


@pytest.mark.unit
def test_llm_classifier_accepts_fenced_json():
    """Test that a markdown-fenced JSON answer is understood."""
    provider = FakeProvider(content='```json\n{"role": "Software Engineer"}\n```')
    classifier = LLMRoleClassifier(CANDIDATES, provider=provider)

    assert asyncio.run(classifier.classify("code monkey")) == "Software Engineer"


@pytest.mark.unit
@pytest.mark.parametrize("content", ["no json here", '{"role": ""}', '{"role": 42}', "{}"])
def test_llm_classifier_malformed_response(content):
    """Test that an answer without a usable role raises ClassifierError."""
    classifier = LLMRoleClassifier(CANDIDATES, provider=FakeProvider(content=content))

    with pytest.raises(ClassifierError, match="Malformed"):
        asyncio.run(classifier.classify("code monkey"))


@pytest.mark.unit
def test_llm_classifier_provider_error_is_single_attempt():
    """Test that a provider error is wrapped without retrying."""
    provider = FakeProvider(error=RuntimeError("overloaded"))
    classifier = LLMRoleClassifier(CANDIDATES, provider=provider)

    with pytest.raises(ClassifierError) as exc_info:
        asyncio.run(classifier.classify("code monkey"))

    assert isinstance(exc_info.value.original_error, RuntimeError)
    assert len(provider.calls) == 1


@pytest.mark.unit
def test_llm_classifier_timeout():
    """Test that a slow provider is abandoned after timeout_s."""
    provider = FakeProvider(delay=0.3)
    classifier = LLMRoleClassifier(CANDIDATES, provider=provider, timeout_s=0.02)

    with pytest.raises(ClassifierError, match="timed out"):
        asyncio.run(classifier.classify("code monkey"))


@pytest.mark.unit
def test_llm_classifier_provider_setup_failure(monkeypatch):
    """Test that a provider that cannot be created surfaces as ClassifierError."""
    monkeypatch.setenv("LLM_PROVIDER", "nonexistent")
    classifier = LLMRoleClassifier(CANDIDATES)

    with pytest.raises(ClassifierError):
        asyncio.run(classifier.classify("code monkey"))


# =============================================================================
# PROVIDER HELPERS
# =============================================================================


@pytest.mark.unit
def test_get_provider_unknown_name():
    """Test that an unknown provider name is rejected."""
    with pytest.raises(ValueError, match="Unknown provider"):
        get_provider("carrier-pigeon")


@pytest.mark.unit
def test_generate_retries_retryable_errors(monkeypatch):
    """Test that generate() retries the provider's retryable exception."""
    monkeypatch.setattr("humanerror.utils.llm.time.sleep", lambda _: None)

    class FlakyProvider(FakeProvider):
        def _call_api(self, system_prompt, user_prompt):
            self.calls.append(user_prompt)
            if len(self.calls) < 3:
                raise RuntimeError("busy")
            return super()._call_api(system_prompt, user_prompt)

    provider = FlakyProvider()
    response = provider.generate("system", "user", max_attempts=5)

    assert response.content == '{"role": "Nurse"}'
    assert provider.name == "fake/test-model"


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ('{"role": "Nurse"}', {"role": "Nurse"}),
        ('```json\n{"role": "Nurse"}\n```', {"role": "Nurse"}),
        ('Sure! Here you go: {"role": "Nurse"} Hope that helps.', {"role": "Nurse"}),
        ("[1, 2, 3]", {}),
        ("", {}),
        (None, {}),
    ],
)
def test_parse_json_object(text, expected):
    """Test JSON object recovery from chatty responses."""
    assert parse_json_object(text) == expected
