"""Unit tests for the role resolution pipeline."""

import asyncio

import pytest

from humanerror.contexts.catalog import DEFAULT_ROLE
from humanerror.contexts.matching import (
    ClassifierError,
    FunctionClassifier,
    ResolutionResult,
    RoleResolver,
)
from humanerror.contexts.matching.resolver import (
    STAGE_ALIAS,
    STAGE_CLASSIFIER,
    STAGE_EMPTY,
    STAGE_FUZZY,
)


def stub_classifier(answer=None, error=None):
    """Deterministic classifier stub that records the titles it was asked about."""
    calls = []

    async def classify(text):
        calls.append(text)
        if error is not None:
            raise error
        return answer

    classifier = FunctionClassifier(classify)
    classifier.calls = calls
    return classifier


def resolve(resolver, text):
    return asyncio.run(resolver.resolve(text))


# =============================================================================
# STAGES
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "   ", None])
def test_empty_input_is_default(catalog, text):
    """Test that empty input resolves to Default without consulting the classifier."""
    classifier = stub_classifier(answer="Plumber")
    resolver = RoleResolver(catalog, classifier)

    result = resolve(resolver, text)

    assert result == ResolutionResult(DEFAULT_ROLE, False)
    assert resolver.last_stage == STAGE_EMPTY
    assert classifier.calls == []


@pytest.mark.unit
def test_alias_hit_skips_classifier(catalog):
    """Test that an exact alias ends resolution before the classifier runs."""
    classifier = stub_classifier(answer="Data Scientist")
    resolver = RoleResolver(catalog, classifier)

    result = resolve(resolver, "regional manager")

    assert result == ResolutionResult("Branch Manager", True)
    assert resolver.last_stage == STAGE_ALIAS
    assert classifier.calls == []


@pytest.mark.unit
def test_classifier_answer_wins_over_fuzzy(catalog):
    """Test that a non-default classifier answer is used even when fuzzy would disagree."""
    classifier = stub_classifier(answer="Plumber")
    resolver = RoleResolver(catalog, classifier)

    result = resolve(resolver, "sofware enginer")

    assert result == ResolutionResult("Plumber", True)
    assert resolver.last_stage == STAGE_CLASSIFIER
    assert classifier.calls == ["sofware enginer"]


@pytest.mark.unit
def test_classifier_default_falls_through_to_fuzzy(catalog):
    """Test that a Default answer hands over to the fuzzy matcher."""
    resolver = RoleResolver(catalog, stub_classifier(answer=DEFAULT_ROLE))

    result = resolve(resolver, "sofware enginer")

    assert result == ResolutionResult("Software Engineer", False)
    assert resolver.last_stage == STAGE_FUZZY


@pytest.mark.unit
@pytest.mark.parametrize(
    "error", [ClassifierError("timed out"), RuntimeError("boom"), asyncio.TimeoutError()]
)
def test_classifier_failure_falls_through_to_fuzzy(catalog, error):
    """Test that any classifier exception is treated like a Default answer."""
    classifier = stub_classifier(error=error)
    resolver = RoleResolver(catalog, classifier)

    result = resolve(resolver, "data sciencetist")

    assert result.matched_role == "Data Scientist"
    assert resolver.last_stage == STAGE_FUZZY
    assert len(classifier.calls) == 1


@pytest.mark.unit
def test_classifier_unknown_role_is_ignored(catalog):
    """Test that an answer outside the catalog is treated like Default."""
    resolver = RoleResolver(catalog, stub_classifier(answer="Astronaut"))

    result = resolve(resolver, "jbo")

    assert result == ResolutionResult(DEFAULT_ROLE, False)
    assert resolver.last_stage == STAGE_FUZZY


@pytest.mark.unit
@pytest.mark.parametrize("answer", [None, {"role": "Plumber"}, ["Plumber"], 42])
def test_classifier_non_string_answer_is_ignored(catalog, answer):
    """Test that a malformed classifier answer is treated like Default."""
    resolver = RoleResolver(catalog, stub_classifier(answer=answer))

    result = resolve(resolver, "jbo")

    assert result == ResolutionResult(DEFAULT_ROLE, False)
    assert resolver.last_stage == STAGE_FUZZY


@pytest.mark.unit
def test_no_match_is_default(catalog):
    """Test that a title nothing resembles resolves to Default."""
    resolver = RoleResolver(catalog)

    assert resolve(resolver, "jbo") == ResolutionResult(DEFAULT_ROLE, False)


@pytest.mark.unit
def test_threshold_is_configurable(catalog):
    """Test that a stricter threshold rejects a looser match."""
    lenient = RoleResolver(catalog, threshold=0.5)
    strict = RoleResolver(catalog, threshold=0.99)

    assert resolve(lenient, "sofware enginer").matched_role == "Software Engineer"
    assert resolve(strict, "sofware enginer").matched_role == DEFAULT_ROLE


# =============================================================================
# RESULT
# =============================================================================


@pytest.mark.unit
def test_safety_always_comes_from_catalog(catalog):
    """Test that is_safe is true exactly for safe catalog roles."""
    resolver = RoleResolver(catalog)

    for key in catalog.keys():
        result = resolve(resolver, key)
        assert result.matched_role == key
        assert result.is_safe == catalog.is_safe(key)


@pytest.mark.unit
def test_resolution_result_round_trip(catalog):
    """Test serialization for session stores."""
    result = ResolutionResult.for_role("Plumber", catalog)

    assert result.to_dict() == {"matchedRole": "Plumber", "isSafe": True}
    assert ResolutionResult.from_dict(result.to_dict(), catalog) == result


@pytest.mark.unit
def test_resolution_result_from_dict_rederives_safety(catalog):
    """Test that a stored safety flag is not trusted."""
    tampered = {"matchedRole": "Software Engineer", "isSafe": True}

    assert ResolutionResult.from_dict(tampered, catalog).is_safe is False


@pytest.mark.unit
@pytest.mark.parametrize("data", [None, "Plumber", {}, {"matchedRole": "Astronaut"}])
def test_resolution_result_from_dict_rejects_bad_entries(catalog, data):
    """Test that malformed or unknown stored entries raise ValueError."""
    with pytest.raises(ValueError):
        ResolutionResult.from_dict(data, catalog)


@pytest.mark.unit
def test_archetype_label(catalog):
    """Test that Default shows the typed title and matches show the role."""
    assert ResolutionResult(DEFAULT_ROLE, False).archetype_label("Chief Vibes Officer") == (
        "Chief Vibes Officer"
    )
    assert ResolutionResult("Plumber", True).archetype_label("pipefitter") == "Plumber"
