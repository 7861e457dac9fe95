"""Unit tests for exact alias resolution."""

import pytest

from humanerror.contexts.catalog import DEFAULT_ROLE
from humanerror.contexts.matching import AliasResolver, resolve_alias


@pytest.mark.unit
def test_every_term_resolves_in_any_case(catalog):
    """Test that each canonical name and alias resolves to its owner regardless of case."""
    resolver = AliasResolver(catalog)

    for entry in catalog:
        if entry.key == DEFAULT_ROLE:
            continue
        for term in (entry.key, *entry.aliases):
            assert resolver.resolve(term) == entry.key
            assert resolver.resolve(term.upper()) == entry.key
            assert resolver.resolve(term.lower()) == entry.key
            assert resolver.resolve(term.swapcase()) == entry.key


@pytest.mark.unit
def test_surrounding_and_internal_whitespace(catalog):
    """Test that extra whitespace does not prevent an exact match."""
    resolver = AliasResolver(catalog)

    assert resolver.resolve("  regional   manager  ") == "Branch Manager"


@pytest.mark.unit
def test_no_partial_matches(catalog):
    """Test that near misses are left to the fuzzy matcher."""
    resolver = AliasResolver(catalog)

    assert resolver.resolve("Manager") is None
    assert resolver.resolve("Software Engineers") is None
    assert resolver.resolve("jbo") is None


@pytest.mark.unit
def test_empty_input(catalog):
    """Test that empty and whitespace-only input has no alias."""
    resolver = AliasResolver(catalog)

    assert resolver.resolve("") is None
    assert resolver.resolve("   ") is None


@pytest.mark.unit
def test_default_is_never_a_target(catalog):
    """Test that typing "Default" does not resolve through the alias index."""
    resolver = AliasResolver(catalog)

    assert resolver.resolve("Default") is None
    assert resolver.resolve("default") is None


@pytest.mark.unit
def test_index_size(catalog):
    """Test that the index holds every canonical name and alias except Default."""
    # 5 non-default roles + 7 aliases
    assert len(AliasResolver(catalog)) == 12


@pytest.mark.unit
def test_resolve_alias_helper(catalog):
    """Test the one-off lookup helper."""
    assert resolve_alias("pipefitter", catalog) == "Plumber"
    assert resolve_alias("astronaut", catalog) is None
