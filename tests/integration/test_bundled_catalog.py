"""
Integration tests for the catalog shipped with the package.

Tests: the bundled roles.yaml passes startup validation and every term in it
resolves and generates a complete roast.
"""

import asyncio
import random

import pytest

from humanerror.contexts.catalog import DEFAULT_ROLE
from humanerror.contexts.matching import RoleResolver
from humanerror.contexts.messaging import MessageGenerator, RoastTemplateRegistry

SAFE_ROLES = ("Plumber", "Electrician", "Nurse", "Firefighter", "Branch Manager")


@pytest.mark.integration
def test_bundled_catalog_is_valid(bundled_catalog):
    """Test that the bundled catalog validates and compiles."""
    bundled_catalog.validate()
    RoastTemplateRegistry().warm(bundled_catalog)

    assert bundled_catalog.keys()[-1] == DEFAULT_ROLE
    assert set(bundled_catalog.safe_roles()) == set(SAFE_ROLES)


@pytest.mark.integration
def test_every_bundled_term_resolves(bundled_catalog):
    """Test that every canonical name and alias resolves to its own role."""
    resolver = RoleResolver(bundled_catalog)

    async def run():
        for entry in bundled_catalog:
            if entry.key == DEFAULT_ROLE:
                continue
            for term in (entry.key, *entry.aliases):
                result = await resolver.resolve(term.upper())
                assert result.matched_role == entry.key, term
                assert result.is_safe == (entry.key in SAFE_ROLES)

    asyncio.run(run())


@pytest.mark.integration
def test_every_bundled_template_renders(bundled_catalog):
    """Test that no placeholder survives rendering of any bundled template."""
    registry = RoastTemplateRegistry()

    for entry in bundled_catalog:
        for template in entry.templates:
            text = registry.render(template, {"months": 7, "days": 7, "viability": "3.4"})
            assert "{" not in text and "}" not in text, template


@pytest.mark.integration
def test_every_bundled_role_generates(bundled_catalog):
    """Test message generation for every role with its catalog safety flag."""
    generator = MessageGenerator(bundled_catalog, rng=random.Random(2024))

    for key in bundled_catalog.keys():
        is_safe = bundled_catalog.is_safe(key)
        message = generator.generate(key, is_safe)

        assert message.primary_text
        assert (message.secondary_text is None) == is_safe


@pytest.mark.integration
def test_suggest_against_bundled_catalog(bundled_catalog):
    """Test autocomplete over the bundled terms."""
    suggestions = bundled_catalog.suggest("manager")

    assert "Branch Manager" in suggestions
    assert "Regional Manager" in suggestions
    assert all("manager" in s.lower() for s in suggestions)
