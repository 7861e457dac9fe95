"""
Human Error 404 - Role Resolution & Message Reveal Engine

Takes a free-text job title, resolves it to a canonical role archetype, picks a
templated roast for that role and reveals it character by character.

Architecture:
- Catalog Context: Immutable role catalog (aliases, templates, safe roles)
- Matching Context: Alias resolution, fuzzy matching, classifier fallback
- Messaging Context: Template selection and placeholder substitution
- Reveal Context: Timed two-stage reveal state machine
- Analysis Context: End-to-end wiring and session persistence
"""

__version__ = "0.1.0"
