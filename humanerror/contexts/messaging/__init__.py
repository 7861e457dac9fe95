"""
Messaging Context

Responsibilities:
- Chooses a roast template for a resolved role
- Draws months, viability and replacement cost values
- Renders templates through a cached Jinja2 registry

Owns: Message text
Never: Resolves roles or schedules reveals
"""

from humanerror.contexts.messaging.generator import (
    COST_RANGE,
    MONTHS_RANGE,
    REPLACEMENT_COST_FORMAT,
    VIABILITY_RANGE,
    GeneratedMessage,
    MessageGenerator,
)
from humanerror.contexts.messaging.template_registry import RoastTemplateRegistry

__all__ = [
    "COST_RANGE",
    "GeneratedMessage",
    "MONTHS_RANGE",
    "MessageGenerator",
    "REPLACEMENT_COST_FORMAT",
    "RoastTemplateRegistry",
    "VIABILITY_RANGE",
]
