"""
Roast message generation.

Picks a random template for a role, fills its placeholders with freshly drawn
values and, for roles that are not safe, adds a replacement-cost line.

Drawn values:
- months:    integer in [1, 24]
- viability: real in [0.0, 10.0], one decimal place
- cost:      integer in [0, 9], only for roles that are not safe
"""

import random
from dataclasses import dataclass
from typing import Optional

from humanerror.contexts.catalog import DEFAULT_ROLE, CatalogIntegrityError, RoleCatalog
from humanerror.contexts.messaging.logger import log_message_generated, log_template_fallback
from humanerror.contexts.messaging.template_registry import RoastTemplateRegistry

MONTHS_RANGE = (1, 24)
VIABILITY_RANGE = (0.0, 10.0)
COST_RANGE = (0, 9)

REPLACEMENT_COST_FORMAT = "ESTIMATED REPLACEMENT COST: ${cost}.99/month"


@dataclass(frozen=True)
class GeneratedMessage:
    """
    A finished roast, ready to be revealed.

    Attributes:
        role: Role whose templates were used (after Default fallback)
        primary_text: Roast with every placeholder filled in
        secondary_text: Replacement-cost line, None for safe roles
        months: Value used for {months} (and the legacy {days})
        viability: Formatted value used for {viability}
        cost: Replacement cost in dollars, None for safe roles
    """

    role: str
    primary_text: str
    secondary_text: Optional[str]
    months: int
    viability: str
    cost: Optional[int] = None


class MessageGenerator:
    """
    Generates roasts from a catalog.

    Args:
        catalog: Role catalog supplying the templates
        rng: Random source; pass random.Random(seed) for reproducible output
        registry: Template registry (a fresh one is created by default)
    """

    def __init__(
        self,
        catalog: RoleCatalog,
        rng: Optional[random.Random] = None,
        registry: Optional[RoastTemplateRegistry] = None,
    ):
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.registry = registry or RoastTemplateRegistry()

    def generate(self, role: str, is_safe: bool) -> GeneratedMessage:
        """
        Generate a message for a resolved role.

        Args:
            role: Canonical role key (roles without templates use Default's)
            is_safe: Whether the role is safe; decides the secondary text

        Returns:
            GeneratedMessage

        Raises:
            CatalogIntegrityError: If neither the role nor Default has templates
        """
        entry = self.catalog.entry(role)
        if entry is None or not entry.templates:
            if role != DEFAULT_ROLE:
                log_template_fallback(role)
            template_role = DEFAULT_ROLE
        else:
            template_role = role

        templates = self.catalog.templates_for(template_role)
        if not templates:
            raise CatalogIntegrityError([f"No templates available for '{role}' or '{DEFAULT_ROLE}'"])

        template = templates[self.rng.randrange(len(templates))]
        months = self.rng.randint(*MONTHS_RANGE)
        viability = f"{self.rng.uniform(*VIABILITY_RANGE):.1f}"

        primary_text = self.registry.render(
            template,
            {
                "months": months,
                # Legacy placeholder, same value as months
                "days": months,
                "viability": viability,
            },
        )

        cost = None
        secondary_text = None
        if not is_safe:
            cost = self.rng.randint(*COST_RANGE)
            secondary_text = REPLACEMENT_COST_FORMAT.format(cost=cost)

        message = GeneratedMessage(
            role=template_role,
            primary_text=primary_text,
            secondary_text=secondary_text,
            months=months,
            viability=viability,
            cost=cost,
        )
        log_message_generated(role, message)
        return message
