from typing import Dict, Set

from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError, meta

from humanerror.contexts.catalog import CatalogIntegrityError, RoleCatalog
from humanerror.contexts.catalog.role_catalog import (
    BLOCK_END,
    BLOCK_START,
    COMMENT_END,
    COMMENT_START,
)


class RoastTemplateRegistry:
    """
    Registry for compiling and caching roast templates.

    Catalog templates use single-brace placeholders ("{months}"), so the Jinja2
    environment swaps its delimiters:
    - Variable: { var }
    - Block: <%% block %%>
    - Comment: <# comment #>

    Rendering is strict: a placeholder without a value raises instead of
    silently rendering as an empty string.
    """

    def __init__(self):
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            # Catches silent failures
            undefined=StrictUndefined,
            variable_start_string="{",
            variable_end_string="}",
            block_start_string=BLOCK_START,
            block_end_string=BLOCK_END,
            comment_start_string=COMMENT_START,
            comment_end_string=COMMENT_END,
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def get_template(self, source: str) -> Template:
        """
        Get a compiled template for a template string, compiling and caching it if necessary.

        Args:
            source: Raw catalog template

        Returns:
            Jinja2 Template object

        Raises:
            TemplateSyntaxError: If the template string cannot be parsed
        """
        if source in self._cache:
            return self._cache[source]

        template = self.env.from_string(source)
        self._cache[source] = template
        return template

    def placeholders(self, source: str) -> Set[str]:
        """Return the placeholder names a template refers to."""
        return set(meta.find_undeclared_variables(self.env.parse(source)))

    def render(self, source: str, values: Dict[str, object]) -> str:
        """Render a template string with placeholder values."""
        return self.get_template(source).render(values)

    def warm(self, catalog: RoleCatalog) -> None:
        """
        Compile every template in a catalog.

        Raises:
            CatalogIntegrityError: If any template fails to compile
        """
        problems = []
        for entry in catalog:
            for index, source in enumerate(entry.templates):
                try:
                    self.get_template(source)
                except TemplateSyntaxError as e:
                    problems.append(f"'{entry.key}' template #{index} does not compile: {e}")

        if problems:
            raise CatalogIntegrityError(problems)

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, source: str) -> bool:
        return source in self._cache
