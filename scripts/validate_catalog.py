#!/usr/bin/env python3
"""
Validate a role catalog before deploying it.

Runs the same startup checks the engine runs (Default present with templates,
safe roles exist, no alias claimed twice, well-formed placeholders) and then
compiles every template.

Usage:
    python scripts/validate_catalog.py
    python scripts/validate_catalog.py configs/roles.yaml
"""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from humanerror.contexts.catalog import CatalogIntegrityError, CatalogLoadError, load_catalog
from humanerror.contexts.messaging import RoastTemplateRegistry

load_dotenv()

app = typer.Typer(help="Validate a role catalog file.", add_completion=False)


@app.command()
def main(
    catalog_path: Annotated[
        Optional[Path],
        typer.Argument(help="Catalog YAML (default: ROLE_CATALOG_PATH or the bundled catalog)"),
    ] = None,
):
    """Validate a catalog and print a short summary."""
    try:
        catalog = load_catalog(catalog_path)
        RoastTemplateRegistry().warm(catalog)
    except CatalogLoadError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except CatalogIntegrityError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    template_count = sum(len(entry.templates) for entry in catalog)
    typer.secho("✓ Catalog is valid", fg=typer.colors.GREEN)
    typer.echo(f"  Roles:      {len(catalog)}")
    typer.echo(f"  Safe roles: {', '.join(catalog.safe_roles()) or '(none)'}")
    typer.echo(f"  Aliases:    {catalog.alias_count}")
    typer.echo(f"  Templates:  {template_count}")


if __name__ == "__main__":
    app()
