#!/usr/bin/env python3
"""
Job Title Roast CLI

Resolves a job title to its role archetype, generates a roast and reveals it
character by character in the terminal.

Commands:
    analyze  - Resolve, generate and reveal a roast
    resolve  - Print the resolution for a job title as JSON
    suggest  - Autocomplete a partial job title

Examples:\n

    roast.py analyze "Branch Manager"                 # Animated reveal

    roast.py analyze "sofware enginer" --no-animate   # Print at once

    roast.py analyze "code monkey" --classifier       # Ask the LLM classifier first

    roast.py resolve "Regional Manager"               # {"matchedRole": "Branch Manager", ...}

    roast.py suggest "eng"                            # Autocomplete suggestions
"""

import asyncio
import json
import random
import sys
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from humanerror.config import load_settings
from humanerror.contexts.analysis import AnalysisResult, RoastEngine
from humanerror.contexts.analysis.logger import setup_analysis_logger
from humanerror.contexts.catalog import CatalogIntegrityError, CatalogLoadError, load_catalog
from humanerror.contexts.reveal import RevealSnapshot, RevealState

load_dotenv()

app = typer.Typer(
    help="Resolve job titles to role archetypes and reveal their roasts",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def build_engine(
    config: Optional[Path],
    catalog_path: Optional[Path],
    classifier: Optional[bool] = None,
    seed: Optional[int] = None,
    tick_ms: Optional[int] = None,
    delay_ms: Optional[int] = None,
) -> RoastEngine:
    """Load settings and catalog, exiting with a readable error if either is broken."""
    overrides = {"reveal": {}, "classifier": {}}
    if tick_ms is not None:
        overrides["reveal"]["tick_interval_ms"] = tick_ms
    if delay_ms is not None:
        overrides["reveal"]["secondary_delay_ms"] = delay_ms
    if classifier is not None:
        overrides["classifier"]["enabled"] = classifier

    try:
        settings = load_settings(config, overrides=overrides)
        catalog = load_catalog(catalog_path)
        rng = random.Random(seed) if seed is not None else None
        return RoastEngine.from_settings(settings, catalog=catalog, rng=rng)
    except (FileNotFoundError, CatalogLoadError, CatalogIntegrityError) as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================


def print_header(result: AnalysisResult) -> None:
    """Print the verdict headline and detected archetype."""
    if result.resolution.is_safe:
        typer.secho("\n You Win Capitalism", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho("\n Your Career Has Been Laid Off", fg=typer.colors.RED, bold=True)

    typer.echo(f" SUBJECT: {result.job_title or 'UNKNOWN'}")
    if not result.resolution.is_default and result.archetype_label != result.job_title:
        typer.echo(f" DETECTED ARCHETYPE: {result.archetype_label.upper()}")
    typer.echo("\n ANALYSIS COMPLETE.")


class TerminalRenderer:
    """Redraws the current line for every reveal snapshot."""

    def __init__(self):
        self._current_slot = None

    def __call__(self, snapshot: RevealSnapshot) -> None:
        if snapshot.state is RevealState.IDLE:
            return
        if snapshot.slot != self._current_slot:
            if self._current_slot is not None:
                sys.stdout.write("\n\n")
            self._current_slot = snapshot.slot

        cursor = "|" if snapshot.state is RevealState.REVEALING else ""
        sys.stdout.write(f"\r\033[K {snapshot.text}{cursor}")
        sys.stdout.flush()

    def finish(self) -> None:
        sys.stdout.write("\n\n")
        sys.stdout.flush()


async def _run_analysis(engine: RoastEngine, job_title: str, animate: bool) -> AnalysisResult:
    result = await engine.analyze(job_title)
    print_header(result)

    if not animate:
        typer.echo(f" {result.message.primary_text}")
        if result.message.secondary_text:
            typer.secho(f"\n {result.message.secondary_text}", fg=typer.colors.RED)
        typer.echo()
        return result

    renderer = TerminalRenderer()
    reveal = engine.new_reveal()
    reveal.subscribe(renderer)
    reveal.show_message(result.message)
    await reveal.wait()
    renderer.finish()
    return result


# =============================================================================
# COMMANDS
# =============================================================================


@app.command("analyze")
def analyze_command(
    job_title: Annotated[str, typer.Argument(help="Job title to analyze")],
    classifier: Annotated[
        Optional[bool],
        typer.Option(
            "--classifier/--no-classifier",
            help="Ask the LLM classifier before fuzzy matching (default: from settings)",
        ),
    ] = None,
    animate: Annotated[
        bool,
        typer.Option("--animate/--no-animate", help="Reveal the roast character by character"),
    ] = True,
    tick_ms: Annotated[
        Optional[int],
        typer.Option("--tick-ms", help="Milliseconds per revealed character", min=0),
    ] = None,
    delay_ms: Annotated[
        Optional[int],
        typer.Option("--delay-ms", help="Pause before the replacement cost line", min=0),
    ] = None,
    seed: Annotated[
        Optional[int], typer.Option("--seed", help="Seed for reproducible roasts")
    ] = None,
    config: Annotated[
        Optional[Path], typer.Option("--config", "-c", help="Settings YAML file")
    ] = None,
    catalog_path: Annotated[
        Optional[Path], typer.Option("--catalog", help="Role catalog YAML file")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging on the console")
    ] = False,
):
    """
    Resolve a job title, generate its roast and reveal it.

    Examples:\n

        $ roast.py analyze "Branch Manager"

        $ roast.py analyze "data sciencetist" --tick-ms 10 --seed 42
    """
    setup_analysis_logger(catalog_path=catalog_path, verbose=verbose)
    engine = build_engine(config, catalog_path, classifier, seed, tick_ms, delay_ms)
    asyncio.run(_run_analysis(engine, job_title, animate))


@app.command("resolve")
def resolve_command(
    job_title: Annotated[str, typer.Argument(help="Job title to resolve")],
    classifier: Annotated[
        Optional[bool],
        typer.Option("--classifier/--no-classifier", help="Ask the LLM classifier first"),
    ] = None,
    config: Annotated[
        Optional[Path], typer.Option("--config", "-c", help="Settings YAML file")
    ] = None,
    catalog_path: Annotated[
        Optional[Path], typer.Option("--catalog", help="Role catalog YAML file")
    ] = None,
):
    """Print the resolution for a job title as JSON."""
    setup_analysis_logger(catalog_path=catalog_path)
    engine = build_engine(config, catalog_path, classifier)
    resolution = asyncio.run(engine.resolver.resolve(job_title))

    output = {**resolution.to_dict(), "stage": engine.resolver.last_stage}
    typer.echo(json.dumps(output, indent=2))


@app.command("suggest")
def suggest_command(
    fragment: Annotated[str, typer.Argument(help="Partial job title")],
    limit: Annotated[int, typer.Option("--limit", "-n", help="Maximum suggestions", min=1)] = 10,
    catalog_path: Annotated[
        Optional[Path], typer.Option("--catalog", help="Role catalog YAML file")
    ] = None,
):
    """List job titles (canonical names and aliases) containing a fragment."""
    setup_analysis_logger(catalog_path=catalog_path)
    try:
        catalog = load_catalog(catalog_path)
    except (CatalogLoadError, CatalogIntegrityError) as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    suggestions = catalog.suggest(fragment, limit=limit)
    if not suggestions:
        typer.echo(f'No job titles contain "{fragment}"')
        raise typer.Exit(code=1)

    for term in suggestions:
        typer.echo(f"  {term}")


if __name__ == "__main__":
    app()
