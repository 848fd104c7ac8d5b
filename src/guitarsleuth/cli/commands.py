"""CLI commands for guitarsleuth.

This module implements all user-facing commands: serial lookup, neck-block
decoding, feature matching, the interactive quiz, config and version.
- Uses Typer for declarative CLI structure and option parsing.
- All output is routed through a Rich Console from ConsoleManager.
- ``--json`` prints the result model as JSON for scripting.

Design:
- Annotated aliases define shared arguments and options once.
- Exit codes are defined as an Enum: a lookup that still needs a neck-block
  reading (or has an ambiguous one) exits with NEEDS_INSPECTION.
"""

import os
import sys
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, List, Optional

import typer
from pydantic import TypeAdapter
from rich.console import Console
from rich.markup import escape

from guitarsleuth.cli.console import ENV_DISABLE_RICH, ConsoleManager
from guitarsleuth.cli.renderer import (
    render_lookup,
    render_matches,
    render_neck_block,
)
from guitarsleuth.core.aggregator import lookup_serial
from guitarsleuth.core.emperor_code import resolve_neck_block
from guitarsleuth.core.feature_matcher import match_features
from guitarsleuth.core.quiz import QuizFlow
from guitarsleuth.core.serial_classifier import MissingSerialError, normalize_serial
from guitarsleuth.models.catalog import Catalog
from guitarsleuth.models.lookup import MatchResult
from guitarsleuth.models.quiz import QuizState
from guitarsleuth.utils import debug
from guitarsleuth.utils.catalog_store import (
    CatalogError,
    load_catalog,
    load_quiz_categories,
)
from guitarsleuth.utils.config import (
    get_catalog_path,
    get_quiz_categories_file,
    set_setting,
)

app = typer.Typer(
    name="guitarsleuth",
    help="Date and identify Alvarez guitars from serials, neck blocks and features.",
    add_completion=False,
)


class ExitCode(int, Enum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1
    NEEDS_INSPECTION = 2


_MATCH_LIST = TypeAdapter(List[MatchResult])


CATALOG = Annotated[
    Optional[Path],
    typer.Option(
        "--catalog",
        "-c",
        dir_okay=False,
        help="Catalog file (YAML or JSON). Defaults to the catalog.path setting.",
    ),
]

JSON_OUTPUT = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Output results in JSON format",
    ),
]

NECK_BLOCK = Annotated[
    Optional[str],
    typer.Option(
        "--neck-block",
        "-n",
        help="Emperor date stamp from the neck block, e.g. 52",
    ),
]


@app.callback()
def callback(
    no_rich: bool = typer.Option(
        False,
        "--no-rich",
        help=(
            "Disable Rich coloured output. Can also be set with the "
            "GUITARSLEUTH_NO_RICH environment variable."
        ),
    ),
) -> None:
    """Date and identify Alvarez guitars."""
    if no_rich:
        os.environ[ENV_DISABLE_RICH] = "1"


def _write_json(payload: str) -> None:
    sys.stdout.write(payload + "\n")


def _load_catalog_or_exit(console: Console, catalog: Optional[Path]) -> Catalog:
    path = get_catalog_path(catalog)
    try:
        loaded = load_catalog(path)
    except (FileNotFoundError, CatalogError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(ExitCode.ERROR)
    if path is None:
        debug.debug("No catalog configured; using serial evidence only")
    return loaded


@app.command()
def lookup(
    serial: Annotated[str, typer.Argument(help="Serial number, e.g. E25115614")],
    neck_block: NECK_BLOCK = None,
    catalog: CATALOG = None,
    json_output: JSON_OUTPUT = False,
) -> None:
    """Estimate build year, origin and confidence from a serial number."""
    with ConsoleManager() as console:
        try:
            cleaned = normalize_serial(serial)
        except MissingSerialError as e:
            console.print(f"[red]Error: {escape(str(e))}.[/red]")
            raise typer.Exit(ExitCode.ERROR)
        loaded = _load_catalog_or_exit(console, catalog)
        result = lookup_serial(
            cleaned,
            neck_block=neck_block,
            patterns=loaded.patterns,
            approved_guitars=loaded.approved_guitars,
        )

        if json_output:
            _write_json(result.model_dump_json(indent=2))
        else:
            render_lookup(result, console=console)

        undated = result.needs_emperor_code and result.estimated_year is None
        if result.is_ambiguous or undated:
            raise typer.Exit(ExitCode.NEEDS_INSPECTION)


@app.command("neck-block")
def neck_block_command(
    code: Annotated[str, typer.Argument(help="Neck-block stamp, e.g. 52")],
    json_output: JSON_OUTPUT = False,
) -> None:
    """Decode a neck-block Emperor date stamp."""
    result = resolve_neck_block(code)
    if json_output:
        _write_json(result.model_dump_json(indent=2))
        return
    with ConsoleManager() as console:
        render_neck_block(result, console=console)


@app.command()
def match(
    feature_ids: Annotated[
        List[str], typer.Argument(help="Ids of the features observed on the guitar")
    ],
    catalog: CATALOG = None,
    json_output: JSON_OUTPUT = False,
) -> None:
    """Rank catalog models against observed feature ids."""
    with ConsoleManager() as console:
        loaded = _load_catalog_or_exit(console, catalog)
        if loaded.features:
            for feature_id in feature_ids:
                if loaded.feature_by_id(feature_id) is None:
                    debug.warn(f"Unknown feature id: {feature_id}")
        results = match_features(feature_ids, loaded.model_features)
        if json_output:
            _write_json(_MATCH_LIST.dump_json(results, indent=2).decode())
            return
        render_matches(results, catalog=loaded, console=console)


def _ask(console: Console, flow: QuizFlow) -> None:
    """Ask the current quiz question and apply the user's response."""
    category = flow.current_category
    options = flow.options_for(category)
    console.print(
        f"\n[bold]Step {flow.step + 1} of {flow.total_steps}:[/bold] "
        f"{escape(category.title)}"
    )
    if category.description:
        console.print(escape(category.description))
    current = flow.answer_for(category.id)
    for number, option in enumerate(options, start=1):
        marker = "*" if current is not None and current.id == option.id else " "
        line = f" {marker} {number}. {escape(option.label)}"
        if option.description:
            line += f" - {escape(option.description)}"
        console.print(line)

    choice = typer.prompt("Choose a number ([b]ack, [r]eset, [q]uit)").strip().lower()
    if choice == "q":
        raise typer.Exit(ExitCode.SUCCESS)
    if choice == "b":
        flow.back()
        return
    if choice == "r":
        flow.reset()
        return
    if choice.isdigit() and 1 <= int(choice) <= len(options):
        flow.select(options[int(choice) - 1].id)
        flow.advance()
        return
    console.print("[red]Please choose one of the listed numbers.[/red]")


@app.command()
def quiz(catalog: CATALOG = None) -> None:
    """Identify a model by answering questions about its features."""
    with ConsoleManager() as console:
        loaded = _load_catalog_or_exit(console, catalog)
        try:
            categories = load_quiz_categories(get_quiz_categories_file())
        except (FileNotFoundError, CatalogError) as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(ExitCode.ERROR)

        flow = QuizFlow(categories, loaded.model_features, loaded.features)
        if flow.total_steps == 0:
            console.print("[yellow]The catalog has no features to ask about.[/yellow]")
            raise typer.Exit(ExitCode.SUCCESS)

        while flow.state is not QuizState.COMPLETE:
            _ask(console, flow)

        console.print("\n[bold]Analysis complete.[/bold]")
        render_matches(flow.results(), catalog=loaded, console=console)
        notes = flow.submission_notes()
        if notes:
            console.print(f"Notes for your submission: {escape(notes)}")


@app.command()
def config(
    key: Annotated[str, typer.Argument(help="Dotted setting key, e.g. catalog.path")],
    value: Annotated[str, typer.Argument(help="Value to store")],
) -> None:
    """Store a setting in config.toml."""
    stored: Any = value
    if key == "catalog.path" or key == "quiz.categories_file":
        stored = str(Path(value).expanduser().resolve())
    set_setting(key, stored)
    with ConsoleManager() as console:
        console.print(f"Saved [bold]{escape(key)}[/bold] = {escape(str(stored))}")


@app.command()
def version() -> None:
    """Show the version of guitarsleuth."""
    from guitarsleuth.__about__ import __version__

    with ConsoleManager() as console:
        console.print(f"GuitarSleuth version: [bold]{__version__}[/bold]")


def main() -> None:
    """Main entry point for the CLI."""
    app()
