"""Renderer for CLI output.

Renders lookup results, neck-block readings and ranked model matches as Rich
tables, with a text confidence meter coloured by tier.
"""

from typing import Dict, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from guitarsleuth.models.catalog import Catalog
from guitarsleuth.models.core import ConfidenceTier, NeckBlockResult
from guitarsleuth.models.lookup import AggregateResult, MatchResult

TIER_STYLES: Dict[ConfidenceTier, str] = {
    ConfidenceTier.HIGH: "green bold",
    ConfidenceTier.MEDIUM: "yellow bold",
    ConfidenceTier.LOW: "red bold",
}
METER_WIDTH = 20


def confidence_meter(tier: ConfidenceTier, percent: int) -> str:
    """Return a markup string like ``████░░ 65% Medium confidence``."""
    filled = round(METER_WIDTH * percent / 100)
    style = TIER_STYLES[tier]
    bar = f"[{style}]{'█' * filled}[/]{'░' * (METER_WIDTH - filled)}"
    return f"{bar} {percent}% {tier.value.capitalize()} confidence"


def render_neck_block(
    neck: NeckBlockResult, console: Optional[Console] = None
) -> None:
    """Print a neck-block reading."""
    console = console or Console()
    if neck.kind == "decoded":
        console.print(f"Neck block {escape(neck.code)}: [bold]{neck.year}[/bold]")
    elif neck.kind == "ambiguous":
        first, second = neck.possible_years
        console.print(
            f"Neck block {escape(neck.code)}: [yellow bold]{first} or {second}[/]"
        )
    else:
        console.print(f"Neck block {escape(neck.code)}: [red]not decoded[/red]")
    console.print(escape(neck.notes))


def render_lookup(result: AggregateResult, console: Optional[Console] = None) -> None:
    """Print a serial lookup result."""
    console = console or Console()

    table = Table(title=f"Serial {escape(result.serial)}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Format", result.format.value)
    table.add_row("Estimated year", escape(result.year_range_display))
    if result.estimated_month is not None:
        table.add_row("Month", str(result.estimated_month))
    table.add_row("Country", escape(result.country_guess))
    if result.prefix:
        table.add_row("Prefix", result.prefix)
    table.add_row(
        "Confidence",
        confidence_meter(result.confidence_tier, result.confidence_percent),
    )
    console.print(table)
    console.print(escape(result.notes))

    if result.neck_block is not None and result.neck_block.kind == "ambiguous":
        first, second = result.neck_block.possible_years
        console.print(
            f"[yellow bold]Neck block is ambiguous:[/] {first} or {second}."
        )
        if result.neck_block_years_in_production:
            years = ", ".join(str(y) for y in result.neck_block_years_in_production)
            console.print(f"Within a matched model's production years: {years}")
    elif result.needs_emperor_code and result.neck_block is None:
        console.print(
            "[yellow]Check the neck block for an Emperor date stamp and pass it "
            "with --neck-block.[/yellow]"
        )

    if result.models:
        models = Table(title="Likely models")
        models.add_column("Model", style="bold")
        models.add_column("Series")
        models.add_column("Country")
        for model in result.models:
            models.add_row(
                escape(model.name),
                escape(model.series or ""),
                escape(model.country or ""),
            )
        console.print(models)

    if result.similar_guitars:
        similar = Table(title="Similar approved guitars")
        similar.add_column("Serial", style="cyan")
        similar.add_column("Year")
        similar.add_column("Model")
        for guitar in result.similar_guitars:
            similar.add_row(
                escape(guitar.serial_number),
                str(guitar.estimated_year or ""),
                escape(guitar.model_name or ""),
            )
        console.print(similar)


def render_matches(
    results: Sequence[MatchResult],
    catalog: Optional[Catalog] = None,
    console: Optional[Console] = None,
) -> None:
    """Print ranked model matches."""
    console = console or Console()
    if not results:
        console.print("[yellow]No models match the selected features.[/yellow]")
        return

    table = Table(title="Most likely models")
    table.add_column("#", justify="right")
    table.add_column("Model", style="bold")
    table.add_column("Match", justify="right")
    table.add_column("Required", justify="right")
    table.add_column("Features", justify="right")
    for rank, result in enumerate(results, start=1):
        model = catalog.model_by_id(result.model_id) if catalog else None
        name = model.name if model else result.model_id
        style = "green" if result.all_required_present else "yellow"
        table.add_row(
            str(rank),
            escape(name),
            f"{result.match_percentage}%",
            f"{result.matched_required}/{result.total_required}",
            f"{result.matched_features}/{result.total_features}",
            style=style,
        )
    console.print(table)
