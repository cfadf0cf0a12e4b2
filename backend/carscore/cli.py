"""
CarScore CLI - reliability and ownership-cost reports from local data files.

Reads complaint/recall/vehicle data that was fetched elsewhere (JSON or YAML)
and prints the scored report. No network access.

Features:
- Colored tables with rich
- JSON output option (--json flag)
- Verbose mode (-v, -vv)

Usage:
    carscore report camry-2022.json
    carscore --json report camry-2022.yaml
    carscore price --year 2022 --make Toyota --model Camry --trim XLE
    carscore compare camry-2022.json accord-2022.json
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
import yaml
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from carscore.core.config import settings
from carscore.core.exceptions import CarScoreException
from carscore.schemas.report import VehicleComparison, VehicleReport
from carscore.services.pricing_service import estimate_msrp, price_category
from carscore.services.reliability_service import format_complaint_percentage
from carscore.services.report_service import build_vehicle_report, compare_vehicles

console = Console()
err_console = Console(stderr=True)

VERDICT_COLORS = {
    "recommended": "green",
    "caution": "yellow",
    "avoid": "red",
}

RISK_COLORS = {
    "low": "green",
    "moderate": "yellow",
    "high": "red",
}


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
        force=True,
    )


def output_json(data: Any) -> None:
    """Output data as formatted JSON."""
    console.print(
        json.dumps(data, ensure_ascii=False, indent=2, default=str),
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


def fail(message: str) -> None:
    """Print an error and exit non-zero."""
    console.print(f"[red]Error: {message}[/red]")
    raise SystemExit(1)


def score_color(score: float) -> str:
    if score >= 8:
        return "green"
    if score >= 6:
        return "yellow"
    if score >= 4:
        return "orange1"
    return "red"


def load_input(path: str) -> Dict[str, Any]:
    """Load a JSON or YAML input file into a mapping."""
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            if file_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        fail(f"Could not parse {file_path.name}: {e}")

    if not isinstance(data, dict) or "vehicle" not in data:
        fail(f"{file_path.name} must contain a 'vehicle' section")
    return data


def report_from_input(data: Dict[str, Any], current_year: Optional[int]) -> VehicleReport:
    """Build a report from a loaded input mapping, turning bad input into CLI errors."""
    try:
        return build_vehicle_report(
            data["vehicle"],
            data.get("complaints") or [],
            data.get("recalls") or [],
            fuel_prices=data.get("fuel_prices"),
            annual_miles=data.get("annual_miles"),
            sales_volume=data.get("sales_volume"),
            current_year=current_year,
        )
    except CarScoreException as e:
        fail(e.message)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        fail(f"Invalid input at {location}: {first['msg']}")


# =============================================================================
# Click CLI Application
# =============================================================================

class Context:
    """CLI context for passing options between commands."""

    def __init__(self):
        self.verbose: int = 0
        self.json_output: bool = False


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v, -vv)")
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
@click.version_option(version=settings.VERSION, prog_name="carscore")
@pass_context
def cli(ctx: Context, verbose: int, json_output: bool):
    """
    CarScore CLI - vehicle reliability and cost of ownership.

    Scores NHTSA complaints and recalls, estimates MSRP, and projects
    ownership costs from local input files.
    """
    ctx.verbose = verbose
    ctx.json_output = json_output
    setup_logging(verbose)


# =============================================================================
# Report Command
# =============================================================================

@cli.command("report")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--current-year", type=int, help="Reference year (defaults to this year)")
@pass_context
def report_cmd(ctx: Context, input_file: str, current_year: Optional[int]):
    """
    Build a reliability and cost report for one vehicle.

    INPUT_FILE holds 'vehicle', 'complaints', 'recalls' and optionally
    'fuel_prices', 'annual_miles' and 'sales_volume'.

    Examples:

        carscore report camry-2022.json

        carscore --json report camry-2022.yaml --current-year 2024
    """
    data = load_input(input_file)
    report = report_from_input(data, current_year)

    if ctx.json_output:
        output_json(report.model_dump(mode="json"))
        return

    _display_report(report, data.get("sales_volume"))


def _display_report(report: VehicleReport, sales_volume: Optional[float]) -> None:
    reliability = report.reliability
    color = score_color(reliability.overall)

    console.print()
    console.print(Panel(f"[bold blue]{report.vehicle.display_name}[/bold blue]", box=box.DOUBLE))
    console.print(
        f"\n[bold]Reliability:[/bold] [{color}]{reliability.overall}/10 "
        f"({report.score_label})[/{color}]"
    )
    risk = str(reliability.lemon_year_risk)
    console.print(f"[bold]Lemon-year risk:[/bold] [{RISK_COLORS[risk]}]{risk}[/{RISK_COLORS[risk]}]")
    console.print(
        f"[bold]Complaints:[/bold] {reliability.complaint_count} "
        f"({format_complaint_percentage(reliability.complaint_count, sales_volume)} of vehicles)"
        f"   [bold]Recalls:[/bold] {reliability.recall_count}"
    )
    breakdown = reliability.severity_breakdown
    console.print(
        f"[bold]Severity:[/bold] [red]{breakdown.critical} critical[/red], "
        f"[yellow]{breakdown.major} major[/yellow], {breakdown.minor} minor"
    )

    table = Table(title="Component Scores", box=box.ROUNDED)
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Complaints", justify="right")
    for component in reliability.components:
        c = score_color(component.score)
        table.add_row(component.category, f"[{c}]{component.score}[/{c}]", str(component.complaint_count))
    console.print()
    console.print(table)

    if report.common_problems:
        problems = Table(title="Common Problems", box=box.ROUNDED)
        problems.add_column("Component", style="cyan")
        problems.add_column("Count", justify="right")
        problems.add_column("Share", justify="right")
        problems.add_column("Flags")
        for problem in report.common_problems:
            flags = [
                name for name, flag in (
                    ("crash", problem.has_crashes),
                    ("fire", problem.has_fires),
                    ("injury", problem.has_injuries),
                ) if flag
            ]
            problems.add_row(
                problem.component,
                str(problem.count),
                f"{problem.percentage}%",
                f"[red]{', '.join(flags)}[/red]" if flags else "",
            )
        console.print(problems)

    summary = report.pros_cons
    if summary.pros:
        console.print("\n[bold green]Pros:[/bold green]")
        for pro in summary.pros:
            console.print(f"  + {pro}")
    if summary.cons:
        console.print("\n[bold red]Cons:[/bold red]")
        for con in summary.cons:
            console.print(f"  - {con}")
    verdict = str(summary.verdict)
    console.print(
        f"\n[bold]Verdict:[/bold] [bold {VERDICT_COLORS[verdict]}]{verdict.upper()}"
        f"[/bold {VERDICT_COLORS[verdict]}]"
    )

    price_note = "known MSRP"
    if report.pricing:
        price_note = f"estimated, {report.pricing.confidence} confidence"
    console.print(
        f"\n[bold]Price:[/bold] ${report.price_used:,} ({price_note}, "
        f"{price_category(report.price_used)})"
    )

    cost = report.ownership_cost
    if cost is None:
        console.print("[dim]No fuel economy data, ownership cost not estimated[/dim]")
        return

    costs = Table(title="Annual Ownership Cost", box=box.ROUNDED)
    costs.add_column("Item", style="cyan")
    costs.add_column("Cost", justify="right")
    for label, amount in (
        ("Fuel", cost.fuel_cost),
        ("Insurance", cost.insurance_cost),
        ("Maintenance", cost.maintenance_cost),
        ("Repairs", cost.repair_cost),
        ("Depreciation", cost.depreciation),
    ):
        costs.add_row(label, f"${amount:,}")
    costs.add_row("[bold]Total / year[/bold]", f"[bold]${cost.total_annual_cost:,}[/bold]")
    costs.add_row("Five years", f"${cost.five_year_cost:,}")
    console.print(costs)
    console.print(f"[bold]Cost rating:[/bold] {report.cost_rating}")


# =============================================================================
# Price Command
# =============================================================================

@cli.command("price")
@click.option("--year", "-y", type=int, required=True, help="Model year")
@click.option("--make", "-m", required=True, help="Vehicle make")
@click.option("--model", required=True, help="Vehicle model")
@click.option("--vehicle-class", "-c", help="EPA vehicle class, e.g. 'Midsize Cars'")
@click.option("--trim", "-t", help="Trim level")
@click.option("--current-year", type=int, help="Reference year (defaults to this year)")
@pass_context
def price_cmd(
    ctx: Context,
    year: int,
    make: str,
    model: str,
    vehicle_class: Optional[str],
    trim: Optional[str],
    current_year: Optional[int],
):
    """
    Estimate the MSRP of a vehicle.

    Examples:

        carscore price --year 2023 --make Honda --model Civic

        carscore price -y 2021 -m Kia --model Carnival -c Minivans
    """
    estimate = estimate_msrp(
        year, make, model, vehicle_class=vehicle_class, trim=trim, current_year=current_year
    )

    if ctx.json_output:
        output_json(estimate.model_dump(mode="json"))
        return

    table = Table(title=f"{year} {make} {model} {trim or ''}".strip(), box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Estimated MSRP", f"${estimate.base_price:,}")
    table.add_row("Range", f"${estimate.range.low:,} - ${estimate.range.high:,}")
    table.add_row("Category", price_category(estimate.base_price))
    table.add_row("Confidence", str(estimate.confidence))
    table.add_row("Source", str(estimate.source))
    console.print(table)


# =============================================================================
# Compare Command
# =============================================================================

@cli.command("compare")
@click.argument("input_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--current-year", type=int, help="Reference year (defaults to this year)")
@pass_context
def compare_cmd(ctx: Context, input_files: Tuple[str, ...], current_year: Optional[int]):
    """
    Compare several vehicles side by side.

    Example:

        carscore compare camry-2022.json accord-2022.json civic-2022.yaml
    """
    reports = [report_from_input(load_input(path), current_year) for path in input_files]
    comparison = compare_vehicles(reports)

    if ctx.json_output:
        output_json(comparison.model_dump(mode="json"))
        return

    _display_comparison(comparison)


def _display_comparison(comparison: VehicleComparison) -> None:
    table = Table(title="Vehicle Comparison", box=box.ROUNDED)
    table.add_column("Vehicle", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Complaints", justify="right")
    table.add_column("Recalls", justify="right")
    table.add_column("MPG", justify="right")
    table.add_column("Annual cost", justify="right")
    table.add_column("5-year cost", justify="right")
    table.add_column("Verdict")
    table.add_column("Top problems")

    for row in comparison.vehicles:
        c = score_color(row.reliability_score)
        v = VERDICT_COLORS[str(row.verdict)]
        table.add_row(
            f"{row.year} {row.make} {row.model}",
            f"[{c}]{row.reliability_score}[/{c}]",
            str(row.complaint_count),
            str(row.recall_count),
            f"{row.combined_mpg:g}" if row.combined_mpg else "-",
            f"${row.total_annual_cost:,}" if row.total_annual_cost is not None else "-",
            f"${row.five_year_cost:,}" if row.five_year_cost is not None else "-",
            f"[{v}]{row.verdict}[/{v}]",
            ", ".join(row.top_problems) or "-",
        )
    console.print(table)

    costs = comparison.costs
    if costs.average_annual:
        console.print(
            f"\n[bold]Annual cost:[/bold] cheapest ${costs.cheapest:,}, "
            f"most expensive ${costs.most_expensive:,}, average ${costs.average_annual:,}"
        )


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
