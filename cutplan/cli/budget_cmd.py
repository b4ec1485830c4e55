"""CLI command for job budgets."""

import json
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


@click.command("budget")
@click.argument("bom_file", type=click.File("r", encoding="utf-8"), required=False)
@click.option("--area", "-a", type=float, help="Total part area in m² (if no BOM)")
@click.option("--layout", is_flag=True, help="Bill the sheets of a real nesting run")
@click.option("--price-per-sheet", type=float, help="Price of one stock sheet")
@click.option("--markup", type=float, help="Markup multiplier")
@click.option("--labor", type=float, help="Labor rate per m²")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def budget(bom_file, area, layout, price_per_sheet, markup, labor, as_json):
    """Budget a job from a BOM file or a total area."""
    from dataclasses import replace

    from cutplan.config import get_settings
    from cutplan.estimator import BudgetError, total_area_m2
    from cutplan.nesting import ShelfNester, UnplaceablePartError
    from cutplan.parts import extract

    settings = get_settings()
    rates = settings.rate_config()
    overrides = {
        "price_per_sheet": price_per_sheet,
        "markup_multiplier": markup,
        "labor_per_square_meter": labor,
    }
    rates = replace(rates, **{k: v for k, v in overrides.items() if v is not None})
    engine = settings.budget_engine()

    try:
        if bom_file is not None:
            parts = extract(bom_file.read(), wood_keywords=settings.wood_keywords)
            if layout:
                sheets = ShelfNester(settings.nesting_config()).pack(parts)
                result = engine.calculate_for_layout(sheets, rates)
                source = f"Layout: {len(sheets)} sheets"
            else:
                result = engine.calculate(total_area_m2(parts), rates)
                source = f"BOM: {len(parts)} parts"
        elif area is not None:
            result = engine.calculate(area, rates)
            source = f"Area: {area} m²"
        else:
            console.print("[red]Error: Provide either a BOM file or --area[/red]")
            sys.exit(1)
    except (BudgetError, UnplaceablePartError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    table = Table(title=f"Budget - {source}")
    table.add_column("Category", style="cyan")
    table.add_column("Cost", justify="right", style="green")
    table.add_column("Details", style="dim")

    for line in result.materials:
        table.add_row(line.name, f"{line.cost:.2f}", "")
    table.add_row("Labor", f"{result.labor:.2f}", f"{result.area_m2:.3f} m²")
    table.add_row("", "", "")
    table.add_row("[bold]Total cost[/bold]", f"[bold]{result.total:.2f}[/bold]", f"{result.sheets_used} sheets")

    console.print(table)
    console.print(Panel(
        f"[bold green]Final price:[/bold green] {result.final_price:.2f}\n"
        f"[bold yellow]Margin:[/bold yellow] {result.margin:.1f}%",
        title="Price",
    ))
