"""Main CLI entry point for Workshop Cut Planner."""

import click
from rich.console import Console

from cutplan import __version__
from cutplan.utils import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="Workshop Cut Planner")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Workshop Cut Planner - nesting and budgets for furniture workshops.

    Turns a bill of materials into sheet cutting layouts and a priced
    budget.
    """
    from cutplan.config import get_settings

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging("DEBUG" if verbose else get_settings().log_level)


# Import and register command groups
from cutplan.cli.nesting_cmd import extract, modules, pack
from cutplan.cli.budget_cmd import budget

cli.add_command(extract)
cli.add_command(pack)
cli.add_command(modules)
cli.add_command(budget)


@cli.command()
def status() -> None:
    """Show the active configuration."""
    from cutplan.config import get_settings

    settings = get_settings()

    console.print("[bold]Workshop Cut Planner Status[/bold]")
    console.print(f"Version: {__version__}")
    console.print()
    console.print("[bold]Stock sheet:[/bold]")
    console.print(f"  Size: {settings.sheet_width} x {settings.sheet_height} mm")
    console.print(f"  Kerf: {settings.kerf} mm")
    console.print(f"  Trim: {settings.trim} mm")
    console.print(f"  Effective area: {settings.effective_sheet_area_m2} m²")
    console.print()
    console.print("[bold]Rates:[/bold]")
    console.print(f"  Price per sheet: {settings.price_per_sheet:.2f}")
    console.print(f"  Labor per m²: {settings.labor_per_square_meter:.2f}")
    console.print(f"  Markup: x{settings.markup_multiplier}")
    console.print(f"  Wood keywords: {', '.join(settings.wood_keywords)}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
