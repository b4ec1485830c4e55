"""CLI commands for part extraction and sheet nesting."""

import json
import sys

import click
from rich.console import Console
from rich.table import Table

from cutplan.parts import FurnitureModule, Material, ModuleType, explode_modules, extract as extract_parts
from cutplan.utils import mm2_to_m2

console = Console()

MATERIAL_CHOICES = ["all"] + [m.value for m in Material]


def _nesting_config(sheet_width, sheet_height, kerf, trim):
    from cutplan.config import get_settings
    from cutplan.nesting import NestingConfig

    settings = get_settings()
    return NestingConfig(
        sheet_width=sheet_width if sheet_width is not None else settings.sheet_width,
        sheet_height=sheet_height if sheet_height is not None else settings.sheet_height,
        kerf=kerf if kerf is not None else settings.kerf,
        trim=trim if trim is not None else settings.trim,
    )


def _read_parts(bom_file):
    from cutplan.config import get_settings

    return extract_parts(bom_file.read(), wood_keywords=get_settings().wood_keywords)


def _parts_table(parts, title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Qty", justify="right")
    table.add_column("Size (mm)", justify="right")
    table.add_column("Material")
    for part in parts:
        table.add_row(
            part.id,
            part.name,
            str(part.quantity),
            f"{part.width} x {part.height}",
            part.material.value,
        )
    return table


def _print_plan(plan, title: str) -> None:
    table = Table(title=title)
    table.add_column("Sheet", justify="right", style="cyan")
    table.add_column("Pieces", justify="right")
    table.add_column("Shelves", justify="right")
    table.add_column("Used (m²)", justify="right")
    table.add_column("Efficiency", justify="right", style="green")

    for sheet, pct in zip(plan.sheets, plan.efficiencies):
        table.add_row(
            str(sheet.id),
            str(len(sheet.items)),
            str(len(sheet.shelves)),
            f"{mm2_to_m2(sheet.used_area):.3f}",
            f"{pct}%",
        )

    console.print(table)
    console.print(
        f"[bold]{plan.sheet_count} sheets[/bold], {plan.total_pieces} pieces, "
        f"average efficiency {plan.average_efficiency:.1f}%"
    )


def _sheet_options(func):
    func = click.option("--trim", type=int, help="Edge trim in mm")(func)
    func = click.option("--kerf", type=int, help="Saw kerf in mm")(func)
    func = click.option("--sheet-height", type=int, help="Stock sheet height in mm")(func)
    func = click.option("--sheet-width", type=int, help="Stock sheet width in mm")(func)
    return func


@click.command("extract")
@click.argument("bom_file", type=click.File("r", encoding="utf-8"))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def extract(bom_file, as_json):
    """Extract parts from a BOM text file ('-' for stdin)."""
    parts = _read_parts(bom_file)

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in parts], indent=2, ensure_ascii=False))
        return

    if not parts:
        console.print("[yellow]No parts found[/yellow]")
        return

    console.print(_parts_table(parts, f"Parts ({len(parts)})"))


@click.command("pack")
@click.argument("bom_file", type=click.File("r", encoding="utf-8"))
@click.option("--material", "-m", type=click.Choice(MATERIAL_CHOICES), default="all",
              help="Only pack parts of this material")
@click.option("--split", is_flag=True, help="Pack each material on its own stock")
@_sheet_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def pack(bom_file, material, split, sheet_width, sheet_height, kerf, trim, as_json):
    """Pack the parts of a BOM onto stock sheets."""
    from cutplan.nesting import UnplaceablePartError, plan_by_material, plan_cuts

    parts = _read_parts(bom_file)
    selected = None if material == "all" else Material(material)

    try:
        config = _nesting_config(sheet_width, sheet_height, kerf, trim)
        if split:
            plans = list(plan_by_material(parts, config).values())
        else:
            plans = [plan_cuts(parts, config, selected)]
    except (UnplaceablePartError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if as_json:
        data = [plan.to_dict() for plan in plans]
        click.echo(json.dumps(data if split else data[0], indent=2, ensure_ascii=False))
        return

    if not parts:
        console.print("[yellow]No parts found, nothing to pack[/yellow]")
        return

    for plan in plans:
        label = plan.material.value if plan.material else "all materials"
        _print_plan(plan, f"Cutting Plan - {label} ({config.sheet_width} x {config.sheet_height} mm)")


def _parse_module(value: str) -> FurnitureModule:
    try:
        kind, dims = value.split(":", 1)
        width, height, depth = (int(d) for d in dims.lower().split("x"))
        return FurnitureModule(type=ModuleType(kind), width=width, height=height, depth=depth)
    except ValueError as e:
        raise click.BadParameter(
            f"{value!r}: expected TYPE:WIDTHxHEIGHTxDEPTH ({e})", param_hint="--module"
        )


@click.command("modules")
@click.option("--module", "module_specs", multiple=True, required=True,
              help="Module as TYPE:WIDTHxHEIGHTxDEPTH, e.g. base_cabinet:800x720x550")
@click.option("--material", "-m", type=click.Choice([m.value for m in Material]), default="white",
              help="Board material for all panels")
@click.option("--pack", "do_pack", is_flag=True, help="Also pack the panels")
@_sheet_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def modules(module_specs, material, do_pack, sheet_width, sheet_height, kerf, trim, as_json):
    """Explode furniture modules into panels."""
    from dataclasses import replace

    from cutplan.nesting import UnplaceablePartError, plan_cuts

    specs = [replace(_parse_module(spec), material=Material(material)) for spec in module_specs]
    parts = explode_modules(specs)

    plan = None
    if do_pack:
        try:
            plan = plan_cuts(parts, _nesting_config(sheet_width, sheet_height, kerf, trim))
        except (UnplaceablePartError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)

    if as_json:
        data = {"parts": [p.to_dict() for p in parts]}
        if plan is not None:
            data["plan"] = plan.to_dict()
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    console.print(_parts_table(parts, f"Panels ({sum(p.quantity for p in parts)})"))
    if plan is not None:
        _print_plan(plan, "Cutting Plan")
