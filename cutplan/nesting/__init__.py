"""Nesting module for packing parts onto stock sheets.

Provides the shelf nester, sheet efficiency and cutting plan summaries.
"""

from cutplan.nesting.shelf_nester import (
    NestingConfig,
    Piece,
    PlacedPiece,
    Shelf,
    Sheet,
    ShelfNester,
    UnplaceablePartError,
    create_nester,
    pack,
)
from cutplan.nesting.efficiency import efficiency
from cutplan.nesting.plan import CuttingPlan, plan_by_material, plan_cuts

__all__ = [
    "NestingConfig",
    "Piece",
    "PlacedPiece",
    "Shelf",
    "Sheet",
    "ShelfNester",
    "UnplaceablePartError",
    "create_nester",
    "pack",
    "efficiency",
    "CuttingPlan",
    "plan_by_material",
    "plan_cuts",
]
