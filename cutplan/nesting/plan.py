"""Cutting plans: a nesting run with its utilization summary."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from cutplan.nesting.efficiency import efficiency
from cutplan.nesting.shelf_nester import NestingConfig, Sheet, ShelfNester
from cutplan.parts.part import Material, Part
from cutplan.utils import get_logger, mm2_to_m2

logger = get_logger("nesting.plan")


@dataclass(frozen=True)
class CuttingPlan:
    """Packed sheets plus per-sheet utilization."""
    sheets: Tuple[Sheet, ...] = ()
    sheet_width: int = 2730
    sheet_height: int = 1830
    material: Optional[Material] = None

    @property
    def sheet_count(self) -> int:
        return len(self.sheets)

    @property
    def total_pieces(self) -> int:
        return sum(len(sheet.items) for sheet in self.sheets)

    @property
    def efficiencies(self) -> List[int]:
        return [efficiency(sheet, self.sheet_width, self.sheet_height) for sheet in self.sheets]

    @property
    def average_efficiency(self) -> float:
        """Mean sheet utilization, 0 when nothing was packed."""
        values = self.efficiencies
        if not values:
            return 0.0
        return sum(values) / len(values)

    @property
    def used_area_m2(self) -> float:
        return mm2_to_m2(sum(sheet.used_area for sheet in self.sheets))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "material": self.material.value if self.material else "all",
            "sheet_width": self.sheet_width,
            "sheet_height": self.sheet_height,
            "sheet_count": self.sheet_count,
            "total_pieces": self.total_pieces,
            "average_efficiency": round(self.average_efficiency, 1),
            "used_area_m2": round(self.used_area_m2, 4),
            "sheets": [
                dict(sheet.to_dict(), efficiency=pct)
                for sheet, pct in zip(self.sheets, self.efficiencies)
            ],
        }


def plan_cuts(
    parts: Iterable[Part],
    config: Optional[NestingConfig] = None,
    material: Optional[Material] = None,
) -> CuttingPlan:
    """
    Pack parts and summarize the result.

    Args:
        parts: Part specifications
        config: Sheet and saw configuration
        material: Only pack parts of this material (None packs everything)

    Returns:
        Cutting plan
    """
    config = config or NestingConfig()
    selected = [p for p in parts if material is None or p.material == material]
    sheets = ShelfNester(config).pack(selected)
    return CuttingPlan(
        sheets=tuple(sheets),
        sheet_width=config.sheet_width,
        sheet_height=config.sheet_height,
        material=material,
    )


def plan_by_material(
    parts: Iterable[Part],
    config: Optional[NestingConfig] = None,
) -> Dict[Material, CuttingPlan]:
    """Pack each material onto its own stock. Materials without parts are omitted."""
    parts = list(parts)
    plans = {}
    for material in Material:
        if any(p.material == material for p in parts):
            plans[material] = plan_cuts(parts, config, material)
            logger.debug(f"{material.value}: {plans[material].sheet_count} sheets")
    return plans
