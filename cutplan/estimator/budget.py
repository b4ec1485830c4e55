"""Material and labor budget for a cutting job.

Derives sheet count, material, hardware, other supplies and labor cost
from the total part area, then applies the workshop markup.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from cutplan.nesting.shelf_nester import Sheet
from cutplan.parts.part import Part
from cutplan.utils import get_logger, mm2_to_m2

logger = get_logger("estimator.budget")

HARDWARE_RATIO = 0.22  # Hinges, slides and fittings, share of material cost
OTHER_RATIO = 0.08  # Edge banding, glue and screws, share of material + hardware
EFFECTIVE_SHEET_AREA_M2 = 5.06

SHEET_MATERIAL_LABEL = "Stock sheets"
HARDWARE_LABEL = "Hardware"
OTHER_LABEL = "Other supplies"


class BudgetError(Exception):
    """Base class for budget errors."""
    pass


class InvalidRateConfigError(BudgetError):
    """A rate is missing, not a finite number, zero or negative."""
    pass


class NonPositiveAreaError(BudgetError):
    """The area to budget is not a finite number, zero or negative."""
    pass


@dataclass(frozen=True)
class RateConfig:
    """Workshop rates supplied by the caller."""
    price_per_sheet: Optional[float] = None
    markup_multiplier: Optional[float] = None
    labor_per_square_meter: Optional[float] = None

    def validate(self) -> None:
        """Raise InvalidRateConfigError if any rate is missing, NaN, infinite or not positive."""
        for name in ("price_per_sheet", "markup_multiplier", "labor_per_square_meter"):
            value = getattr(self, name)
            if value is None:
                raise InvalidRateConfigError(f"Rate {name!r} is missing")
            if not math.isfinite(value) or value <= 0:
                raise InvalidRateConfigError(f"Rate {name!r} must be a positive number, got {value}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "price_per_sheet": self.price_per_sheet,
            "markup_multiplier": self.markup_multiplier,
            "labor_per_square_meter": self.labor_per_square_meter,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RateConfig":
        """Create from dictionary. Missing keys stay None and fail validation."""
        return cls(
            price_per_sheet=data.get("price_per_sheet"),
            markup_multiplier=data.get("markup_multiplier"),
            labor_per_square_meter=data.get("labor_per_square_meter"),
        )


@dataclass(frozen=True)
class MaterialLine:
    """One material cost line."""
    name: str
    cost: float

    def to_dict(self) -> dict:
        return {"name": self.name, "cost": self.cost}


@dataclass(frozen=True)
class BudgetResult:
    """Cost breakdown and final price."""
    materials: Tuple[MaterialLine, ...] = ()
    labor: float = 0.0
    total: float = 0.0
    final_price: float = 0.0
    margin: float = 0.0  # Percent of final price
    sheets_used: int = 0
    area_m2: float = 0.0

    @property
    def material_total(self) -> float:
        return sum(line.cost for line in self.materials)

    @property
    def profit(self) -> float:
        return self.final_price - self.total

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "materials": [line.to_dict() for line in self.materials],
            "labor": self.labor,
            "total": self.total,
            "final_price": self.final_price,
            "margin": self.margin,
            "sheets_used": self.sheets_used,
            "area_m2": self.area_m2,
        }


class BudgetEngine:
    """
    Budget calculator for sheet-goods furniture jobs.

    Stateless apart from the fixed ratios; every call derives a fresh
    BudgetResult from its arguments.
    """

    def __init__(
        self,
        effective_sheet_area_m2: float = EFFECTIVE_SHEET_AREA_M2,
        hardware_ratio: float = HARDWARE_RATIO,
        other_ratio: float = OTHER_RATIO,
    ):
        """
        Initialize budget engine.

        Args:
            effective_sheet_area_m2: Real usable area of one stock sheet
            hardware_ratio: Hardware cost as a share of material cost
            other_ratio: Other supplies as a share of material + hardware cost
        """
        self.effective_sheet_area_m2 = effective_sheet_area_m2
        self.hardware_ratio = hardware_ratio
        self.other_ratio = other_ratio

    def calculate(self, total_area_m2: float, rates: RateConfig) -> BudgetResult:
        """
        Budget a job from its total part area.

        Args:
            total_area_m2: Total area of all parts in m²
            rates: Workshop rates

        Returns:
            Budget breakdown

        Raises:
            NonPositiveAreaError: If total_area_m2 is not a positive number
            InvalidRateConfigError: If a rate or the sheet area is invalid
        """
        self._validate(total_area_m2, rates)
        sheet_area = self.effective_sheet_area_m2
        if sheet_area is None or not math.isfinite(sheet_area) or sheet_area <= 0:
            raise InvalidRateConfigError(
                f"Effective sheet area must be a positive number, got {sheet_area}"
            )

        sheets_used = math.ceil(total_area_m2 / sheet_area)
        return self._build(total_area_m2, sheets_used, rates)

    def calculate_for_layout(self, sheets: List[Sheet], rates: RateConfig) -> BudgetResult:
        """
        Budget a job from a nesting run, billing the sheets actually used.

        Args:
            sheets: Packed sheets
            rates: Workshop rates

        Returns:
            Budget breakdown
        """
        area = layout_area_m2(sheets)
        self._validate(area, rates)
        return self._build(area, len(sheets), rates)

    def _validate(self, total_area_m2: float, rates: RateConfig) -> None:
        if total_area_m2 is None or not math.isfinite(total_area_m2) or total_area_m2 <= 0:
            raise NonPositiveAreaError(f"Total area must be a positive number, got {total_area_m2}")
        rates.validate()

    def _build(self, area_m2: float, sheets_used: int, rates: RateConfig) -> BudgetResult:
        material_cost = sheets_used * rates.price_per_sheet
        hardware_cost = material_cost * self.hardware_ratio
        other_cost = (material_cost + hardware_cost) * self.other_ratio
        labor_cost = area_m2 * rates.labor_per_square_meter

        total = material_cost + hardware_cost + other_cost + labor_cost
        final_price = total * rates.markup_multiplier
        margin = (final_price - total) / final_price * 100

        logger.debug(
            f"Budget: {area_m2:.3f} m² on {sheets_used} sheets, "
            f"total {total:.2f}, final {final_price:.2f}"
        )

        return BudgetResult(
            materials=(
                MaterialLine(SHEET_MATERIAL_LABEL, material_cost),
                MaterialLine(HARDWARE_LABEL, hardware_cost),
                MaterialLine(OTHER_LABEL, other_cost),
            ),
            labor=labor_cost,
            total=total,
            final_price=final_price,
            margin=margin,
            sheets_used=sheets_used,
            area_m2=area_m2,
        )


def total_area_m2(parts: Iterable[Part]) -> float:
    """Total area of all part units in m²."""
    return mm2_to_m2(sum(part.total_area for part in parts))


def layout_area_m2(sheets: Iterable[Sheet]) -> float:
    """Total placed area of packed sheets in m²."""
    return mm2_to_m2(sum(sheet.used_area for sheet in sheets))


def calculate(
    total_area_m2: float,
    rates: RateConfig,
    effective_sheet_area_m2: float = EFFECTIVE_SHEET_AREA_M2,
) -> BudgetResult:
    """
    Budget a job from its total part area.

    Args:
        total_area_m2: Total area of all parts in m²
        rates: Workshop rates
        effective_sheet_area_m2: Real usable area of one stock sheet

    Returns:
        Budget breakdown
    """
    engine = BudgetEngine(effective_sheet_area_m2=effective_sheet_area_m2)
    return engine.calculate(total_area_m2, rates)
