"""Estimator module for job budgets.

Turns part area or a nesting layout into material, labor and final price.
"""

from cutplan.estimator.budget import (
    EFFECTIVE_SHEET_AREA_M2,
    HARDWARE_RATIO,
    OTHER_RATIO,
    BudgetEngine,
    BudgetError,
    BudgetResult,
    InvalidRateConfigError,
    MaterialLine,
    NonPositiveAreaError,
    RateConfig,
    calculate,
    layout_area_m2,
    total_area_m2,
)

__all__ = [
    "EFFECTIVE_SHEET_AREA_M2",
    "HARDWARE_RATIO",
    "OTHER_RATIO",
    "BudgetEngine",
    "BudgetError",
    "BudgetResult",
    "InvalidRateConfigError",
    "MaterialLine",
    "NonPositiveAreaError",
    "RateConfig",
    "calculate",
    "layout_area_m2",
    "total_area_m2",
]
