"""Material utilization of packed sheets."""

from cutplan.nesting.shelf_nester import Sheet
from cutplan.utils import round_half_up


def efficiency(sheet: Sheet, sheet_width: int, sheet_height: int) -> int:
    """Percentage of the full sheet area covered by placed pieces (0-100)."""
    if sheet.is_empty:
        return 0
    sheet_area = sheet_width * sheet_height
    if sheet_area <= 0:
        raise ValueError(f"Sheet dimensions must be positive, got {sheet_width}x{sheet_height}")
    return round_half_up(sheet.used_area / sheet_area * 100)
