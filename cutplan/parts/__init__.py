"""Part specifications, BOM text extraction and module explosion."""

from cutplan.parts.part import Material, Part
from cutplan.parts.extractor import (
    DEFAULT_PART_NAME,
    WOOD_KEYWORDS,
    classify_material,
    extract,
    parse_line,
)
from cutplan.parts.modules import (
    FurnitureModule,
    ModuleType,
    explode_module,
    explode_modules,
)

__all__ = [
    "Material",
    "Part",
    "DEFAULT_PART_NAME",
    "WOOD_KEYWORDS",
    "classify_material",
    "extract",
    "parse_line",
    "FurnitureModule",
    "ModuleType",
    "explode_module",
    "explode_modules",
]
