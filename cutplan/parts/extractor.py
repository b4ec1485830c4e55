"""Extract rectangular parts from free-form BOM text.

Lines look like ``Lateral: 2x 700x500 MDF Freijó``. Lines without a
``<qty>x <width>x<height>`` group are skipped, since BOM text mixes
dimensions with notes and headers.
"""

import re
from typing import Iterable, List, Optional

from cutplan.parts.part import Material, Part
from cutplan.utils import get_logger

logger = get_logger("parts.extractor")

DIMENSION_PATTERN = re.compile(r"(\d+)x\s+(\d+)[x|*](\d+)", re.IGNORECASE)

WOOD_KEYWORDS = ("freijó", "freijo", "amadeirado")

DEFAULT_PART_NAME = "Technical Part"

_BULLET_CHARS = re.compile(r"[*-]")


def classify_material(line: str, wood_keywords: Iterable[str] = WOOD_KEYWORDS) -> Material:
    """Classify a BOM line as wood-grain or white board."""
    lowered = line.lower()
    if any(keyword.lower() in lowered for keyword in wood_keywords):
        return Material.WOOD
    return Material.WHITE


def _part_name(line: str) -> str:
    if ":" not in line:
        return DEFAULT_PART_NAME
    raw = line.split(":", 1)[0]
    name = _BULLET_CHARS.sub("", raw).strip()
    return name or DEFAULT_PART_NAME


def parse_line(
    line: str,
    part_id: str,
    wood_keywords: Iterable[str] = WOOD_KEYWORDS,
) -> Optional[Part]:
    """Parse a single BOM line. Returns None if it holds no usable dimensions."""
    match = DIMENSION_PATTERN.search(line)
    if not match:
        return None

    quantity, first, second = (int(group) for group in match.groups())
    if quantity < 1 or first <= 0 or second <= 0:
        logger.debug(f"Skipping line with zero dimension: {line!r}")
        return None

    return Part(
        id=part_id,
        name=_part_name(line),
        width=max(first, second),
        height=min(first, second),
        quantity=quantity,
        material=classify_material(line, wood_keywords),
    )


def extract(text: str, wood_keywords: Optional[Iterable[str]] = None) -> List[Part]:
    """
    Extract parts from BOM text.

    Args:
        text: Newline-separated BOM text
        wood_keywords: Keywords marking wood-grain lines (defaults to WOOD_KEYWORDS)

    Returns:
        Parts in line order; empty when nothing matches
    """
    keywords = tuple(wood_keywords) if wood_keywords is not None else WOOD_KEYWORDS
    parts = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        part = parse_line(line, str(line_number), keywords)
        if part is not None:
            parts.append(part)

    logger.debug(f"Extracted {len(parts)} parts from {len(text.splitlines())} lines")
    return parts
