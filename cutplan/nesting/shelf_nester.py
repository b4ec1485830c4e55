"""Shelf-based sheet nesting for rectangular parts.

Packs unit pieces onto stock sheets with a Best-Fit Decreasing Height
(BFDH) heuristic: pieces are sorted tallest first and dropped into the
first shelf that can take them. Blade kerf is reserved between pieces
and shelves, and trim is reserved on every sheet edge.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from cutplan.parts.part import Material, Part
from cutplan.utils import get_logger

logger = get_logger("nesting.shelf_nester")


class UnplaceablePartError(Exception):
    """Raised when a piece cannot fit the usable area of an empty sheet."""

    def __init__(self, piece: "Piece", usable_width: int, usable_height: int):
        self.piece = piece
        self.usable_width = usable_width
        self.usable_height = usable_height
        super().__init__(
            f"Part {piece.part.name!r} ({piece.width}x{piece.height} mm) does not fit "
            f"the usable sheet area of {usable_width}x{usable_height} mm"
        )


@dataclass(frozen=True)
class Piece:
    """A single unit of a part, oriented for packing."""
    uid: str
    part: Part
    width: int
    height: int
    rotated: bool = False

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class PlacedPiece:
    """A piece placed on a sheet. Coordinates are mm from the top-left corner."""
    uid: str
    part_id: str
    name: str
    x: int
    y: int
    width: int
    height: int
    rotated: bool
    material: Material

    @classmethod
    def from_piece(cls, piece: Piece, x: int, y: int) -> "PlacedPiece":
        return cls(
            uid=piece.uid,
            part_id=piece.part.id,
            name=piece.part.name,
            x=x,
            y=y,
            width=piece.width,
            height=piece.height,
            rotated=piece.rotated,
            material=piece.part.material,
        )

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def overlaps(self, other: "PlacedPiece") -> bool:
        """Check whether two placed pieces intersect (touching edges do not count)."""
        return (
            self.x < other.right and other.x < self.right and
            self.y < other.bottom and other.y < self.bottom
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "uid": self.uid,
            "part_id": self.part_id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "rotated": self.rotated,
            "material": self.material.value,
        }


@dataclass(frozen=True)
class Shelf:
    """A horizontal strip of a sheet. origin_y is relative to the trimmed area.

    used_width includes the kerf after each piece and never exceeds the
    usable sheet width.
    """
    origin_y: int
    height: int
    used_width: int

    def to_dict(self) -> dict:
        return {
            "origin_y": self.origin_y,
            "height": self.height,
            "used_width": self.used_width,
        }


@dataclass(frozen=True)
class Sheet:
    """A packed stock sheet."""
    id: int
    items: Tuple[PlacedPiece, ...] = ()
    shelves: Tuple[Shelf, ...] = ()
    used_area: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "used_area": self.used_area,
            "items": [item.to_dict() for item in self.items],
            "shelves": [shelf.to_dict() for shelf in self.shelves],
        }


@dataclass
class NestingConfig:
    """Stock sheet and saw configuration (mm)."""
    sheet_width: int = 2730
    sheet_height: int = 1830
    kerf: int = 3  # Blade width between adjacent cuts
    trim: int = 10  # Unusable margin on every sheet edge

    def __post_init__(self):
        if self.sheet_width <= 0 or self.sheet_height <= 0:
            raise ValueError(
                f"Sheet dimensions must be positive, got {self.sheet_width}x{self.sheet_height}"
            )
        if self.kerf < 0 or self.trim < 0:
            raise ValueError(f"Kerf and trim must not be negative, got {self.kerf} and {self.trim}")
        if self.usable_width <= 0 or self.usable_height <= 0:
            raise ValueError(f"Trim of {self.trim} mm leaves no usable sheet area")

    @property
    def usable_width(self) -> int:
        return self.sheet_width - 2 * self.trim

    @property
    def usable_height(self) -> int:
        return self.sheet_height - 2 * self.trim

    @property
    def sheet_area(self) -> int:
        return self.sheet_width * self.sheet_height

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "sheet_width": self.sheet_width,
            "sheet_height": self.sheet_height,
            "kerf": self.kerf,
            "trim": self.trim,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NestingConfig":
        """Create from dictionary."""
        return cls(
            sheet_width=data.get("sheet_width", 2730),
            sheet_height=data.get("sheet_height", 1830),
            kerf=data.get("kerf", 3),
            trim=data.get("trim", 10),
        )


@dataclass
class _OpenShelf:
    origin_y: int
    height: int
    used_width: int = 0


@dataclass
class _OpenSheet:
    id: int
    shelves: List[_OpenShelf] = field(default_factory=list)
    items: List[PlacedPiece] = field(default_factory=list)
    used_area: int = 0

    def freeze(self) -> Sheet:
        return Sheet(
            id=self.id,
            items=tuple(self.items),
            shelves=tuple(
                Shelf(origin_y=s.origin_y, height=s.height, used_width=s.used_width)
                for s in self.shelves
            ),
            used_area=self.used_area,
        )


class ShelfNester:
    """
    Shelf (BFDH) nester for stock sheets.

    Wood pieces keep their authored orientation so the grain runs along
    the sheet. White pieces are laid landscape (width >= height).
    """

    def __init__(self, config: Optional[NestingConfig] = None):
        """
        Initialize shelf nester.

        Args:
            config: Sheet and saw configuration
        """
        self.config = config or NestingConfig()

    def expand(self, parts: Iterable[Part]) -> List[Piece]:
        """Expand parts into oriented unit pieces, in input order."""
        pieces = []
        for part in parts:
            width, height, rotated = part.width, part.height, False
            if part.material == Material.WHITE and width < height:
                width, height, rotated = height, width, True

            for index in range(part.quantity):
                pieces.append(Piece(
                    uid=f"{part.id}-{index}",
                    part=part,
                    width=width,
                    height=height,
                    rotated=rotated,
                ))
        return pieces

    def sort_pieces(self, pieces: List[Piece]) -> List[Piece]:
        """Sort by height, then width, both descending. Ties keep input order."""
        return sorted(pieces, key=lambda p: (-p.height, -p.width))

    def pack(self, parts: Iterable[Part]) -> List[Sheet]:
        """
        Pack parts onto as many sheets as needed.

        Args:
            parts: Part specifications

        Returns:
            Packed sheets in creation order

        Raises:
            UnplaceablePartError: If a piece is larger than the usable sheet area
        """
        pieces = self.sort_pieces(self.expand(parts))
        sheets: List[_OpenSheet] = []

        for piece in pieces:
            self._check_fits(piece)
            if not self._place_on_open_sheets(piece, sheets):
                sheet = _OpenSheet(id=len(sheets) + 1)
                logger.debug(f"Opening sheet {sheet.id} for {piece.uid}")
                self._place_on_new_shelf(piece, sheet, origin_y=0)
                sheets.append(sheet)

        logger.debug(f"Packed {len(pieces)} pieces onto {len(sheets)} sheets")
        return [sheet.freeze() for sheet in sheets]

    def _check_fits(self, piece: Piece) -> None:
        cfg = self.config
        if piece.width > cfg.usable_width or piece.height > cfg.usable_height:
            logger.warning(
                f"Unplaceable piece {piece.uid}: {piece.width}x{piece.height} mm "
                f"exceeds {cfg.usable_width}x{cfg.usable_height} mm"
            )
            raise UnplaceablePartError(piece, cfg.usable_width, cfg.usable_height)

    def _place_on_open_sheets(self, piece: Piece, sheets: List[_OpenSheet]) -> bool:
        cfg = self.config
        for sheet in sheets:
            # First fit over existing shelves
            for shelf in sheet.shelves:
                if (piece.height <= shelf.height and
                        shelf.used_width + piece.width + cfg.kerf <= cfg.usable_width):
                    self._place(piece, sheet, shelf)
                    return True

            # New shelf below the last one on this sheet
            last = sheet.shelves[-1]
            next_y = last.origin_y + last.height + cfg.kerf
            if next_y + piece.height <= cfg.usable_height:
                self._place_on_new_shelf(piece, sheet, origin_y=next_y)
                return True

        return False

    def _place_on_new_shelf(self, piece: Piece, sheet: _OpenSheet, origin_y: int) -> None:
        shelf = _OpenShelf(origin_y=origin_y, height=piece.height)
        sheet.shelves.append(shelf)
        self._place(piece, sheet, shelf)

    def _place(self, piece: Piece, sheet: _OpenSheet, shelf: _OpenShelf) -> None:
        trim = self.config.trim
        sheet.items.append(PlacedPiece.from_piece(
            piece,
            x=shelf.used_width + trim,
            y=shelf.origin_y + trim,
        ))
        # A piece flush with the right edge leaves no room for its kerf
        shelf.used_width = min(
            shelf.used_width + piece.width + self.config.kerf,
            self.config.usable_width,
        )
        # Nominal area; kerf is not counted against the piece
        sheet.used_area += piece.area


def create_nester(
    sheet_width: int = 2730,
    sheet_height: int = 1830,
    kerf: int = 3,
    trim: int = 10,
) -> ShelfNester:
    """Create a shelf nester with specified settings."""
    return ShelfNester(NestingConfig(
        sheet_width=sheet_width,
        sheet_height=sheet_height,
        kerf=kerf,
        trim=trim,
    ))


def pack(
    parts: Iterable[Part],
    sheet_width: int,
    sheet_height: int,
    kerf: int,
    trim: int,
) -> List[Sheet]:
    """
    Pack parts onto stock sheets.

    Args:
        parts: Part specifications
        sheet_width: Stock sheet width (mm)
        sheet_height: Stock sheet height (mm)
        kerf: Blade kerf (mm)
        trim: Edge trim on every side (mm)

    Returns:
        Packed sheets
    """
    return create_nester(sheet_width, sheet_height, kerf, trim).pack(parts)
