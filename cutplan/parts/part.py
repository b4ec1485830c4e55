"""Part specifications as authored in a bill of materials."""

from dataclasses import dataclass
from enum import Enum


class Material(str, Enum):
    """Board material families.

    WOOD boards carry a grain direction and must never be rotated.
    WHITE boards have no grain and may be rotated freely.
    """
    WOOD = "wood"
    WHITE = "white"


@dataclass(frozen=True)
class Part:
    """A rectangular part specification (mm), before expansion into pieces."""
    id: str
    name: str
    width: int
    height: int
    quantity: int = 1
    material: Material = Material.WHITE

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Part {self.id!r} must have positive dimensions, got {self.width}x{self.height}"
            )
        if self.quantity < 1:
            raise ValueError(f"Part {self.id!r} quantity must be at least 1, got {self.quantity}")

    @property
    def area(self) -> int:
        """Area of a single unit in mm²."""
        return self.width * self.height

    @property
    def total_area(self) -> int:
        """Area of all units in mm²."""
        return self.area * self.quantity

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "quantity": self.quantity,
            "material": self.material.value,
        }
