"""Explode furniture modules into the panels that must be cut.

A simplified carcass: two sides, a base and a top, plus a door for base
and wall cabinets. Sizes in mm.
"""

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from cutplan.parts.part import Material, Part

DOOR_CLEARANCE = 4  # Gap taken off each door dimension


class ModuleType(str, Enum):
    """Furniture module types."""
    BASE_CABINET = "base_cabinet"
    WALL_CABINET = "wall_cabinet"
    TOWER = "tower"
    PANEL = "panel"

    @property
    def has_door(self) -> bool:
        return self in (ModuleType.BASE_CABINET, ModuleType.WALL_CABINET)


@dataclass(frozen=True)
class FurnitureModule:
    """A furniture module (mm)."""
    type: ModuleType
    width: int
    height: int
    depth: int
    material: Material = Material.WHITE
    name: str = ""

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0 or self.depth <= 0:
            raise ValueError(
                f"Module dimensions must be positive, got {self.width}x{self.height}x{self.depth}"
            )

    @property
    def label(self) -> str:
        return self.name or self.type.value.replace("_", " ")


def explode_module(module: FurnitureModule, id_prefix: str = "m") -> List[Part]:
    """Return the panels of a single module, one Part per panel."""
    label = module.label
    panels: List[Tuple[str, int, int]] = [
        (f"Right Side {label}", module.depth, module.height),
        (f"Left Side {label}", module.depth, module.height),
        (f"Base {label}", module.width, module.depth),
        (f"Top {label}", module.width, module.depth),
    ]
    if module.type.has_door:
        door_w = module.width - DOOR_CLEARANCE
        door_h = module.height - DOOR_CLEARANCE
        if door_w > 0 and door_h > 0:
            panels.append((f"Door {label}", door_w, door_h))

    return [
        Part(
            id=f"{id_prefix}-{index}",
            name=name,
            width=width,
            height=height,
            quantity=1,
            material=module.material,
        )
        for index, (name, width, height) in enumerate(panels, start=1)
    ]


def explode_modules(modules: Iterable[FurnitureModule]) -> List[Part]:
    """
    Explode several modules and merge identical panels.

    Panels with the same name, size and material are merged into one
    Part with the summed quantity, keeping first-seen order.
    """
    merged: "OrderedDict[tuple, Part]" = OrderedDict()
    for module_index, module in enumerate(modules, start=1):
        for part in explode_module(module, id_prefix=f"m{module_index}"):
            key = (part.name, part.width, part.height, part.material)
            existing = merged.get(key)
            if existing is None:
                merged[key] = part
            else:
                merged[key] = Part(
                    id=existing.id,
                    name=existing.name,
                    width=existing.width,
                    height=existing.height,
                    quantity=existing.quantity + part.quantity,
                    material=existing.material,
                )
    return list(merged.values())
