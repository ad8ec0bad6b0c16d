from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

DEFAULT_RADIUS = 30

# Player inventory window: 9-35 is general storage, 36-44 the hotbar.
STORAGE_FIRST_SLOT = 9
HOTBAR_FIRST_SLOT = 36
HOTBAR_LAST_SLOT = 44


class CropType(str, Enum):
    beetroot = "beetroot"
    carrot = "carrot"
    melon = "melon"
    nether_wart = "nether_wart"
    pumpkin = "pumpkin"
    potato = "potato"
    wheat = "wheat"

    @classmethod
    def parse(cls, text: str) -> CropType:
        key = text.strip().lower().replace("-", "_")
        if key == "netherwart":
            key = "nether_wart"
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown crop type '{text}'. Expected one of: {choices}") from None


class FarmState(str, Enum):
    searching_farmland = "searching_farmland"
    searching_crops_to_break = "searching_crops_to_break"
    bone_mealing_crops = "bone_mealing_crops"
    collecting_items = "collecting_items"


class Direction(str, Enum):
    down = "down"
    up = "up"
    north = "north"
    south = "south"
    west = "west"
    east = "east"


class Material(str, Enum):
    air = "air"
    farmland = "farmland"
    soul_sand = "soul_sand"
    beetroots = "beetroots"
    carrots = "carrots"
    potatoes = "potatoes"
    wheat = "wheat"
    nether_wart = "nether_wart"
    melon = "melon"
    melon_stem = "melon_stem"
    pumpkin = "pumpkin"
    pumpkin_stem = "pumpkin_stem"


class ItemType(str, Enum):
    beetroot = "beetroot"
    beetroot_seeds = "beetroot_seeds"
    carrot = "carrot"
    melon_seeds = "melon_seeds"
    melon_slice = "melon_slice"
    nether_wart = "nether_wart"
    pumpkin = "pumpkin"
    pumpkin_seeds = "pumpkin_seeds"
    potato = "potato"
    wheat = "wheat"
    wheat_seeds = "wheat_seeds"
    bone_meal = "bone_meal"
    diamond_axe = "diamond_axe"
    iron_axe = "iron_axe"
    golden_axe = "golden_axe"
    stone_axe = "stone_axe"


@dataclass(frozen=True, slots=True)
class Location:
    x: float
    y: float
    z: float

    def distance(self, other: Location) -> float:
        return math.dist((self.x, self.y, self.z), (other.x, other.y, other.z))

    def floor(self) -> Location:
        return Location(math.floor(self.x), math.floor(self.y), math.floor(self.z))

    def offset(self, dx: float = 0, dy: float = 0, dz: float = 0) -> Location:
        return Location(self.x + dx, self.y + dy, self.z + dz)

    def centered(self) -> Location:
        """Centre of the cell on the x/z plane, keeping y untouched."""
        return Location(math.floor(self.x) + 0.5, self.y, math.floor(self.z) + 0.5)

    def cell(self) -> tuple[int, int, int]:
        return math.floor(self.x), math.floor(self.y), math.floor(self.z)


@dataclass(frozen=True, slots=True)
class Block:
    material: Material
    block_id: int = 0


AIR = Block(Material.air, 0)


@dataclass(frozen=True, slots=True)
class ItemEntity:
    entity_id: int
    location: Location
    item: ItemType | None


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Options of one farming run, fixed from start until stop."""

    crop_type: CropType
    radius: int = DEFAULT_RADIUS
    allow_unsafe: bool = False
    allow_teleport: bool = False
    debug: bool = False

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError(f"radius must be positive, got {self.radius}")
