"""Version-aware crop knowledge: which blocks and items belong to each crop."""

from __future__ import annotations

from dataclasses import dataclass

from mc_farmer.models import Block, CropType, ItemType, Material
from mc_farmer import versions as v

BEETROOT_ACCELERANT_ATTEMPTS = 6
DEFAULT_ACCELERANT_ATTEMPTS = 5


class UnmappedCropTypeError(LookupError):
    """Raised when a crop type has no row in the knowledge table."""


@dataclass(frozen=True, slots=True)
class CropRow:
    seed_item: ItemType
    crop_item: ItemType
    soil_material: Material
    harvest_material: Material
    growth_material: Material
    bone_mealable: bool = True
    accelerant_attempts: int = DEFAULT_ACCELERANT_ATTEMPTS

    @property
    def has_fruit(self) -> bool:
        return self.harvest_material != self.growth_material


@dataclass(frozen=True, slots=True)
class MaterialProfile:
    """Everything the farming loop needs to know about a crop on one protocol version."""

    crop_type: CropType
    seed_item: ItemType
    crop_item: ItemType
    soil_material: Material
    mature_materials: frozenset[Material]
    immature_materials: frozenset[Material]
    fully_grown_block_ids: frozenset[int]
    bone_mealable: bool
    accelerant_attempts: int

    @property
    def harvest_material(self) -> Material:
        (material,) = self.mature_materials
        return material

    @property
    def growth_material(self) -> Material:
        (material,) = self.immature_materials
        return material

    @property
    def has_fruit(self) -> bool:
        return self.mature_materials != self.immature_materials

    @property
    def drop_items(self) -> tuple[ItemType, ...]:
        return tuple(dict.fromkeys((self.seed_item, self.crop_item)))


CROP_TABLE: dict[CropType, CropRow] = {
    CropType.beetroot: CropRow(
        seed_item=ItemType.beetroot_seeds,
        crop_item=ItemType.beetroot,
        soil_material=Material.farmland,
        harvest_material=Material.beetroots,
        growth_material=Material.beetroots,
        accelerant_attempts=BEETROOT_ACCELERANT_ATTEMPTS,
    ),
    CropType.carrot: CropRow(
        seed_item=ItemType.carrot,
        crop_item=ItemType.carrot,
        soil_material=Material.farmland,
        harvest_material=Material.carrots,
        growth_material=Material.carrots,
    ),
    CropType.melon: CropRow(
        seed_item=ItemType.melon_seeds,
        crop_item=ItemType.melon_slice,
        soil_material=Material.farmland,
        harvest_material=Material.melon,
        growth_material=Material.melon_stem,
    ),
    CropType.nether_wart: CropRow(
        seed_item=ItemType.nether_wart,
        crop_item=ItemType.nether_wart,
        soil_material=Material.soul_sand,
        harvest_material=Material.nether_wart,
        growth_material=Material.nether_wart,
        bone_mealable=False,
    ),
    CropType.pumpkin: CropRow(
        seed_item=ItemType.pumpkin_seeds,
        crop_item=ItemType.pumpkin,
        soil_material=Material.farmland,
        harvest_material=Material.pumpkin,
        growth_material=Material.pumpkin_stem,
    ),
    CropType.potato: CropRow(
        seed_item=ItemType.potato,
        crop_item=ItemType.potato,
        soil_material=Material.farmland,
        harvest_material=Material.potatoes,
        growth_material=Material.potatoes,
    ),
    CropType.wheat: CropRow(
        seed_item=ItemType.wheat_seeds,
        crop_item=ItemType.wheat,
        soil_material=Material.farmland,
        harvest_material=Material.wheat,
        growth_material=Material.wheat,
    ),
}

# Block state ids of the last growth stage. Melon and pumpkin rows list the
# fully grown stem and the attached stem; the fruit itself needs no id.
FULLY_GROWN_IDS: dict[CropType, dict[v.VersionBand, frozenset[int]]] = {
    CropType.beetroot: {
        v.BAND_1_20: frozenset({12371}),
        v.BAND_1_19_4: frozenset({12356}),
        v.BAND_1_19_3: frozenset({11887}),
        v.BAND_1_19: frozenset({10103}),
        v.BAND_1_17: frozenset({9472}),
        v.BAND_1_16: frozenset({9226}),
        v.BAND_1_14: frozenset({8686}),
        v.BAND_1_13: frozenset({8162}),
    },
    CropType.carrot: {
        v.BAND_1_20: frozenset({8602}),
        v.BAND_1_19_4: frozenset({8598}),
        v.BAND_1_19_3: frozenset({8370}),
        v.BAND_1_19: frozenset({6930}),
        v.BAND_1_17: frozenset({6543}),
        v.BAND_1_16: frozenset({6341}),
        v.BAND_1_14: frozenset({5801}),
        v.BAND_1_13: frozenset({5295}),
    },
    CropType.melon: {
        v.BAND_1_20: frozenset({6836, 6820}),
        v.BAND_1_19_4: frozenset({6808, 6606}),
        v.BAND_1_19_3: frozenset({6582, 6832}),
        v.BAND_1_19: frozenset({5166, 5150}),
        v.BAND_1_17: frozenset({4860, 4844}),
        v.BAND_1_16: frozenset({4791, 4775}),
        v.BAND_1_14: frozenset({4771, 4755}),
        v.BAND_1_13: frozenset({4268, 4252}),
    },
    CropType.nether_wart: {
        v.BAND_1_20: frozenset({7388}),
        v.BAND_1_19_4: frozenset({7384}),
        v.BAND_1_19_3: frozenset({7158}),
        v.BAND_1_19: frozenset({5718}),
        v.BAND_1_17: frozenset({5332}),
        v.BAND_1_16: frozenset({5135}),
        v.BAND_1_14: frozenset({5115}),
        v.BAND_1_13: frozenset({4612}),
    },
    CropType.pumpkin: {
        v.BAND_1_20: frozenset({5849, 6816}),
        v.BAND_1_19_4: frozenset({5845, 6824}),
        v.BAND_1_19_3: frozenset({5683, 6598}),
        v.BAND_1_19: frozenset({5158, 5146}),
        v.BAND_1_17: frozenset({4852, 4840}),
        v.BAND_1_16: frozenset({4783, 4771}),
        v.BAND_1_14: frozenset({4763, 4751}),
        v.BAND_1_13: frozenset({4260, 4248}),
    },
    CropType.potato: {
        v.BAND_1_20: frozenset({8610}),
        v.BAND_1_19_4: frozenset({8606}),
        v.BAND_1_19_3: frozenset({8378}),
        v.BAND_1_19: frozenset({6938}),
        v.BAND_1_17: frozenset({6551}),
        v.BAND_1_16: frozenset({6349}),
        v.BAND_1_14: frozenset({5809}),
        v.BAND_1_13: frozenset({5303}),
    },
    CropType.wheat: {
        v.BAND_1_20: frozenset({4285}),
        v.BAND_1_19_4: frozenset({4281}),
        v.BAND_1_19_3: frozenset({4233}),
        v.BAND_1_19: frozenset({3619}),
        v.BAND_1_17: frozenset({3421}),
        v.BAND_1_16: frozenset({3364}),
        v.BAND_1_14: frozenset({3362}),
        v.BAND_1_13: frozenset({3059}),
    },
}


class CropKnowledgeBase:
    """Read-only lookups over the crop table and its per-version block ids."""

    def __init__(
        self,
        table: dict[CropType, CropRow] | None = None,
        fully_grown_ids: dict[CropType, dict[v.VersionBand, frozenset[int]]] | None = None,
    ) -> None:
        self._table = CROP_TABLE if table is None else table
        self._fully_grown_ids = FULLY_GROWN_IDS if fully_grown_ids is None else fully_grown_ids

    def row(self, crop_type: CropType) -> CropRow:
        try:
            return self._table[crop_type]
        except KeyError:
            raise UnmappedCropTypeError(f"Crop type {crop_type!r} has not been mapped") from None

    def fully_grown_ids(self, crop_type: CropType, protocol_version: int) -> frozenset[int]:
        """Return the last-stage block ids, or an empty set for unknown versions."""
        self.row(crop_type)
        for band, block_ids in self._fully_grown_ids.get(crop_type, {}).items():
            if band.contains(protocol_version):
                return block_ids
        return frozenset()

    def resolve(self, crop_type: CropType, protocol_version: int) -> MaterialProfile:
        row = self.row(crop_type)
        return MaterialProfile(
            crop_type=crop_type,
            seed_item=row.seed_item,
            crop_item=row.crop_item,
            soil_material=row.soil_material,
            mature_materials=frozenset({row.harvest_material}),
            immature_materials=frozenset({row.growth_material}),
            fully_grown_block_ids=self.fully_grown_ids(crop_type, protocol_version),
            bone_mealable=row.bone_mealable,
            accelerant_attempts=row.accelerant_attempts,
        )

    def is_mature(self, block: Block, crop_type: CropType, protocol_version: int) -> bool:
        row = self.row(crop_type)
        if row.has_fruit and block.material == row.harvest_material:
            # Melon and pumpkin blocks only exist once the stem has fruited.
            return True
        if block.material != row.growth_material:
            return False
        return block.block_id in self.fully_grown_ids(crop_type, protocol_version)
