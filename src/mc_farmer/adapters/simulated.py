"""In-memory farm used by the demo CLI and by tests.

Movement is instantaneous, digging removes the block at once and growth only
happens through bone meal, so every run against it is deterministic.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from mc_farmer.crops import CROP_TABLE, CropKnowledgeBase
from mc_farmer.models import (
    AIR,
    HOTBAR_FIRST_SLOT,
    HOTBAR_LAST_SLOT,
    STORAGE_FIRST_SLOT,
    Block,
    CropType,
    Direction,
    ItemEntity,
    ItemType,
    Location,
    Material,
)
from mc_farmer.versions import MC_1_20

MAX_STACK_SIZE = 64
PICKUP_RADIUS = 1.5

# Number of growth stages after planting, per growing block.
GROWTH_STAGES = {
    Material.wheat: 7,
    Material.carrots: 7,
    Material.potatoes: 7,
    Material.beetroots: 3,
    Material.nether_wart: 3,
    Material.melon_stem: 7,
    Material.pumpkin_stem: 7,
}

Cell = tuple[int, int, int]


@dataclass(slots=True)
class ItemStack:
    item: ItemType
    count: int = 1


@dataclass(slots=True)
class SimulatedFarmWorld:
    protocol: int = MC_1_20
    position: Location = field(default_factory=lambda: Location(0.5, 64.0, 0.5))
    blocks: dict[Cell, Block] = field(default_factory=dict)
    slots: dict[int, ItemStack] = field(default_factory=dict)
    entities: dict[int, ItemEntity] = field(default_factory=dict)
    selected_slot: int = 0
    eating: bool = False
    unreachable: set[Cell] = field(default_factory=set)
    actions: list[tuple] = field(default_factory=list)
    inventory_ops: list[tuple] = field(default_factory=list)
    console: list[str] = field(default_factory=list)
    knowledge: CropKnowledgeBase = field(default_factory=CropKnowledgeBase)
    _entity_ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    @classmethod
    def demo_field(cls, crop_type: CropType, *, protocol: int = MC_1_20, size: int = 5) -> SimulatedFarmWorld:
        """A square field around the origin: a third mature, a third growing, a third bare."""
        world = cls(protocol=protocol)
        row = CROP_TABLE[crop_type]
        half = size // 2
        for index, (x, z) in enumerate(itertools.product(range(-half, half + 1), repeat=2)):
            if (x, z) == (0, 0):
                continue
            world.set_block(x, 63, z, row.soil_material)
            if index % 3 == 0:
                world.plant(crop_type, x, 64, z, mature=True)
            elif index % 3 == 1:
                world.plant(crop_type, x, 64, z)
        world.give(row.seed_item, 8)
        world.give(ItemType.bone_meal, 16)
        if row.has_fruit:
            world.give(ItemType.iron_axe, 1)
        return world

    def set_block(self, x: int, y: int, z: int, material: Material, block_id: int = 0) -> None:
        self.blocks[(x, y, z)] = Block(material, block_id)

    def plant(self, crop_type: CropType, x: int, y: int, z: int, *, mature: bool = False) -> None:
        row = CROP_TABLE[crop_type]
        if mature and row.has_fruit:
            self.set_block(x, y, z, row.harvest_material)
            return
        self.set_block(x, y, z, row.growth_material, self._stage_id(crop_type, final=mature))

    def give(self, item: ItemType, count: int = 1, *, slot: int | None = None) -> None:
        if slot is not None:
            self.slots[slot] = ItemStack(item, count)
            return
        for index in self._slot_order():
            stack = self.slots.get(index)
            if stack is not None and stack.item == item and stack.count < MAX_STACK_SIZE:
                moved = min(count, MAX_STACK_SIZE - stack.count)
                stack.count += moved
                count -= moved
            if count == 0:
                return
        for index in self._slot_order():
            if index not in self.slots:
                moved = min(count, MAX_STACK_SIZE)
                self.slots[index] = ItemStack(item, moved)
                count -= moved
            if count == 0:
                return

    def count(self, item: ItemType) -> int:
        return sum(stack.count for stack in self.slots.values() if stack.item == item)

    def drop_item(self, location: Location, item: ItemType) -> ItemEntity:
        entity = ItemEntity(entity_id=next(self._entity_ids), location=location, item=item)
        self.entities[entity.entity_id] = entity
        return entity

    def find_blocks(self, origin: Location, material: Material, radius: int) -> list[Location]:
        found = [
            Location(*cell)
            for cell, block in self.blocks.items()
            if block.material == material and Location(*cell).distance(origin) <= radius
        ]
        return sorted(found, key=lambda location: (location.distance(origin), location.cell()))

    def read_block(self, location: Location) -> Block:
        return self.blocks.get(location.cell(), AIR)

    def request_move(self, target: Location, *, allow_unsafe: bool, allow_teleport: bool) -> bool:
        self.actions.append(("move", target))
        if target.cell() in self.unreachable:
            return False
        self.position = target
        self._pick_up_items()
        return True

    def current_location(self) -> Location:
        return self.position

    def request_dig(self, location: Location, face: Direction) -> bool:
        self.actions.append(("dig", location))
        cell = location.cell()
        block = self.blocks.get(cell)
        if block is None or block.material == Material.air:
            return False
        del self.blocks[cell]
        drop_spot = Location(cell[0] + 0.5, cell[1], cell[2] + 0.5)
        for item in self._drops_for(block):
            self.drop_item(drop_spot, item)
        self._pick_up_items()
        return True

    def request_place(self, location: Location, face: Direction) -> bool:
        self.actions.append(("place", location, face))
        stack = self.slots.get(HOTBAR_FIRST_SLOT + self.selected_slot)
        if stack is None:
            return False
        if stack.item == ItemType.bone_meal:
            return self._apply_bone_meal(location)
        return self._plant_held_seed(location, stack.item)

    def inventory_search(self, item: ItemType) -> list[int]:
        return sorted(slot for slot, stack in self.slots.items() if stack.item == item)

    def equipped_item(self) -> ItemType | None:
        stack = self.slots.get(HOTBAR_FIRST_SLOT + self.selected_slot)
        return stack.item if stack else None

    def select_quick_slot(self, index: int) -> None:
        self.inventory_ops.append(("select", index))
        self.selected_slot = index

    def move_item_to_slot(self, source_slot: int, target_slot: int) -> None:
        self.inventory_ops.append(("move_item", source_slot, target_slot))
        source = self.slots.pop(source_slot, None)
        target = self.slots.pop(target_slot, None)
        if source is None:
            if target is not None:
                self.slots[target_slot] = target
            return
        if target is not None and target.item == source.item:
            merged = min(MAX_STACK_SIZE, target.count + source.count)
            source.count -= merged - target.count
            target.count = merged
            self.slots[target_slot] = target
            if source.count:
                self.slots[source_slot] = source
            return
        self.slots[target_slot] = source
        if target is not None:
            self.slots[source_slot] = target

    def nearby_item_entities(self, origin: Location, radius: int) -> list[ItemEntity]:
        return [entity for entity in self.entities.values() if entity.location.distance(origin) <= radius]

    def protocol_version(self) -> int:
        return self.protocol

    def is_eating(self) -> bool:
        return self.eating

    def log(self, message: str) -> None:
        self.console.append(message)

    def _slot_order(self) -> list[int]:
        return [*range(HOTBAR_FIRST_SLOT, HOTBAR_LAST_SLOT + 1), *range(STORAGE_FIRST_SLOT, HOTBAR_FIRST_SLOT)]

    def _consume_held(self) -> None:
        slot = HOTBAR_FIRST_SLOT + self.selected_slot
        stack = self.slots[slot]
        stack.count -= 1
        if stack.count <= 0:
            del self.slots[slot]

    def _crop_for_material(self, material: Material) -> CropType | None:
        for crop_type, row in CROP_TABLE.items():
            if material in (row.harvest_material, row.growth_material):
                return crop_type
        return None

    def _stage_id(self, crop_type: CropType, *, final: bool) -> int:
        grown_ids = self.knowledge.fully_grown_ids(crop_type, self.protocol)
        if not grown_ids:
            return 0
        final_id = min(grown_ids)
        if final:
            return final_id
        return final_id - GROWTH_STAGES[CROP_TABLE[crop_type].growth_material]

    def _plant_held_seed(self, location: Location, item: ItemType) -> bool:
        cell = location.cell()
        below = self.blocks.get((cell[0], cell[1] - 1, cell[2]))
        if cell in self.blocks or below is None:
            return False
        for crop_type, row in CROP_TABLE.items():
            if row.seed_item == item and row.soil_material == below.material:
                self.set_block(*cell, row.growth_material, self._stage_id(crop_type, final=False))
                self._consume_held()
                return True
        return False

    def _apply_bone_meal(self, location: Location) -> bool:
        cell = location.cell()
        block = self.blocks.get(cell)
        crop_type = self._crop_for_material(block.material) if block else None
        if crop_type is None or not CROP_TABLE[crop_type].bone_mealable:
            return False
        if block.material != CROP_TABLE[crop_type].growth_material:
            return False
        if self.knowledge.is_mature(block, crop_type, self.protocol):
            return False

        self._consume_held()
        final_id = self._stage_id(crop_type, final=True)
        next_id = min(final_id, block.block_id + 1)
        self.blocks[cell] = Block(block.material, next_id)
        row = CROP_TABLE[crop_type]
        fruit_cell = (cell[0] + 1, cell[1], cell[2])
        if next_id == final_id and row.has_fruit and fruit_cell not in self.blocks:
            self.set_block(*fruit_cell, row.harvest_material)
        return True

    def _drops_for(self, block: Block) -> list[ItemType]:
        crop_type = self._crop_for_material(block.material)
        if crop_type is None:
            return []
        row = CROP_TABLE[crop_type]
        if row.has_fruit:
            return [row.crop_item] if block.material == row.harvest_material else [row.seed_item]
        if self.knowledge.is_mature(block, crop_type, self.protocol):
            return list(dict.fromkeys((row.crop_item, row.seed_item)))
        return [row.seed_item]

    def _pick_up_items(self) -> None:
        for entity_id, entity in list(self.entities.items()):
            if entity.location.distance(self.position) <= PICKUP_RADIUS and entity.item is not None:
                self.give(entity.item)
                del self.entities[entity_id]
