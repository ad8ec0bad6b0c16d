"""The farming control loop: plant, harvest, bone-meal, collect, repeat."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from mc_farmer.actions import BlockActionCoordinator
from mc_farmer.adapters.farm_world import FarmWorld
from mc_farmer.config import FarmerSettings
from mc_farmer.crops import CropKnowledgeBase, MaterialProfile
from mc_farmer.inventory import InventoryAllocator
from mc_farmer.models import Direction, FarmState, ItemEntity, ItemType, Location, Material, RunConfig
from mc_farmer.movement import MovementCoordinator
from mc_farmer.waiting import sleep_or_cancel

AXES_BY_PREFERENCE = [
    ItemType.diamond_axe,
    ItemType.iron_axe,
    ItemType.golden_axe,
    ItemType.stone_axe,
]


class FarmingStateMachine:
    """Cycles through the four farming states until its stop event is set.

    ``step`` runs the work of the current state once and moves to the next
    state; ``run`` repeats it every ``delay_between_tasks_seconds``. Every
    wait inside a step wakes up as soon as the stop event is set.
    """

    def __init__(
        self,
        world: FarmWorld,
        run_config: RunConfig,
        settings: FarmerSettings,
        *,
        knowledge: CropKnowledgeBase | None = None,
        inventory: InventoryAllocator | None = None,
        movement: MovementCoordinator | None = None,
        actions: BlockActionCoordinator | None = None,
        initial_state: FarmState = FarmState.searching_farmland,
        stop_event: asyncio.Event | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._world = world
        self._run = run_config
        self._settings = settings
        self._knowledge = knowledge or CropKnowledgeBase()
        self._inventory = inventory or InventoryAllocator(world)
        self._movement = movement or MovementCoordinator(
            world,
            poll_interval_seconds=settings.movement_poll_interval_seconds,
            timeout_seconds=settings.movement_timeout_seconds,
        )
        self._actions = actions or BlockActionCoordinator(
            world,
            dig_poll_interval_seconds=settings.dig_poll_interval_seconds,
            accelerant_interval_seconds=settings.bone_meal_interval_seconds,
            accelerant_settle_seconds=settings.bone_meal_settle_seconds,
        )
        self._logger = logger or logging.getLogger("mc_farmer.farming")
        self._protocol_version = world.protocol_version()
        self._profile = self._knowledge.resolve(run_config.crop_type, self._protocol_version)
        self._state = initial_state
        self.stop_event = stop_event or asyncio.Event()

        self._handlers: dict[FarmState, Callable[[], Awaitable[FarmState]]] = {
            FarmState.searching_farmland: self._plant,
            FarmState.searching_crops_to_break: self._harvest,
            FarmState.bone_mealing_crops: self._bone_meal,
            FarmState.collecting_items: self._collect,
        }

    @property
    def state(self) -> FarmState:
        return self._state

    @property
    def profile(self) -> MaterialProfile:
        return self._profile

    @property
    def run_config(self) -> RunConfig:
        return self._run

    @property
    def stopped(self) -> bool:
        return self.stop_event.is_set()

    def request_stop(self) -> None:
        self.stop_event.set()

    async def run(self) -> None:
        while not self.stopped:
            if self._world.is_eating():
                self._debug("eating")
            else:
                await self.step()
            self._debug("tick_wait", delay_seconds=self._settings.delay_between_tasks_seconds)
            await sleep_or_cancel(self._settings.delay_between_tasks_seconds, self.stop_event)

    async def step(self) -> FarmState:
        previous = self._state
        self._state = await self._handlers[previous]()
        if self._state != previous:
            self._debug("state_changed", from_state=previous.value, to_state=self._state.value)
        return self._state

    async def _plant(self) -> FarmState:
        seed = self._profile.seed_item
        self._debug("searching_farmland")

        if not self._inventory.ensure_equipped(seed):
            self._debug("no_seeds", item=seed.value)
            return FarmState.searching_crops_to_break

        farmland = self._find_empty_farmland()
        if not farmland:
            self._debug("no_farmland")
            return FarmState.searching_crops_to_break

        for index, location in enumerate(farmland):
            if self.stopped:
                break
            if index % 2 == 0 and not self._inventory.has_any(seed):
                self._debug("seeds_exhausted", item=seed.value)
                break

            cell = location.floor()
            standing_spot = Location(cell.x + 0.5, cell.y + 1, cell.z + 0.5)
            if not await self._move(standing_spot):
                continue
            if not self._inventory.ensure_equipped(seed):
                self._debug("seeds_exhausted", item=seed.value)
                break

            self._actions.place_fire_and_forget(cell.offset(dy=1), Direction.up)
            await sleep_or_cancel(self._settings.place_settle_seconds, self.stop_event)

        self._debug("planting_finished")
        return FarmState.searching_crops_to_break

    async def _harvest(self) -> FarmState:
        self._debug("searching_crops_to_break")
        crops = self._find_crops(mature=True)
        if not crops:
            self._debug("nothing_to_harvest")
            return FarmState.bone_mealing_crops

        settle_seconds = self._settings.harvest_settle_seconds
        if self._profile.has_fruit:
            self._inventory.ensure_any_equipped(AXES_BY_PREFERENCE)
            settle_seconds = self._settings.fruit_harvest_settle_seconds

        for location in crops:
            if self.stopped:
                break
            if await self._move(location):
                await self._actions.dig_and_wait(
                    location,
                    max_wait_ticks=self._settings.dig_max_wait_ticks,
                    cancel=self.stop_event,
                )
            # Leaves time for the drops to be picked up.
            await sleep_or_cancel(settle_seconds, self.stop_event)

        self._debug("harvest_finished")
        return FarmState.bone_mealing_crops

    async def _bone_meal(self) -> FarmState:
        if not self._profile.bone_mealable:
            self._debug("not_bone_mealable")
            return FarmState.searching_farmland

        if not self._inventory.ensure_equipped(ItemType.bone_meal):
            self._debug("no_bone_meal")
            return FarmState.searching_farmland

        crops = self._find_crops(mature=False)
        if not crops:
            self._debug("nothing_to_bone_meal")
            return FarmState.searching_farmland

        for index, location in enumerate(crops):
            if self.stopped:
                break
            if index % 2 == 0 and not self._inventory.has_any(ItemType.bone_meal):
                self._debug("bone_meal_exhausted")
                break
            if not await self._move(location):
                continue
            if not self._inventory.ensure_equipped(ItemType.bone_meal):
                self._debug("bone_meal_exhausted")
                break

            target = location.centered()
            self._debug("bone_mealing", location=target)
            await self._actions.apply_growth_accelerant(
                target,
                Direction.down,
                self._profile.accelerant_attempts,
                cancel=self.stop_event,
            )

        self._debug("bone_mealing_finished")
        return FarmState.collecting_items

    async def _collect(self) -> FarmState:
        self._debug("searching_items")
        items = self._find_dropped_items()
        if not items:
            self._debug("nothing_to_collect")
            return FarmState.searching_farmland

        for entity in items:
            if self.stopped:
                break
            await self._move(entity.location)

        self._debug("collecting_finished", count=len(items))
        return FarmState.searching_farmland

    async def _move(self, target: Location) -> bool:
        moved = await self._movement.move_and_wait(
            target,
            tolerance=self._settings.movement_tolerance,
            allow_unsafe=self._run.allow_unsafe,
            allow_teleport=self._run.allow_teleport,
            cancel=self.stop_event,
        )
        if not moved:
            self._debug("move_failed", target=target)
        return moved

    def _find_empty_farmland(self) -> list[Location]:
        origin = self._world.current_location()
        return [
            location
            for location in self._world.find_blocks(origin, self._profile.soil_material, self._run.radius)
            if self._world.read_block(location.offset(dy=1)).material == Material.air
        ]

    def _find_crops(self, *, mature: bool) -> list[Location]:
        material = self._profile.harvest_material if mature else self._profile.growth_material
        origin = self._world.current_location()
        found: list[Location] = []
        for location in self._world.find_blocks(origin, material, self._run.radius):
            block = self._world.read_block(location)
            if self._knowledge.is_mature(block, self._run.crop_type, self._protocol_version) == mature:
                found.append(location)
        return found

    def _find_dropped_items(self) -> list[ItemEntity]:
        origin = self._world.current_location()
        wanted = set(self._profile.drop_items)
        items = [
            entity
            for entity in self._world.nearby_item_entities(origin, self._run.radius)
            if entity.item in wanted and entity.location.distance(origin) <= self._run.radius
        ]
        return sorted(items, key=lambda entity: entity.location.distance(origin))

    def _debug(self, event: str, **fields: object) -> None:
        level = logging.INFO if self._run.debug else logging.DEBUG
        self._logger.log(level, event, extra={"crop_type": self._run.crop_type.value, **fields})
