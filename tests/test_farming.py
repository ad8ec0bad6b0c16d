from __future__ import annotations

import asyncio

import pytest

from mc_farmer.adapters import SimulatedFarmWorld
from mc_farmer.config import FarmerSettings
from mc_farmer.farming import FarmingStateMachine
from mc_farmer.models import CropType, Direction, FarmState, ItemType, Location, Material, RunConfig


def _step(machine: FarmingStateMachine, times: int = 1) -> list[FarmState]:
    async def _run() -> list[FarmState]:
        return [await machine.step() for _ in range(times)]

    return asyncio.run(_run())


def _machine(
    world: SimulatedFarmWorld,
    settings: FarmerSettings,
    crop_type: CropType = CropType.wheat,
    *,
    radius: int = 10,
    initial_state: FarmState = FarmState.searching_farmland,
) -> FarmingStateMachine:
    return FarmingStateMachine(
        world,
        RunConfig(crop_type, radius=radius),
        settings,
        initial_state=initial_state,
    )


def _farmland_row(world: SimulatedFarmWorld, count: int, material: Material = Material.farmland) -> None:
    for x in range(1, count + 1):
        world.set_block(x, 63, 0, material)


def _moves(world: SimulatedFarmWorld) -> list[Location]:
    return [action[1] for action in world.actions if action[0] == "move"]


def _places(world: SimulatedFarmWorld) -> list[tuple[Location, Direction]]:
    return [(action[1], action[2]) for action in world.actions if action[0] == "place"]


def test_empty_handed_wheat_cycle_issues_no_requests(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 3)
    world.plant(CropType.wheat, 1, 64, 0)
    machine = _machine(world, fast_settings)

    states = _step(machine, 3)

    assert states == [
        FarmState.searching_crops_to_break,
        FarmState.bone_mealing_crops,
        FarmState.searching_farmland,
    ]
    assert world.actions == []
    assert world.inventory_ops == []


@pytest.mark.parametrize(
    "inventory",
    [
        {},
        {36: (ItemType.bone_meal, 64)},
        {20: (ItemType.bone_meal, 64), 36: (ItemType.nether_wart, 5)},
    ],
)
def test_nether_wart_is_never_bone_mealed(fast_settings, inventory) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 2, Material.soul_sand)
    world.plant(CropType.nether_wart, 1, 64, 0)
    for slot, (item, count) in inventory.items():
        world.give(item, count, slot=slot)
    machine = _machine(world, fast_settings, CropType.nether_wart, initial_state=FarmState.bone_mealing_crops)

    assert _step(machine) == [FarmState.searching_farmland]
    assert _places(world) == []
    assert world.inventory_ops == []


def test_plants_every_empty_farmland_cell(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 3)
    world.plant(CropType.wheat, 3, 64, 0)
    world.give(ItemType.wheat_seeds, 10)
    machine = _machine(world, fast_settings)

    assert _step(machine) == [FarmState.searching_crops_to_break]
    assert _moves(world) == [Location(1.5, 64, 0.5), Location(2.5, 64, 0.5)]
    assert _places(world) == [(Location(1, 64, 0), Direction.up), (Location(2, 64, 0), Direction.up)]
    assert world.read_block(Location(2, 64, 0)).material == Material.wheat
    assert world.count(ItemType.wheat_seeds) == 8


def test_planting_stops_when_seeds_run_out(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 4)
    world.give(ItemType.wheat_seeds, 1)
    machine = _machine(world, fast_settings)

    assert _step(machine) == [FarmState.searching_crops_to_break]
    assert len(_places(world)) == 1
    assert len(_moves(world)) == 2
    assert world.count(ItemType.wheat_seeds) == 0


def test_unreachable_farmland_is_skipped(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 3)
    world.give(ItemType.wheat_seeds, 10)
    world.unreachable.add((1, 64, 0))
    machine = _machine(world, fast_settings)

    _step(machine)

    assert _places(world) == [(Location(2, 64, 0), Direction.up), (Location(3, 64, 0), Direction.up)]


def test_harvests_only_mature_crops(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 3)
    world.plant(CropType.wheat, 1, 64, 0, mature=True)
    world.plant(CropType.wheat, 2, 64, 0)
    world.plant(CropType.wheat, 3, 64, 0, mature=True)
    machine = _machine(world, fast_settings, initial_state=FarmState.searching_crops_to_break)

    assert _step(machine) == [FarmState.bone_mealing_crops]
    digs = [action[1] for action in world.actions if action[0] == "dig"]
    assert digs == [Location(1, 64, 0), Location(3, 64, 0)]
    assert world.read_block(Location(2, 64, 0)).material == Material.wheat
    assert world.count(ItemType.wheat) == 2


def test_nothing_mature_moves_on_to_bone_meal(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 1)
    world.plant(CropType.wheat, 1, 64, 0)
    machine = _machine(world, fast_settings, initial_state=FarmState.searching_crops_to_break)

    assert _step(machine) == [FarmState.bone_mealing_crops]
    assert world.actions == []


def test_melon_harvest_uses_the_best_axe(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 2)
    world.plant(CropType.melon, 1, 64, 0)
    world.set_block(2, 64, 0, Material.melon)
    world.give(ItemType.stone_axe, 1, slot=37)
    world.give(ItemType.diamond_axe, 1, slot=20)
    machine = _machine(world, fast_settings, CropType.melon, initial_state=FarmState.searching_crops_to_break)

    _step(machine)

    assert world.equipped_item() == ItemType.diamond_axe
    digs = [action[1] for action in world.actions if action[0] == "dig"]
    assert digs == [Location(2, 64, 0)]
    assert world.read_block(Location(1, 64, 0)).material == Material.melon_stem
    assert world.count(ItemType.melon_slice) == 1


def test_bone_meal_applies_five_attempts_to_growing_crops(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 1)
    world.plant(CropType.wheat, 1, 64, 0)
    world.give(ItemType.bone_meal, 16)
    machine = _machine(world, fast_settings, initial_state=FarmState.bone_mealing_crops)

    assert _step(machine) == [FarmState.collecting_items]
    assert _places(world) == [(Location(1.5, 64, 0.5), Direction.down)] * 5
    assert world.count(ItemType.bone_meal) == 11


def test_beetroot_gets_six_bone_meal_attempts(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 1)
    world.plant(CropType.beetroot, 1, 64, 0)
    world.give(ItemType.bone_meal, 16)
    machine = _machine(world, fast_settings, CropType.beetroot, initial_state=FarmState.bone_mealing_crops)

    _step(machine)

    assert len(_places(world)) == 6
    assert world.count(ItemType.bone_meal) == 13


def test_melon_bone_meal_targets_stems_not_fruit(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 3)
    world.plant(CropType.melon, 1, 64, 0)
    world.set_block(3, 64, 0, Material.melon)
    world.give(ItemType.bone_meal, 16)
    machine = _machine(world, fast_settings, CropType.melon, initial_state=FarmState.bone_mealing_crops)

    _step(machine)

    assert {location for location, _ in _places(world)} == {Location(1.5, 64, 0.5)}


def test_without_bone_meal_goes_back_to_planting(fast_settings) -> None:
    world = SimulatedFarmWorld()
    _farmland_row(world, 1)
    world.plant(CropType.wheat, 1, 64, 0)
    machine = _machine(world, fast_settings, initial_state=FarmState.bone_mealing_crops)

    assert _step(machine) == [FarmState.searching_farmland]
    assert world.actions == []


def test_collects_wanted_drops_nearest_first(fast_settings) -> None:
    world = SimulatedFarmWorld()
    world.drop_item(Location(3.5, 64, 0.5), ItemType.wheat)
    world.drop_item(Location(5.5, 64, 0.5), ItemType.wheat_seeds)
    world.drop_item(Location(1.5, 64, 0.5), ItemType.wheat_seeds)
    world.drop_item(Location(2.5, 64, 0.5), ItemType.bone_meal)
    world.drop_item(Location(20.5, 64, 0.5), ItemType.wheat)
    machine = _machine(world, fast_settings, initial_state=FarmState.collecting_items)

    assert _step(machine) == [FarmState.searching_farmland]
    assert _moves(world) == [Location(1.5, 64, 0.5), Location(3.5, 64, 0.5), Location(5.5, 64, 0.5)]


def test_collecting_with_nothing_dropped_still_returns_to_planting(fast_settings) -> None:
    world = SimulatedFarmWorld()
    machine = _machine(world, fast_settings, initial_state=FarmState.collecting_items)

    assert _step(machine) == [FarmState.searching_farmland]
    assert world.actions == []


def _snapshot() -> SimulatedFarmWorld:
    world = SimulatedFarmWorld()
    _farmland_row(world, 4)
    world.plant(CropType.wheat, 1, 64, 0, mature=True)
    world.plant(CropType.wheat, 2, 64, 0)
    world.give(ItemType.wheat_seeds, 3)
    world.give(ItemType.bone_meal, 2)
    world.drop_item(Location(4.5, 64, 2.5), ItemType.wheat)
    return world


@pytest.mark.parametrize("state", list(FarmState))
def test_same_snapshot_gives_same_transition(fast_settings, state: FarmState) -> None:
    first, second = _snapshot(), _snapshot()

    first_next = _step(_machine(first, fast_settings, initial_state=state))
    second_next = _step(_machine(second, fast_settings, initial_state=state))

    assert first_next == second_next
    assert first.actions == second.actions


def test_stopped_machine_issues_no_moves(fast_settings) -> None:
    world = _snapshot()
    machine = _machine(world, fast_settings, initial_state=FarmState.searching_crops_to_break)
    machine.request_stop()

    assert _step(machine) == [FarmState.bone_mealing_crops]
    assert world.actions == []


def test_run_pauses_while_eating(fast_settings) -> None:
    world = _snapshot()
    world.eating = True
    machine = _machine(world, fast_settings)

    async def _run() -> None:
        task = asyncio.create_task(machine.run())
        await asyncio.sleep(0.05)
        machine.request_stop()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(_run())

    assert machine.state == FarmState.searching_farmland
    assert world.actions == []


def test_run_steps_until_stopped(fast_settings) -> None:
    world = _snapshot()
    machine = _machine(world, fast_settings)

    async def _run() -> None:
        task = asyncio.create_task(machine.run())
        await asyncio.sleep(0.05)
        machine.request_stop()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(_run())

    assert machine.state == FarmState.searching_crops_to_break
    assert _places(world)
