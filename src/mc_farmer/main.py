"""CLI entrypoint for the farmer."""

from __future__ import annotations

import asyncio

import typer
from rich import print

from mc_farmer.adapters import SimulatedFarmWorld
from mc_farmer.commands import FarmerCommandHandler
from mc_farmer.config import settings
from mc_farmer.crops import CropKnowledgeBase
from mc_farmer.farming import FarmingStateMachine
from mc_farmer.models import CropType, RunConfig
from mc_farmer.movement import movement_lock
from mc_farmer.telemetry import WorldConsoleHandler, configure_logging
from mc_farmer.versions import MC_1_20, band_for

app = typer.Typer(help="Automated crop farming for a Minecraft avatar")


def _parse_crop(crop: str) -> CropType:
    try:
        return CropType.parse(crop)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def config() -> None:
    """Show the effective settings."""
    print(settings.model_dump())


@app.command()
def crops(protocol: int = typer.Option(MC_1_20, help="Protocol version to resolve block ids for")) -> None:
    """Show what the farmer knows about every crop on one protocol version."""
    knowledge = CropKnowledgeBase()
    band = band_for(protocol)
    print({"protocol": protocol, "band": band.name if band else None})
    for crop_type in CropType:
        profile = knowledge.resolve(crop_type, protocol)
        print(
            {
                "crop": crop_type.value,
                "seed": profile.seed_item.value,
                "crop_item": profile.crop_item.value,
                "soil": profile.soil_material.value,
                "fully_grown_ids": sorted(profile.fully_grown_block_ids),
                "bone_meal_attempts": profile.accelerant_attempts if profile.bone_mealable else 0,
            }
        )


@app.command()
def demo(
    crop: str = typer.Argument(..., help="Crop type, e.g. wheat or nether_wart"),
    steps: int = typer.Option(8, help="How many state-machine steps to run"),
    radius: int = typer.Option(10, help="Farming radius in blocks"),
    protocol: int = typer.Option(MC_1_20, help="Protocol version to simulate"),
    debug: bool = typer.Option(False, help="Log every farming decision"),
) -> None:
    """Run the farming loop against an in-memory field and print what happened."""
    crop_type = _parse_crop(crop)
    if radius <= 0:
        raise typer.BadParameter("radius must be positive")

    world = SimulatedFarmWorld.demo_field(crop_type, protocol=protocol)
    console_handler = WorldConsoleHandler(world)
    logger = configure_logging(settings.log_level)
    logger.addHandler(console_handler)
    machine = FarmingStateMachine(world, RunConfig(crop_type, radius=radius, debug=debug), settings)

    async def _run() -> list[str]:
        transitions: list[str] = []
        for _ in range(steps):
            previous = machine.state
            current = await machine.step()
            transitions.append(f"{previous.value} -> {current.value}")
        return transitions

    try:
        transitions = asyncio.run(_run())
    finally:
        logger.removeHandler(console_handler)

    print(
        {
            "transitions": transitions,
            "actions": len(world.actions),
            "inventory": {slot: f"{stack.item.value} x{stack.count}" for slot, stack in sorted(world.slots.items())},
            "console_tail": world.console[-5:],
        }
    )


@app.command()
def console(
    crop: str = typer.Option("wheat", help="Crop planted in the simulated field"),
    protocol: int = typer.Option(MC_1_20, help="Protocol version to simulate"),
) -> None:
    """Interactive farmer commands (start/stop/help) against an in-memory field."""
    if not settings.enabled:
        print({"error": "The farmer is disabled. Set MC_FARMER_ENABLED=true to use it."})
        raise typer.Exit(code=1)

    configure_logging(settings.log_level)
    world = SimulatedFarmWorld.demo_field(_parse_crop(crop), protocol=protocol)
    handler = FarmerCommandHandler(world, settings=settings, lock=movement_lock)

    async def _session() -> None:
        print({"console": "started", "hint": "Type 'farmer start wheat', 'farmer stop' or 'quit'."})
        while True:
            try:
                line = await asyncio.to_thread(input, "farmer> ")
            except EOFError:
                break
            if line.strip().lower() in ("quit", "exit"):
                break
            if not line.strip():
                continue
            result = await handler.execute(line)
            print({"status": result.status.value, "message": result.message, "state": handler.state})

        handler.on_unload()
        await handler.wait_stopped()
        print({"console": "stopped"})

    asyncio.run(_session())


if __name__ == "__main__":
    app()
