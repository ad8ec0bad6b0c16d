"""Text command surface of the farmer: ``farmer start <crop> [options]``, ``farmer stop``, ``farmer help``."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from mc_farmer.adapters.farm_world import FarmWorld
from mc_farmer.config import FarmerSettings
from mc_farmer.crops import CropKnowledgeBase
from mc_farmer.farming import FarmingStateMachine
from mc_farmer.models import DEFAULT_RADIUS, CropType, FarmState, RunConfig
from mc_farmer.movement import MovementLock
from mc_farmer.versions import MINIMUM_SUPPORTED_PROTOCOL

COMMAND_NAME = "farmer"
LOCK_HOLDER = "Farmer"
USAGE = (
    "farmer <start <crop type> [radius:<radius = 30>] [unsafe:<true/false>] "
    "[teleport:<true/false>] [debug:<true/false>]|stop>"
)

_OPTION_ALIASES = {
    "r": "radius",
    "radius": "radius",
    "f": "unsafe",
    "unsafe": "unsafe",
    "t": "teleport",
    "teleport": "teleport",
    "d": "debug",
    "debug": "debug",
}
_TRUE_VALUES = ("true", "1")


class CommandStatus(str, Enum):
    DONE = "done"
    FAIL = "fail"


@dataclass(slots=True)
class CommandResult:
    status: CommandStatus
    message: str = ""


def parse_start_options(
    crop_type: CropType,
    other_args: str | None,
    *,
    logger: logging.Logger | None = None,
) -> tuple[RunConfig, list[str]]:
    """Build the run configuration from ``key:value`` tokens.

    Malformed tokens never fail the start: each one adds a warning and the
    option keeps its default. Once ``unsafe``, ``teleport`` or ``debug`` is
    switched on, later tokens for the same option are ignored.
    """
    log = logger or logging.getLogger("mc_farmer.commands")
    warnings: list[str] = []
    radius = DEFAULT_RADIUS
    flags = {"unsafe": False, "teleport": False, "debug": False}

    for token in (other_args or "").lower().split():
        parts = [part.strip() for part in token.split(":")]
        if len(parts) != 2 or parts[0] not in _OPTION_ALIASES:
            warnings.append(f"Invalid parameter '{token}', ignoring it")
            continue

        option, value = _OPTION_ALIASES[parts[0]], parts[1]
        if option == "radius":
            try:
                radius = int(value)
            except ValueError:
                radius = 0
            if radius <= 0:
                warnings.append(f"Invalid radius '{value}', using {DEFAULT_RADIUS}")
                radius = DEFAULT_RADIUS
            continue

        if flags[option]:
            continue
        flags[option] = value in _TRUE_VALUES
        if flags[option] and option in ("unsafe", "teleport"):
            log.warning("unsafe_option_enabled", extra={"option": option})

    for warning in warnings:
        log.warning("invalid_start_option", extra={"detail": warning})

    run_config = RunConfig(
        crop_type=crop_type,
        radius=radius,
        allow_unsafe=flags["unsafe"],
        allow_teleport=flags["teleport"],
        debug=flags["debug"],
    )
    return run_config, warnings


class FarmerCommandHandler:
    """Owns the farming worker of one avatar and answers farmer commands.

    At most one run exists at a time. ``start`` takes the movement lock before
    the run's asyncio task is created and the lock is released on every exit.
    ``stop`` and the lifecycle hooks may be called from any thread; they hand
    the stop over to the worker's event loop.
    """

    def __init__(
        self,
        world: FarmWorld,
        *,
        settings: FarmerSettings,
        lock: MovementLock,
        knowledge: CropKnowledgeBase | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._world = world
        self._settings = settings
        self._lock = lock
        self._knowledge = knowledge or CropKnowledgeBase()
        self._logger = logger or logging.getLogger("mc_farmer.commands")
        self._machine: FarmingStateMachine | None = None
        self._task: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._worker_entered = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def state(self) -> FarmState | None:
        return self._machine.state if self.running and self._machine else None

    async def execute(self, text: str) -> CommandResult:
        tokens = text.strip().split(maxsplit=3)
        if tokens and tokens[0].lower() == COMMAND_NAME:
            tokens = tokens[1:]
        if not tokens or tokens[0].lower() in ("help", "_help"):
            return self.help()

        action = tokens[0].lower()
        if action == "stop" and len(tokens) == 1:
            return self.stop()
        if action == "start" and len(tokens) >= 2:
            try:
                crop_type = CropType.parse(tokens[1])
            except ValueError as exc:
                return CommandResult(CommandStatus.FAIL, str(exc))
            other_args = " ".join(tokens[2:]) or None
            return await self.start(crop_type, other_args)

        return CommandResult(CommandStatus.FAIL, f"Usage: {USAGE}")

    def help(self) -> CommandResult:
        return CommandResult(CommandStatus.DONE, f"Farm crops automatically: {USAGE}")

    async def start(self, crop_type: CropType, other_args: str | None = None) -> CommandResult:
        if self.running:
            return CommandResult(CommandStatus.FAIL, "The farmer is already running")

        protocol_version = self._world.protocol_version()
        if protocol_version < MINIMUM_SUPPORTED_PROTOCOL:
            return CommandResult(
                CommandStatus.FAIL,
                f"The farmer is not implemented for protocol {protocol_version}",
            )

        run_config, warnings = parse_start_options(crop_type, other_args, logger=self._logger)
        machine = FarmingStateMachine(
            self._world,
            run_config,
            self._settings,
            knowledge=self._knowledge,
        )

        if not self._lock.lock(LOCK_HOLDER):
            return CommandResult(
                CommandStatus.FAIL,
                f"{LOCK_HOLDER} cannot start: movement is locked by {self._lock.locked_by}",
            )

        self._loop = asyncio.get_running_loop()
        self._machine = machine
        self._worker_entered = False
        self._task = asyncio.create_task(self._run(machine), name="farmer-worker")

        message = "Farmer started"
        if warnings:
            message = f"{message} ({'; '.join(warnings)})"
        return CommandResult(CommandStatus.DONE, message)

    def stop(self) -> CommandResult:
        machine = self._machine
        if not self.running or machine is None:
            return CommandResult(CommandStatus.FAIL, "The farmer is already stopped")

        self._call_in_loop(machine.request_stop)
        return CommandResult(CommandStatus.DONE, "Stopping the farmer")

    async def wait_stopped(self) -> None:
        """Wait until the current run, if any, has fully exited."""
        if not self._task:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    def on_disconnect(self) -> bool:
        self._halt()
        return True

    def on_unload(self) -> None:
        self._halt()

    def after_game_joined(self) -> None:
        self._halt()

    def _halt(self) -> None:
        self._call_in_loop(self._halt_in_loop)

    def _halt_in_loop(self) -> None:
        if self._machine is not None:
            self._machine.request_stop()
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        if not self._worker_entered:
            # A task cancelled before its first step never reaches its finally.
            self._lock.unlock(LOCK_HOLDER)

    def _call_in_loop(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on the worker's loop, now if we are already on it."""
        loop = self._loop
        if loop is None or loop.is_closed():
            callback()
            return
        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None
        if current is loop:
            callback()
        else:
            loop.call_soon_threadsafe(callback)

    async def _run(self, machine: FarmingStateMachine) -> None:
        self._worker_entered = True
        run_config = machine.run_config
        try:
            self._logger.info(
                "farmer_started",
                extra={"crop_type": run_config.crop_type.value, "radius": run_config.radius},
            )
            await machine.run()
        except Exception:  # noqa: BLE001 - a crashed run must still release the lock.
            self._logger.exception("farmer_crashed", extra={"crop_type": run_config.crop_type.value})
        finally:
            self._lock.unlock(LOCK_HOLDER)
            self._logger.info("farmer_stopped", extra={"crop_type": run_config.crop_type.value})
