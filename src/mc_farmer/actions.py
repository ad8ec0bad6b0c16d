"""Dig and place requests, with confirmation polling where the world lets us observe the result."""

from __future__ import annotations

import asyncio
import logging

from mc_farmer.adapters.farm_world import FarmWorld
from mc_farmer.models import Direction, Location, Material
from mc_farmer.waiting import is_set, sleep_or_cancel

DEFAULT_DIG_MAX_WAIT_TICKS = 100


class BlockActionCoordinator:
    def __init__(
        self,
        world: FarmWorld,
        *,
        dig_poll_interval_seconds: float = 0.1,
        accelerant_interval_seconds: float = 0.05,
        accelerant_settle_seconds: float = 0.1,
        logger: logging.Logger | None = None,
    ) -> None:
        self._world = world
        self._dig_poll_interval_seconds = dig_poll_interval_seconds
        self._accelerant_interval_seconds = accelerant_interval_seconds
        self._accelerant_settle_seconds = accelerant_settle_seconds
        self._logger = logger or logging.getLogger("mc_farmer.actions")

    async def dig_and_wait(
        self,
        location: Location,
        *,
        max_wait_ticks: int = DEFAULT_DIG_MAX_WAIT_TICKS,
        cancel: asyncio.Event | None = None,
    ) -> bool:
        """Dig ``location`` and wait up to ``max_wait_ticks`` polls for it to turn into air."""
        if not self._world.request_dig(location.floor(), Direction.down):
            self._logger.debug("dig_rejected", extra={"location": location})
            return False

        ticks = 0
        while self._world.read_block(location).material != Material.air:
            if ticks >= max_wait_ticks:
                self._logger.warning("dig_timeout", extra={"location": location, "ticks": ticks})
                return False
            if is_set(cancel) or await sleep_or_cancel(self._dig_poll_interval_seconds, cancel):
                return False
            ticks += 1
        return True

    def place_fire_and_forget(self, location: Location, face: Direction) -> None:
        if not self._world.request_place(location, face):
            self._logger.debug("place_rejected", extra={"location": location, "face": face.value})

    async def apply_growth_accelerant(
        self,
        location: Location,
        face: Direction,
        attempts: int,
        *,
        cancel: asyncio.Event | None = None,
    ) -> None:
        # Fixed attempt count; the resulting growth stage is never re-read.
        for attempt in range(attempts):
            if attempt and await sleep_or_cancel(self._accelerant_interval_seconds, cancel):
                return
            self.place_fire_and_forget(location, face)
        await sleep_or_cancel(self._accelerant_settle_seconds, cancel)
