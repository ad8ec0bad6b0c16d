"""Movement requests with bounded convergence waits, and the shared movement lock."""

from __future__ import annotations

import asyncio
import logging
import threading

from mc_farmer.adapters.farm_world import FarmWorld
from mc_farmer.models import Location
from mc_farmer.waiting import is_set, sleep_or_cancel

DEFAULT_TOLERANCE = 2.0


class MovementLock:
    """Exclusive token that lets one automation at a time drive the avatar's movement."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._holder: str | None = None

    @property
    def is_locked(self) -> bool:
        with self._guard:
            return self._holder is not None

    @property
    def locked_by(self) -> str | None:
        with self._guard:
            return self._holder

    def lock(self, holder: str) -> bool:
        with self._guard:
            if self._holder is not None:
                return False
            self._holder = holder
            return True

    def unlock(self, holder: str) -> bool:
        """Release the lock if ``holder`` owns it."""
        with self._guard:
            if self._holder != holder:
                return False
            self._holder = None
            return True


movement_lock = MovementLock()


class MovementCoordinator:
    """Submits a move and waits until the avatar arrives, gives up, or is cancelled."""

    def __init__(
        self,
        world: FarmWorld,
        *,
        poll_interval_seconds: float = 0.2,
        timeout_seconds: float = 30.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._world = world
        self._poll_interval_seconds = poll_interval_seconds
        self._timeout_seconds = timeout_seconds
        self._logger = logger or logging.getLogger("mc_farmer.movement")

    async def move_and_wait(
        self,
        target: Location,
        *,
        tolerance: float = DEFAULT_TOLERANCE,
        allow_unsafe: bool = False,
        allow_teleport: bool = False,
        cancel: asyncio.Event | None = None,
    ) -> bool:
        if not self._world.request_move(target, allow_unsafe=allow_unsafe, allow_teleport=allow_teleport):
            self._logger.debug("move_rejected", extra={"target": target})
            return False

        self._logger.debug("move_started", extra={"target": target})
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout_seconds
        while self._world.current_location().distance(target) > tolerance:
            if is_set(cancel):
                return False
            if loop.time() >= deadline:
                self._logger.warning(
                    "movement_timeout",
                    extra={"target": target, "timeout_seconds": self._timeout_seconds},
                )
                return False
            if await sleep_or_cancel(self._poll_interval_seconds, cancel):
                return False
        return True
