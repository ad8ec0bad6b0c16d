from __future__ import annotations

import asyncio
import logging

from mc_farmer.models import Location
from mc_farmer.movement import MovementCoordinator, MovementLock


class StubMovementWorld:
    def __init__(self, *, accept: bool = True, positions: list[Location] | None = None) -> None:
        self.accept = accept
        self.positions = positions or [Location(0, 64, 0)]
        self.move_requests: list[tuple[Location, bool, bool]] = []
        self.location_reads = 0

    def request_move(self, target: Location, *, allow_unsafe: bool, allow_teleport: bool) -> bool:
        self.move_requests.append((target, allow_unsafe, allow_teleport))
        return self.accept

    def current_location(self) -> Location:
        self.location_reads += 1
        index = min(self.location_reads - 1, len(self.positions) - 1)
        return self.positions[index]


def test_rejected_move_returns_immediately() -> None:
    world = StubMovementWorld(accept=False)
    coordinator = MovementCoordinator(world, poll_interval_seconds=0.01)

    moved = asyncio.run(coordinator.move_and_wait(Location(10, 64, 10), allow_unsafe=True))

    assert moved is False
    assert world.move_requests == [(Location(10, 64, 10), True, False)]
    assert world.location_reads == 0


def test_waits_until_within_tolerance() -> None:
    target = Location(10, 64, 0)
    world = StubMovementWorld(positions=[Location(0, 64, 0), Location(5, 64, 0), Location(8.5, 64, 0)])
    coordinator = MovementCoordinator(world, poll_interval_seconds=0.01)

    moved = asyncio.run(coordinator.move_and_wait(target, tolerance=2.0, allow_teleport=True))

    assert moved is True
    assert world.location_reads == 3
    assert world.move_requests == [(target, False, True)]


def test_wait_is_bounded_by_timeout(caplog) -> None:
    world = StubMovementWorld(positions=[Location(0, 64, 0)])
    coordinator = MovementCoordinator(world, poll_interval_seconds=0.01, timeout_seconds=0.05)

    with caplog.at_level(logging.WARNING, logger="mc_farmer.movement"):
        moved = asyncio.run(coordinator.move_and_wait(Location(50, 64, 50)))

    assert moved is False
    assert any(record.getMessage() == "movement_timeout" for record in caplog.records)


def test_wait_observes_cancellation() -> None:
    world = StubMovementWorld(positions=[Location(0, 64, 0)])
    coordinator = MovementCoordinator(world, poll_interval_seconds=10.0, timeout_seconds=60.0)

    async def _run() -> tuple[bool, float]:
        cancel = asyncio.Event()
        loop = asyncio.get_running_loop()
        started = loop.time()
        loop.call_later(0.02, cancel.set)
        moved = await coordinator.move_and_wait(Location(50, 64, 50), cancel=cancel)
        return moved, loop.time() - started

    moved, elapsed = asyncio.run(_run())

    assert moved is False
    assert elapsed < 5.0


def test_movement_lock_is_exclusive() -> None:
    lock = MovementLock()

    assert lock.lock("Farmer") is True
    assert lock.is_locked is True
    assert lock.locked_by == "Farmer"
    assert lock.lock("AutoFishing") is False
    assert lock.unlock("AutoFishing") is False
    assert lock.locked_by == "Farmer"

    assert lock.unlock("Farmer") is True
    assert lock.is_locked is False
    assert lock.unlock("Farmer") is False
    assert lock.lock("AutoFishing") is True
