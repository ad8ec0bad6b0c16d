from __future__ import annotations

import asyncio


def is_set(cancel: asyncio.Event | None) -> bool:
    return cancel is not None and cancel.is_set()


async def sleep_or_cancel(seconds: float, cancel: asyncio.Event | None = None) -> bool:
    """Sleep for ``seconds`` and return True if ``cancel`` was set before or during the sleep."""
    if cancel is None:
        await asyncio.sleep(max(0.0, seconds))
        return False
    if cancel.is_set():
        return True
    try:
        await asyncio.wait_for(cancel.wait(), timeout=max(0.0, seconds))
    except asyncio.TimeoutError:
        return False
    return True
