"""Hotbar selection for the item the next action needs."""

from __future__ import annotations

import logging

from mc_farmer.adapters.farm_world import FarmWorld
from mc_farmer.models import HOTBAR_FIRST_SLOT, HOTBAR_LAST_SLOT, ItemType


def is_hotbar_slot(slot: int) -> bool:
    return HOTBAR_FIRST_SLOT <= slot <= HOTBAR_LAST_SLOT


class InventoryAllocator:
    """Puts a requested item in the avatar's hand with as few slot changes as possible."""

    def __init__(self, world: FarmWorld, *, logger: logging.Logger | None = None) -> None:
        self._world = world
        self._logger = logger or logging.getLogger("mc_farmer.inventory")

    def ensure_equipped(self, item: ItemType) -> bool:
        """Select ``item`` in the hotbar, pulling it from storage into slot 0 if needed.

        Returns False, without touching the inventory, when the item is not carried.
        """
        if self._world.equipped_item() == item:
            return True

        slots = self._world.inventory_search(item)
        hotbar_slots = [slot for slot in slots if is_hotbar_slot(slot)]
        if hotbar_slots:
            self._world.select_quick_slot(hotbar_slots[0] - HOTBAR_FIRST_SLOT)
            return True

        if not slots:
            return False

        self._logger.debug("item_relocated", extra={"item": item.value, "from_slot": slots[0]})
        self._world.move_item_to_slot(slots[0], HOTBAR_FIRST_SLOT)
        self._world.select_quick_slot(0)
        return True

    def ensure_any_equipped(self, items: list[ItemType]) -> ItemType | None:
        """Equip the first carried item of ``items``, in preference order."""
        for item in items:
            if self.ensure_equipped(item):
                return item
        return None

    def has_any(self, item: ItemType) -> bool:
        return len(self._world.inventory_search(item)) > 0
