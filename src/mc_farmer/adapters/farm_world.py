"""Boundary between the farming engine and the game client that executes its requests."""

from typing import Protocol

from mc_farmer.models import Block, Direction, ItemEntity, ItemType, Location, Material


class FarmWorld(Protocol):
    """Capabilities the farming engine consumes from a connected game client.

    Inventory slots use the player inventory window numbering: 9-35 is general
    storage and 36-44 is the hotbar.
    """

    def find_blocks(self, origin: Location, material: Material, radius: int) -> list[Location]:
        """Return the locations of blocks of ``material`` within ``radius`` of ``origin``."""

    def read_block(self, location: Location) -> Block:
        """Return the block currently observed at ``location``."""

    def request_move(self, target: Location, *, allow_unsafe: bool, allow_teleport: bool) -> bool:
        """Ask the path-finder to walk to ``target``; False when the target is unreachable."""

    def current_location(self) -> Location:
        """Return the avatar's current position."""

    def request_dig(self, location: Location, face: Direction) -> bool:
        """Start digging the block at ``location``."""

    def request_place(self, location: Location, face: Direction) -> bool:
        """Use the held item on ``location``."""

    def inventory_search(self, item: ItemType) -> list[int]:
        """Return every inventory slot holding ``item``, in ascending order."""

    def equipped_item(self) -> ItemType | None:
        """Return the item in the selected hotbar slot."""

    def select_quick_slot(self, index: int) -> None:
        """Select hotbar slot ``index`` (0-8)."""

    def move_item_to_slot(self, source_slot: int, target_slot: int) -> None:
        """Move the stack in ``source_slot`` to ``target_slot``, swapping or merging."""

    def nearby_item_entities(self, origin: Location, radius: int) -> list[ItemEntity]:
        """Return dropped item entities around ``origin``."""

    def protocol_version(self) -> int:
        """Return the negotiated game protocol number."""

    def is_eating(self) -> bool:
        """Return True while the avatar is consuming food."""

    def log(self, message: str) -> None:
        """Show a message on the in-game console."""
