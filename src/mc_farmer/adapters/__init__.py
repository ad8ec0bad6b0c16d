"""Game client adapters (capability protocol and the in-memory farm)."""

from .farm_world import FarmWorld
from .simulated import ItemStack, SimulatedFarmWorld

__all__ = [
    "FarmWorld",
    "ItemStack",
    "SimulatedFarmWorld",
]
