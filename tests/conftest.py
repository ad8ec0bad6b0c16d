from __future__ import annotations

import pytest

from mc_farmer.config import FarmerSettings


@pytest.fixture
def fast_settings() -> FarmerSettings:
    return FarmerSettings(
        movement_poll_interval_seconds=0.01,
        movement_timeout_seconds=1.0,
        dig_poll_interval_seconds=0.01,
        place_settle_seconds=0,
        harvest_settle_seconds=0,
        fruit_harvest_settle_seconds=0,
        bone_meal_interval_seconds=0,
        bone_meal_settle_seconds=0,
    )
