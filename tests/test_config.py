from __future__ import annotations

import pytest

from mc_farmer.config import FarmerSettings


@pytest.mark.parametrize("value,expected", [(0.0, 1.0), (0.5, 1.0), (-3.0, 1.0), (1.0, 1.0), (2.5, 2.5)])
def test_delay_is_clamped_on_construction(value: float, expected: float) -> None:
    assert FarmerSettings(delay_between_tasks_seconds=value).delay_between_tasks_seconds == expected


def test_delay_is_clamped_on_update() -> None:
    config = FarmerSettings(delay_between_tasks_seconds=3.0)

    config.delay_between_tasks_seconds = 0.2
    assert config.delay_between_tasks_seconds == 1.0

    config.delay_between_tasks_seconds = 4.0
    assert config.delay_between_tasks_seconds == 4.0


def test_settings_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("MC_FARMER_ENABLED", "true")
    monkeypatch.setenv("MC_FARMER_DELAY_BETWEEN_TASKS_SECONDS", "0.1")

    config = FarmerSettings()

    assert config.enabled is True
    assert config.delay_between_tasks_seconds == 1.0
