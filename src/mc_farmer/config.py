"""Runtime configuration for the farmer."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_DELAY_BETWEEN_TASKS_SECONDS = 1.0


class FarmerSettings(BaseSettings):
    """Environment-driven settings shared by every farming run in the process."""

    model_config = SettingsConfigDict(
        env_prefix="MC_FARMER_",
        env_file=".env",
        extra="ignore",
        validate_assignment=True,
    )

    app_name: str = "mc-farmer"
    log_level: str = "INFO"
    enabled: bool = False
    delay_between_tasks_seconds: float = Field(
        default=MIN_DELAY_BETWEEN_TASKS_SECONDS,
        description="Pause between two ticks of the farming loop; values below 1.0 are raised to 1.0.",
    )

    movement_tolerance: float = 2.0
    movement_timeout_seconds: float = 30.0
    movement_poll_interval_seconds: float = 0.2
    dig_poll_interval_seconds: float = 0.1
    dig_max_wait_ticks: int = 100

    place_settle_seconds: float = 0.3
    harvest_settle_seconds: float = 0.2
    fruit_harvest_settle_seconds: float = 0.4
    bone_meal_interval_seconds: float = 0.05
    bone_meal_settle_seconds: float = 0.1

    @field_validator("delay_between_tasks_seconds")
    @classmethod
    def clamp_delay(cls, value: float) -> float:
        return max(MIN_DELAY_BETWEEN_TASKS_SECONDS, value)


settings = FarmerSettings()
