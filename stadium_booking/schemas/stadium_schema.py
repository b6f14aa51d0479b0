"""Stadium record model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stadium_booking.schemas.schedule_schema import DateOverrides, WeeklySchedule


class Stadium(BaseModel):
    """Stadium record with its weekly schedule and date overrides.

    Raw stored shapes (day-name keyed dicts, ISO date keyed dicts) are
    converted on validation; ``to_record`` converts back.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    owner_id: str
    name: str = ""
    price_per_hour: float = Field(default=0.0, ge=0)
    is_active: bool = True
    weekly_schedule: WeeklySchedule = Field(default_factory=WeeklySchedule)
    date_overrides: DateOverrides = Field(default_factory=DateOverrides)

    @field_validator("weekly_schedule", mode="before")
    @classmethod
    def _load_weekly_schedule(cls, value: Any) -> WeeklySchedule:
        if isinstance(value, WeeklySchedule):
            return value
        return WeeklySchedule.from_storage(value)

    @field_validator("date_overrides", mode="before")
    @classmethod
    def _load_date_overrides(cls, value: Any) -> DateOverrides:
        if isinstance(value, DateOverrides):
            return value
        return DateOverrides.from_storage(value)

    def clone(self) -> "Stadium":
        """Independent copy, schedule and overrides included."""
        return self.model_copy(
            update={
                "weekly_schedule": self.weekly_schedule.copy(),
                "date_overrides": self.date_overrides.copy(),
            }
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "price_per_hour": self.price_per_hour,
            "is_active": self.is_active,
            "weekly_schedule": self.weekly_schedule.to_storage(),
            "date_overrides": self.date_overrides.to_storage(),
        }
