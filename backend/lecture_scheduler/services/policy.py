from __future__ import annotations

from dataclasses import dataclass

from lecture_scheduler.core.config import WEEK_DAYS, Settings, get_settings
from lecture_scheduler.core.exceptions import ConfigurationError

DEFAULT_WORKING_DAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


@dataclass(frozen=True)
class SchedulingPolicy:
    working_days: tuple[str, ...] = DEFAULT_WORKING_DAYS
    technical_training_preferred_slots: tuple[int, ...] = (4, 5)
    max_technical_training_per_day: int = 1
    max_lab_subjects_per_day: int = 2
    max_same_subject_per_day: int = 2
    default_generated_by: str = "system"

    def __post_init__(self) -> None:
        if not self.working_days:
            raise ConfigurationError("Scheduling policy needs at least one working day")
        unknown = [day for day in self.working_days if day not in WEEK_DAYS]
        if unknown:
            raise ConfigurationError(f"Unknown working day(s): {', '.join(unknown)}")
        caps = (
            self.max_technical_training_per_day,
            self.max_lab_subjects_per_day,
            self.max_same_subject_per_day,
        )
        if any(cap < 0 for cap in caps):
            raise ConfigurationError("Day caps cannot be negative")
        if any(index < 0 for index in self.technical_training_preferred_slots):
            raise ConfigurationError("Preferred slot indices cannot be negative")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SchedulingPolicy":
        settings = settings or get_settings()
        return cls(
            working_days=tuple(settings.working_days),
            technical_training_preferred_slots=tuple(settings.technical_training_preferred_slots),
            max_technical_training_per_day=settings.max_technical_training_per_day,
            max_lab_subjects_per_day=settings.max_lab_subjects_per_day,
            max_same_subject_per_day=settings.max_same_subject_per_day,
            default_generated_by=settings.default_generated_by,
        )
