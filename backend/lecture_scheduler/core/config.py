from functools import lru_cache
import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"

WEEK_DAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def _split_list(value: str) -> list[str]:
    stripped = value.strip()
    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except json.JSONDecodeError:
            pass
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    # Resolve to backend/.env so the service starts the same way from any cwd.
    model_config = SettingsConfigDict(
        env_file=str(BACKEND_ENV_FILE),
        env_file_encoding="utf-8",
        env_prefix="LECTURE_SCHEDULER_",
    )

    project_name: str = "Lecture Scheduler API"
    api_prefix: str = "/api"
    environment: str = "development"

    working_days: list[str] = [
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
    ]
    technical_training_preferred_slots: list[int] = [4, 5]
    max_technical_training_per_day: int = 1
    max_lab_subjects_per_day: int = 2
    max_same_subject_per_day: int = 2
    default_generated_by: str = "system"

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return _split_list(value)
        return value

    @field_validator("working_days", mode="before")
    @classmethod
    def split_working_days(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return _split_list(value)
        return value

    @field_validator("technical_training_preferred_slots", mode="before")
    @classmethod
    def split_preferred_slots(cls, value: str | list[int]) -> list[int]:
        if isinstance(value, str):
            return [int(item) for item in _split_list(value)]
        return value

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("At least one working day is required")
        invalid = [day for day in value if day not in WEEK_DAYS]
        if invalid:
            raise ValueError(f"Invalid working day(s): {', '.join(invalid)}")
        if len(set(value)) != len(value):
            raise ValueError("Working days must not repeat")
        return value

    @field_validator("technical_training_preferred_slots")
    @classmethod
    def validate_preferred_slots(cls, value: list[int]) -> list[int]:
        if any(index < 0 for index in value):
            raise ValueError("Preferred slot indices must be zero or positive")
        return value

    @field_validator(
        "max_technical_training_per_day",
        "max_lab_subjects_per_day",
        "max_same_subject_per_day",
    )
    @classmethod
    def validate_day_cap(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Day caps cannot be negative")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
