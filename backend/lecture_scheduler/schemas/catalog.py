from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

from lecture_scheduler.models.room import RoomType
from lecture_scheduler.models.subject import SubjectType

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class CatalogModel(BaseModel):
    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
        "frozen": True,
    }


class Subject(CatalogModel):
    id: str = Field(min_length=1, max_length=36)
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(default="", max_length=50)
    type: SubjectType = SubjectType.theory
    lectures_per_week: int = Field(default=1, alias="lecturesPerWeek", ge=1, le=40)
    duration: int = Field(default=1, ge=1, le=12)


class Classroom(CatalogModel):
    id: str = Field(min_length=1, max_length=36)
    name: str = Field(default="", max_length=100)
    type: RoomType = RoomType.theory
    capacity: int = Field(ge=0, le=5000)


class Instructor(CatalogModel):
    id: str = Field(min_length=1, max_length=36)
    name: str = Field(default="", max_length=200)
    email: str | None = Field(default=None, max_length=320)
    subjects: tuple[str, ...] = ()


class Division(CatalogModel):
    id: str = Field(min_length=1, max_length=36)
    name: str = Field(default="", max_length=100)
    student_count: int = Field(default=0, alias="studentCount", ge=0, le=5000)
    subjects: tuple[str, ...] = ()


class TimeSlot(CatalogModel):
    id: str = Field(min_length=1, max_length=36)
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    is_lunch: bool = Field(default=False, alias="isLunch")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_time_order(self) -> "TimeSlot":
        if self.end_minutes <= self.start_minutes:
            raise ValueError("End time must be after start time")
        return self

    @property
    def start_minutes(self) -> int:
        return parse_time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_time_to_minutes(self.end_time)


class CatalogSnapshot(CatalogModel):
    """Read-only view of every catalog the generator consumes for one call."""

    subjects: tuple[Subject, ...] = ()
    classrooms: tuple[Classroom, ...] = ()
    instructors: tuple[Instructor, ...] = ()
    divisions: tuple[Division, ...] = ()
    time_slots: tuple[TimeSlot, ...] = Field(default=(), alias="timeSlots")

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "CatalogSnapshot":
        def ensure_unique(label: str, items: tuple[CatalogModel, ...]) -> None:
            seen: set[str] = set()
            duplicates: set[str] = set()
            for item in items:
                if item.id in seen:
                    duplicates.add(item.id)
                else:
                    seen.add(item.id)
            if duplicates:
                raise ValueError(f"Duplicate {label} id(s): {', '.join(sorted(duplicates))}")

        ensure_unique("subject", self.subjects)
        ensure_unique("classroom", self.classrooms)
        ensure_unique("instructor", self.instructors)
        ensure_unique("division", self.divisions)
        ensure_unique("time slot", self.time_slots)
        return self

    @model_validator(mode="after")
    def validate_teaching_slots_do_not_overlap(self) -> "CatalogSnapshot":
        ordered = self.teaching_slots()
        for earlier, later in zip(ordered, ordered[1:]):
            if later.start_minutes < earlier.end_minutes:
                raise ValueError(
                    f"Teaching time slots {earlier.id} and {later.id} overlap "
                    f"({earlier.start_time}-{earlier.end_time}, {later.start_time}-{later.end_time})"
                )
        return self

    def teaching_slots(self) -> list[TimeSlot]:
        """Non-lunch slots ordered by start time; runs and adjacency follow this order."""
        teaching = [slot for slot in self.time_slots if not slot.is_lunch]
        return sorted(teaching, key=lambda slot: slot.start_minutes)

    def lunch_slots(self) -> list[TimeSlot]:
        return [slot for slot in self.time_slots if slot.is_lunch]

    def find_division(self, division_id: str) -> Division | None:
        return next((division for division in self.divisions if division.id == division_id), None)

    def subjects_for(self, division: Division) -> list[Subject]:
        """Catalog subjects required by the division, in catalog order."""
        wanted = set(division.subjects)
        return [subject for subject in self.subjects if subject.id in wanted]
