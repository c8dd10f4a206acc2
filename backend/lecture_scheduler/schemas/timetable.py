from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from lecture_scheduler.schemas.catalog import CatalogSnapshot


class TimetableEntry(BaseModel):
    id: str
    division_id: str = Field(alias="divisionId")
    day: str
    time_slot_id: str = Field(alias="timeSlotId")
    subject_id: str = Field(alias="subjectId")
    instructor_id: str = Field(alias="instructorId")
    classroom_id: str = Field(alias="classroomId")
    is_lunch: bool = Field(default=False, alias="isLunch")
    is_multi_slot: bool = Field(default=False, alias="isMultiSlot")
    slot_index: int = Field(default=0, alias="slotIndex", ge=0)
    lecture_number: int = Field(default=1, alias="lectureNumber", ge=1)

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }


class GeneratedTimetable(BaseModel):
    id: str
    division_id: str = Field(alias="divisionId")
    generated_by: str = Field(alias="generatedBy")
    generated_at: datetime = Field(alias="generatedAt")
    entries: list[TimetableEntry] = Field(default_factory=list)
    conflicts: list[str] = Field(default_factory=list)

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    @property
    def is_complete(self) -> bool:
        return not self.conflicts

    @property
    def placed_requirements(self) -> set[tuple[str, int]]:
        return {(entry.subject_id, entry.lecture_number) for entry in self.entries}


class CatalogValidationResult(BaseModel):
    is_valid: bool = Field(alias="isValid")
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class GenerateTimetableRequest(BaseModel):
    catalog: CatalogSnapshot
    division_id: str = Field(alias="divisionId", min_length=1, max_length=36)
    generated_by: str | None = Field(default=None, alias="generatedBy", min_length=1, max_length=100)
    strict: bool = False

    model_config = {"populate_by_name": True}


class AuditTimetableRequest(BaseModel):
    catalog: CatalogSnapshot
    timetable: GeneratedTimetable
