from pydantic import BaseModel
from typing import Literal, List

class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal[
        "instructor_conflict",
        "division_conflict",
        "room_conflict",
        "room_type",
        "room_capacity",
        "non_contiguous_session",
        "day_cap",
        "subject_spacing",
        "unknown_reference",
    ]
    description: str
    severity: Literal["hard", "soft"]
    affected_entries: List[str]  # Timetable entry IDs involved

class ConflictReport(BaseModel):
    conflicts: List[ConflictDetail]

    @property
    def has_hard_conflicts(self) -> bool:
        return any(conflict.severity == "hard" for conflict in self.conflicts)
