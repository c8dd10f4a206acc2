from __future__ import annotations

from dataclasses import dataclass

from lecture_scheduler.core.exceptions import NoEligibleSubjectsError
from lecture_scheduler.models.subject import SUBJECT_TYPE_PRIORITY, SubjectType
from lecture_scheduler.schemas.catalog import Subject


@dataclass(frozen=True)
class LectureRequirement:
    """One weekly occurrence of a subject that still has to be placed."""

    subject: Subject
    duration: int
    type: SubjectType
    lecture_number: int

    @property
    def subject_id(self) -> str:
        return self.subject.id

    def describe(self) -> str:
        return f"{self.subject.name} lecture {self.lecture_number}"


def expand_requirements(subjects: list[Subject], *, division_id: str = "") -> list[LectureRequirement]:
    if not subjects:
        raise NoEligibleSubjectsError(division_id)

    requirements: list[LectureRequirement] = []
    for subject in subjects:
        for occurrence in range(subject.lectures_per_week):
            requirements.append(
                LectureRequirement(
                    subject=subject,
                    duration=subject.duration,
                    type=subject.type,
                    lecture_number=occurrence + 1,
                )
            )
    return requirements


def order_requirements(requirements: list[LectureRequirement]) -> list[LectureRequirement]:
    # sorted() is stable, so equal types keep their (subject, occurrence) order.
    return sorted(
        requirements,
        key=lambda req: SUBJECT_TYPE_PRIORITY.get(req.type, len(SUBJECT_TYPE_PRIORITY)),
    )
