from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from lecture_scheduler.models.subject import SubjectType
from lecture_scheduler.schemas.catalog import Classroom, Instructor, TimeSlot
from lecture_scheduler.services.constraints import (
    SLOT_CHECKS,
    SearchContext,
    SlotRun,
    day_admits,
    eligible_classrooms,
    eligible_instructors,
    first_free_classroom,
    first_free_instructor,
)
from lecture_scheduler.services.requirements import LectureRequirement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    day: str
    time_slots: tuple[TimeSlot, ...]
    instructor: Instructor
    classroom: Classroom


def preferred_slot_order(
    subject_type: SubjectType,
    total_slots: int,
    preferred_starts: Sequence[int] = (4, 5),
) -> list[int]:
    natural = list(range(total_slots))
    if subject_type != SubjectType.technical_training:
        return natural

    preferred = []
    for index in preferred_starts:
        if 0 <= index < total_slots and index not in preferred:
            preferred.append(index)
    return preferred + [index for index in natural if index not in preferred]


class SlotSearch:
    """First-fit search over (day, slot run, instructor, classroom)."""

    def __init__(
        self,
        *,
        context: SearchContext,
        instructors: Sequence[Instructor],
        classrooms: Sequence[Classroom],
        student_count: int,
    ) -> None:
        self.context = context
        self.instructors = list(instructors)
        self.classrooms = list(classrooms)
        self.student_count = student_count

    def find_placement(self, requirement: LectureRequirement) -> Placement | None:
        teaching_slots = self.context.teaching_slots
        total_slots = len(teaching_slots)

        instructors = eligible_instructors(requirement, self.instructors)
        classrooms = eligible_classrooms(requirement, self.classrooms, self.student_count)
        if not instructors or not classrooms:
            logger.debug(
                "No eligible resources for %s | instructors=%s | classrooms=%s",
                requirement.describe(),
                len(instructors),
                len(classrooms),
            )
            return None
        if requirement.duration > total_slots:
            return None

        slot_order = preferred_slot_order(
            requirement.type,
            total_slots,
            self.context.policy.technical_training_preferred_slots,
        )

        for day in self.context.policy.working_days:
            if not day_admits(requirement, day, self.context):
                continue

            for start_index in slot_order:
                if start_index > total_slots - requirement.duration:
                    continue
                run = SlotRun(
                    day=day,
                    start_index=start_index,
                    slots=tuple(teaching_slots[start_index:start_index + requirement.duration]),
                )
                if not all(check(requirement, run, self.context) for check in SLOT_CHECKS):
                    continue

                instructor = first_free_instructor(instructors, run, self.context.store)
                if instructor is None:
                    continue
                classroom = first_free_classroom(classrooms, run, self.context.store)
                if classroom is None:
                    continue

                return Placement(
                    day=day,
                    time_slots=run.slots,
                    instructor=instructor,
                    classroom=classroom,
                )

        return None
