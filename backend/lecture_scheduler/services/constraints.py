"""Placement predicates used by the slot search.

Each check answers one question about a candidate placement and can be tested
on its own. ``SLOT_CHECKS`` fixes the order in which the per-run checks apply.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from lecture_scheduler.models.room import required_room_type
from lecture_scheduler.models.subject import SubjectType
from lecture_scheduler.schemas.catalog import Classroom, Instructor, TimeSlot
from lecture_scheduler.services.policy import SchedulingPolicy
from lecture_scheduler.services.requirements import LectureRequirement
from lecture_scheduler.services.schedule_store import ScheduleStore


@dataclass(frozen=True)
class SlotRun:
    day: str
    start_index: int
    slots: tuple[TimeSlot, ...]

    @property
    def end_index(self) -> int:
        return self.start_index + len(self.slots) - 1


@dataclass(frozen=True)
class SearchContext:
    store: ScheduleStore
    teaching_slots: tuple[TimeSlot, ...]
    lunch_slots: tuple[TimeSlot, ...]
    policy: SchedulingPolicy


def eligible_instructors(requirement: LectureRequirement, instructors: Sequence[Instructor]) -> list[Instructor]:
    return [instructor for instructor in instructors if requirement.subject_id in instructor.subjects]


def eligible_classrooms(
    requirement: LectureRequirement,
    classrooms: Sequence[Classroom],
    student_count: int,
) -> list[Classroom]:
    room_type = required_room_type(requirement.type)
    return [room for room in classrooms if room.type == room_type and room.capacity >= student_count]


def day_admits(requirement: LectureRequirement, day: str, context: SearchContext) -> bool:
    """Day-level caps, counted over the day's occupied cells."""
    policy = context.policy
    technical_training_cells = 0
    lab_subjects: set[str] = set()
    same_subject_cells = 0

    for cell in context.store.day_cells(day):
        if cell.subject.type == SubjectType.technical_training:
            technical_training_cells += 1
        elif cell.subject.type == SubjectType.lab:
            lab_subjects.add(cell.subject.id)
        if cell.subject.id == requirement.subject_id:
            same_subject_cells += 1

    if (
        requirement.type == SubjectType.technical_training
        and technical_training_cells >= policy.max_technical_training_per_day
    ):
        return False
    if (
        requirement.type == SubjectType.lab
        and requirement.subject_id not in lab_subjects
        and len(lab_subjects) >= policy.max_lab_subjects_per_day
    ):
        return False
    if same_subject_cells >= policy.max_same_subject_per_day:
        return False
    return True


def run_is_unoccupied(requirement: LectureRequirement, run: SlotRun, context: SearchContext) -> bool:
    return all(not context.store.is_occupied(run.day, slot.id) for slot in run.slots)


def spans_lunch(earlier: TimeSlot, later: TimeSlot, lunch_slots: Sequence[TimeSlot]) -> bool:
    """True when a lunch slot overlaps the gap between two teaching slots."""
    if earlier.end_minutes >= later.start_minutes:
        return False
    gap_start, gap_end = earlier.end_minutes, later.start_minutes
    return any(
        lunch.start_minutes < gap_end and lunch.end_minutes > gap_start
        for lunch in lunch_slots
    )


def run_avoids_lunch(requirement: LectureRequirement, run: SlotRun, context: SearchContext) -> bool:
    for earlier, later in zip(run.slots, run.slots[1:]):
        if spans_lunch(earlier, later, context.lunch_slots):
            return False
    return True


def run_keeps_subject_spacing(requirement: LectureRequirement, run: SlotRun, context: SearchContext) -> bool:
    """Reject a run whose direct neighbours already hold the same subject."""
    neighbours = (run.start_index - 1, run.end_index + 1)
    for index in neighbours:
        if index < 0 or index >= len(context.teaching_slots):
            continue
        cell = context.store.cell(run.day, context.teaching_slots[index].id)
        if cell is not None and cell.subject.id == requirement.subject_id:
            return False
    return True


SlotCheck = Callable[[LectureRequirement, SlotRun, SearchContext], bool]

SLOT_CHECKS: tuple[SlotCheck, ...] = (
    run_is_unoccupied,
    run_avoids_lunch,
    run_keeps_subject_spacing,
)


def first_free_instructor(
    candidates: Sequence[Instructor],
    run: SlotRun,
    store: ScheduleStore,
) -> Instructor | None:
    return next(
        (
            instructor
            for instructor in candidates
            if all(store.instructor_is_free(instructor.id, run.day, slot.id) for slot in run.slots)
        ),
        None,
    )


def first_free_classroom(
    candidates: Sequence[Classroom],
    run: SlotRun,
    store: ScheduleStore,
) -> Classroom | None:
    return next(
        (
            room
            for room in candidates
            if all(store.classroom_is_free(room.id, run.day, slot.id) for slot in run.slots)
        ),
        None,
    )
