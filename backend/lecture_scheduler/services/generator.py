from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from time import perf_counter

from lecture_scheduler.core.exceptions import DivisionNotFoundError, NoEligibleSubjectsError
from lecture_scheduler.models.room import RoomType, required_room_type
from lecture_scheduler.schemas.catalog import CatalogSnapshot, Division
from lecture_scheduler.schemas.timetable import (
    CatalogValidationResult,
    GeneratedTimetable,
    TimetableEntry,
)
from lecture_scheduler.services.constraints import SearchContext
from lecture_scheduler.services.policy import SchedulingPolicy
from lecture_scheduler.services.requirements import (
    LectureRequirement,
    expand_requirements,
    order_requirements,
)
from lecture_scheduler.services.schedule_store import ScheduleStore
from lecture_scheduler.services.slot_search import Placement, SlotSearch

logger = logging.getLogger(__name__)


class ConflictReporter:
    """Collects one message per requirement that could not be placed."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def record(self, requirement: LectureRequirement) -> None:
        message = f"Could not schedule {requirement.describe()}"
        logger.warning("PLACEMENT CONFLICT | %s", message)
        self.messages.append(message)

    def __len__(self) -> int:
        return len(self.messages)


def build_entries(division_id: str, placement: Placement, requirement: LectureRequirement) -> list[TimetableEntry]:
    is_multi_slot = len(placement.time_slots) > 1
    return [
        TimetableEntry(
            id=f"entry_{division_id}_{placement.day}_{slot.id}_{index}",
            division_id=division_id,
            day=placement.day,
            time_slot_id=slot.id,
            subject_id=requirement.subject_id,
            instructor_id=placement.instructor.id,
            classroom_id=placement.classroom.id,
            is_lunch=False,
            is_multi_slot=is_multi_slot,
            slot_index=index,
            lecture_number=requirement.lecture_number,
        )
        for index, slot in enumerate(placement.time_slots)
    ]


class TimetableGenerator:
    """Greedy constructive scheduler for one division at a time.

    The catalog snapshot is fixed at construction; every ``generate`` call builds
    its own schedule store, so separate calls never share mutable state.
    """

    def __init__(self, catalog: CatalogSnapshot, *, policy: SchedulingPolicy | None = None) -> None:
        self.catalog = catalog
        self.policy = policy or SchedulingPolicy()
        self.teaching_slots = tuple(catalog.teaching_slots())
        self.lunch_slots = tuple(catalog.lunch_slots())

    def _resolve_division(self, division_id: str) -> Division:
        division = self.catalog.find_division(division_id)
        if division is None:
            raise DivisionNotFoundError(division_id)
        return division

    def _new_store(self) -> ScheduleStore:
        return ScheduleStore(self.policy.working_days, self.teaching_slots)

    def generate(self, division_id: str, *, generated_by: str | None = None) -> GeneratedTimetable:
        started = perf_counter()
        division = self._resolve_division(division_id)
        subjects = self.catalog.subjects_for(division)
        if not subjects:
            raise NoEligibleSubjectsError(division_id)

        requirements = order_requirements(expand_requirements(subjects, division_id=division_id))
        logger.info(
            "TIMETABLE GENERATION START | division_id=%s | subjects=%s | requirements=%s",
            division_id,
            len(subjects),
            len(requirements),
        )

        store = self._new_store()
        search = SlotSearch(
            context=SearchContext(
                store=store,
                teaching_slots=self.teaching_slots,
                lunch_slots=self.lunch_slots,
                policy=self.policy,
            ),
            instructors=self.catalog.instructors,
            classrooms=self.catalog.classrooms,
            student_count=division.student_count,
        )
        reporter = ConflictReporter()
        entries: list[TimetableEntry] = []

        for requirement in requirements:
            placement = search.find_placement(requirement)
            if placement is None:
                reporter.record(requirement)
                continue
            entries.extend(build_entries(division.id, placement, requirement))
            store.occupy(
                placement.day,
                placement.time_slots,
                instructor=placement.instructor,
                classroom=placement.classroom,
                subject=requirement.subject,
            )

        timetable = GeneratedTimetable(
            id=f"tt_{uuid.uuid4().hex}",
            division_id=division.id,
            generated_by=generated_by or self.policy.default_generated_by,
            generated_at=datetime.now(timezone.utc),
            entries=entries,
            conflicts=reporter.messages,
        )
        logger.info(
            "TIMETABLE GENERATION DONE | division_id=%s | entries=%s | occupied_cells=%s | conflicts=%s | elapsed_ms=%.1f",
            division_id,
            len(entries),
            store.occupied_count(),
            len(reporter),
            (perf_counter() - started) * 1000,
        )
        return timetable


def validate_catalog(catalog: CatalogSnapshot) -> CatalogValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if not catalog.instructors:
        errors.append("No instructors available")
    if not catalog.subjects:
        errors.append("No subjects available")
    if not catalog.classrooms:
        errors.append("No classrooms available")
    if not catalog.time_slots:
        errors.append("No time slots available")

    if catalog.time_slots and not catalog.teaching_slots():
        warnings.append("No teaching time slots available (all slots are lunch breaks)")

    room_types = {room.type for room in catalog.classrooms}
    missing: list[RoomType] = []
    for subject in catalog.subjects:
        room_type = required_room_type(subject.type)
        if room_type not in room_types and room_type not in missing:
            missing.append(room_type)
    for room_type in missing:
        warnings.append(f"No classrooms available for {room_type.value} subjects")

    return CatalogValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def generate_timetable_for_division(
    catalog: CatalogSnapshot,
    division_id: str,
    *,
    generated_by: str | None = None,
    policy: SchedulingPolicy | None = None,
) -> GeneratedTimetable:
    generator = TimetableGenerator(catalog, policy=policy)
    return generator.generate(division_id, generated_by=generated_by)
