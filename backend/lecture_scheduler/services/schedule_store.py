from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from lecture_scheduler.schemas.catalog import Classroom, Instructor, Subject, TimeSlot


@dataclass(frozen=True)
class ScheduleCell:
    instructor: Instructor
    classroom: Classroom
    subject: Subject


class ScheduleStore:
    """In-memory weekly grid for one generation run.

    Keys are (day, time slot id) over the teaching slots only; a value of None
    means the cell is free.
    """

    def __init__(self, days: Iterable[str], teaching_slots: Iterable[TimeSlot]) -> None:
        self.days: tuple[str, ...] = tuple(days)
        self.teaching_slots: tuple[TimeSlot, ...] = tuple(teaching_slots)
        self._cells: dict[tuple[str, str], ScheduleCell | None] = {
            (day, slot.id): None for day in self.days for slot in self.teaching_slots
        }

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._cells

    def cell(self, day: str, slot_id: str) -> ScheduleCell | None:
        return self._cells[(day, slot_id)]

    def is_occupied(self, day: str, slot_id: str) -> bool:
        return self._cells[(day, slot_id)] is not None

    def day_cells(self, day: str) -> list[ScheduleCell]:
        """Occupied cells of one day, in teaching-slot order."""
        cells = []
        for slot in self.teaching_slots:
            cell = self._cells[(day, slot.id)]
            if cell is not None:
                cells.append(cell)
        return cells

    def instructor_is_free(self, instructor_id: str, day: str, slot_id: str) -> bool:
        cell = self._cells[(day, slot_id)]
        return not (cell is not None and cell.instructor.id == instructor_id)

    def classroom_is_free(self, classroom_id: str, day: str, slot_id: str) -> bool:
        cell = self._cells[(day, slot_id)]
        return not (cell is not None and cell.classroom.id == classroom_id)

    def occupy(
        self,
        day: str,
        slots: Iterable[TimeSlot],
        *,
        instructor: Instructor,
        classroom: Classroom,
        subject: Subject,
    ) -> None:
        slots = list(slots)
        for slot in slots:
            if (day, slot.id) not in self:
                raise ValueError(f"Cell {day} / {slot.id} is not a teaching cell")
            if self._cells[(day, slot.id)] is not None:
                raise ValueError(f"Cell {day} / {slot.id} is already occupied")
        occupant = ScheduleCell(instructor=instructor, classroom=classroom, subject=subject)
        for slot in slots:
            self._cells[(day, slot.id)] = occupant

    def occupied_count(self) -> int:
        return sum(1 for cell in self._cells.values() if cell is not None)
