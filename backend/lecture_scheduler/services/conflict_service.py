from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from lecture_scheduler.models.room import required_room_type
from lecture_scheduler.models.subject import SubjectType
from lecture_scheduler.schemas.catalog import CatalogSnapshot
from lecture_scheduler.schemas.conflict import ConflictDetail, ConflictReport
from lecture_scheduler.schemas.timetable import GeneratedTimetable, TimetableEntry
from lecture_scheduler.services.constraints import spans_lunch
from lecture_scheduler.services.policy import SchedulingPolicy


class ConflictService:
    """Re-checks a timetable against the catalog it was generated from."""

    def __init__(self, catalog: CatalogSnapshot, policy: Optional[SchedulingPolicy] = None):
        self.catalog = catalog
        self.policy = policy or SchedulingPolicy()
        self.subject_map = {subject.id: subject for subject in catalog.subjects}
        self.room_map = {room.id: room for room in catalog.classrooms}
        self.instructor_map = {instructor.id: instructor for instructor in catalog.instructors}
        self.teaching_slots = catalog.teaching_slots()
        self.slot_index = {slot.id: index for index, slot in enumerate(self.teaching_slots)}
        self.lunch_slots = catalog.lunch_slots()

    def detect_conflicts(self, timetable: GeneratedTimetable) -> ConflictReport:
        conflicts: List[ConflictDetail] = []
        division = self.catalog.find_division(timetable.division_id)
        student_count = division.student_count if division else 0
        if division is None:
            conflicts.append(ConflictDetail(
                id=f"ref-division-{timetable.division_id}",
                conflict_type="unknown_reference",
                description=f"Timetable references unknown division {timetable.division_id}; room capacity was not checked",
                severity="hard",
                affected_entries=[entry.id for entry in timetable.entries]
            ))

        known: List[TimetableEntry] = []
        for entry in timetable.entries:
            missing = self._missing_references(entry)
            if missing:
                conflicts.append(ConflictDetail(
                    id=f"ref-{entry.id}",
                    conflict_type="unknown_reference",
                    description=f"Entry {entry.id} references unknown {', '.join(missing)}",
                    severity="hard",
                    affected_entries=[entry.id]
                ))
            else:
                known.append(entry)

        entries_by_cell: Dict[Tuple[str, str], List[TimetableEntry]] = defaultdict(list)
        for entry in known:
            entries_by_cell[(entry.day, entry.time_slot_id)].append(entry)

            subject = self.subject_map[entry.subject_id]
            room = self.room_map[entry.classroom_id]
            expected_type = required_room_type(subject.type)
            if room.type != expected_type:
                conflicts.append(ConflictDetail(
                    id=f"type-{entry.id}",
                    conflict_type="room_type",
                    description=f"{subject.name} needs a {expected_type.value} room but got {room.name or room.id} ({room.type.value})",
                    severity="hard",
                    affected_entries=[entry.id]
                ))
            if room.capacity < student_count:
                conflicts.append(ConflictDetail(
                    id=f"cap-{entry.id}",
                    conflict_type="room_capacity",
                    description=f"Room {room.name or room.id} capacity ({room.capacity}) < Students ({student_count})",
                    severity="hard",
                    affected_entries=[entry.id]
                ))

        for (day, slot_id), cell_entries in entries_by_cell.items():
            n = len(cell_entries)
            for i in range(n):
                e1 = cell_entries[i]
                for j in range(i + 1, n):
                    e2 = cell_entries[j]
                    pair = [e1.id, e2.id]
                    if e1.division_id == e2.division_id:
                        conflicts.append(ConflictDetail(
                            id=f"div-{e1.id}-{e2.id}",
                            conflict_type="division_conflict",
                            description=f"Division {e1.division_id} has two lectures on {day} slot {slot_id}",
                            severity="hard",
                            affected_entries=pair
                        ))
                    if e1.instructor_id == e2.instructor_id:
                        instructor = self.instructor_map[e1.instructor_id]
                        conflicts.append(ConflictDetail(
                            id=f"ins-{e1.id}-{e2.id}",
                            conflict_type="instructor_conflict",
                            description=f"Instructor overlap for {instructor.name or instructor.id} on {day} slot {slot_id}",
                            severity="hard",
                            affected_entries=pair
                        ))
                    if e1.classroom_id == e2.classroom_id:
                        room = self.room_map[e1.classroom_id]
                        conflicts.append(ConflictDetail(
                            id=f"room-{e1.id}-{e2.id}",
                            conflict_type="room_conflict",
                            description=f"Room overlap in {room.name or room.id} on {day} slot {slot_id}",
                            severity="hard",
                            affected_entries=pair
                        ))

        conflicts.extend(self._session_conflicts(known))
        conflicts.extend(self._day_cap_conflicts(known))
        conflicts.extend(self._spacing_conflicts(known))
        return ConflictReport(conflicts=conflicts)

    def _missing_references(self, entry: TimetableEntry) -> List[str]:
        missing = []
        if entry.subject_id not in self.subject_map:
            missing.append(f"subject {entry.subject_id}")
        if entry.instructor_id not in self.instructor_map:
            missing.append(f"instructor {entry.instructor_id}")
        if entry.classroom_id not in self.room_map:
            missing.append(f"classroom {entry.classroom_id}")
        if entry.time_slot_id not in self.slot_index:
            missing.append(f"teaching slot {entry.time_slot_id}")
        return missing

    @staticmethod
    def _sessions(entries: List[TimetableEntry]) -> Dict[Tuple[str, str, str, int], List[TimetableEntry]]:
        sessions: Dict[Tuple[str, str, str, int], List[TimetableEntry]] = defaultdict(list)
        for entry in entries:
            sessions[(entry.division_id, entry.day, entry.subject_id, entry.lecture_number)].append(entry)
        return sessions

    def _session_conflicts(self, entries: List[TimetableEntry]) -> List[ConflictDetail]:
        conflicts: List[ConflictDetail] = []
        for (_, day, subject_id, lecture_number), session in self._sessions(entries).items():
            if len(session) < 2:
                continue
            ordered = sorted(session, key=lambda entry: self.slot_index[entry.time_slot_id])
            indices = [self.slot_index[entry.time_slot_id] for entry in ordered]
            broken = any(later != earlier + 1 for earlier, later in zip(indices, indices[1:]))
            if not broken:
                broken = any(
                    spans_lunch(self.teaching_slots[earlier], self.teaching_slots[later], self.lunch_slots)
                    for earlier, later in zip(indices, indices[1:])
                )
            if broken:
                subject = self.subject_map[subject_id]
                conflicts.append(ConflictDetail(
                    id=f"gap-{ordered[0].id}",
                    conflict_type="non_contiguous_session",
                    description=f"{subject.name} lecture {lecture_number} on {day} is not one contiguous block",
                    severity="hard",
                    affected_entries=[entry.id for entry in ordered]
                ))
        return conflicts

    def _day_cap_conflicts(self, entries: List[TimetableEntry]) -> List[ConflictDetail]:
        conflicts: List[ConflictDetail] = []
        sessions_by_day: Dict[Tuple[str, str], List[List[TimetableEntry]]] = defaultdict(list)
        for (division_id, day, _, _), session in self._sessions(entries).items():
            sessions_by_day[(division_id, day)].append(session)

        for (division_id, day), sessions in sessions_by_day.items():
            technical_training: List[str] = []
            lab_subjects: Dict[str, List[str]] = defaultdict(list)
            per_subject: Dict[str, List[str]] = defaultdict(list)
            for session in sessions:
                subject = self.subject_map[session[0].subject_id]
                ids = [entry.id for entry in session]
                if subject.type == SubjectType.technical_training:
                    technical_training.extend(ids)
                elif subject.type == SubjectType.lab:
                    lab_subjects[subject.id].extend(ids)
                per_subject[subject.id].append(ids[0])

            tt_sessions = sum(
                1 for session in sessions
                if self.subject_map[session[0].subject_id].type == SubjectType.technical_training
            )
            if tt_sessions > self.policy.max_technical_training_per_day:
                conflicts.append(ConflictDetail(
                    id=f"cap-tt-{division_id}-{day}",
                    conflict_type="day_cap",
                    description=f"{tt_sessions} technical training sessions on {day} for division {division_id}",
                    severity="soft",
                    affected_entries=technical_training
                ))
            if len(lab_subjects) > self.policy.max_lab_subjects_per_day:
                conflicts.append(ConflictDetail(
                    id=f"cap-lab-{division_id}-{day}",
                    conflict_type="day_cap",
                    description=f"{len(lab_subjects)} lab subjects on {day} for division {division_id}",
                    severity="soft",
                    affected_entries=[entry_id for ids in lab_subjects.values() for entry_id in ids]
                ))
            for subject_id, first_entries in per_subject.items():
                if len(first_entries) > self.policy.max_same_subject_per_day:
                    subject = self.subject_map[subject_id]
                    conflicts.append(ConflictDetail(
                        id=f"cap-subject-{division_id}-{day}-{subject_id}",
                        conflict_type="day_cap",
                        description=f"{subject.name} appears {len(first_entries)} times on {day}",
                        severity="soft",
                        affected_entries=first_entries
                    ))
        return conflicts

    def _spacing_conflicts(self, entries: List[TimetableEntry]) -> List[ConflictDetail]:
        """Neighbouring cells holding the same subject from two different lectures."""
        conflicts: List[ConflictDetail] = []
        cells: Dict[Tuple[str, str], Dict[int, List[TimetableEntry]]] = defaultdict(lambda: defaultdict(list))
        for entry in entries:
            cells[(entry.division_id, entry.day)][self.slot_index[entry.time_slot_id]].append(entry)

        for (division_id, day), by_index in cells.items():
            for index in sorted(by_index):
                for e1 in by_index[index]:
                    for e2 in by_index.get(index + 1, []):
                        if e1.subject_id != e2.subject_id or e1.lecture_number == e2.lecture_number:
                            continue
                        subject = self.subject_map[e1.subject_id]
                        conflicts.append(ConflictDetail(
                            id=f"spacing-{e1.id}-{e2.id}",
                            conflict_type="subject_spacing",
                            description=f"{subject.name} lectures {e1.lecture_number} and {e2.lecture_number} are back to back on {day} for division {division_id}",
                            severity="soft",
                            affected_entries=[e1.id, e2.id]
                        ))
        return conflicts
