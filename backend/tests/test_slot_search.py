import pytest

from lecture_scheduler.models.subject import SubjectType
from lecture_scheduler.schemas.catalog import Classroom, Instructor, Subject, TimeSlot
from lecture_scheduler.services.constraints import SearchContext
from lecture_scheduler.services.policy import SchedulingPolicy
from lecture_scheduler.services.requirements import expand_requirements
from lecture_scheduler.services.schedule_store import ScheduleStore
from lecture_scheduler.services.slot_search import SlotSearch, preferred_slot_order

ALGEBRA = Subject(id="algebra", name="Algebra", type="Theory", lectures_per_week=2)
NETWORKS_LAB = Subject(id="net-lab", name="Networks Lab", type="Lab", duration=2)
WORKSHOP = Subject(id="workshop", name="Workshop", type="Technical training", duration=2)
FILLER = Subject(id="filler", name="Seminar", type="Theory")

PROF = Instructor(id="f1", name="Prof A", subjects=("algebra", "net-lab", "workshop"))
SECOND_PROF = Instructor(id="f2", name="Prof B", subjects=("algebra",))
THEORY_ROOM = Classroom(id="r1", name="Room 1", type="Theory", capacity=60)
LAB_ROOM = Classroom(id="lab1", name="Lab 1", type="Lab", capacity=60)
TT_ROOM = Classroom(id="hall", name="Hall", type="Technical training", capacity=60)


def build_search(slots, *, days=("Monday", "Tuesday", "Wednesday"), instructors=None, classrooms=None, student_count=40):
    teaching = tuple(slot for slot in slots if not slot.is_lunch)
    lunch = tuple(slot for slot in slots if slot.is_lunch)
    policy = SchedulingPolicy(working_days=days)
    context = SearchContext(
        store=ScheduleStore(days, teaching),
        teaching_slots=teaching,
        lunch_slots=lunch,
        policy=policy,
    )
    return SlotSearch(
        context=context,
        instructors=instructors if instructors is not None else [PROF, SECOND_PROF],
        classrooms=classrooms if classrooms is not None else [THEORY_ROOM, LAB_ROOM, TT_ROOM],
        student_count=student_count,
    )


def commit(search, placement, subject):
    search.context.store.occupy(
        placement.day,
        placement.time_slots,
        instructor=placement.instructor,
        classroom=placement.classroom,
        subject=subject,
    )


@pytest.mark.parametrize(
    "total, expected",
    [
        (8, [4, 5, 0, 1, 2, 3, 6, 7]),
        (5, [4, 0, 1, 2, 3]),
        (4, [0, 1, 2, 3]),
    ],
)
def test_technical_training_prefers_mid_day_starts(total, expected):
    assert preferred_slot_order(SubjectType.technical_training, total) == expected


def test_negative_preferred_starts_are_ignored():
    assert preferred_slot_order(SubjectType.technical_training, 4, (-1, 2)) == [2, 0, 1, 3]


def test_other_types_use_natural_order():
    assert preferred_slot_order(SubjectType.theory, 6) == [0, 1, 2, 3, 4, 5]
    assert preferred_slot_order(SubjectType.lab, 3) == [0, 1, 2]


def test_first_fit_takes_first_day_and_slot(standard_slots):
    search = build_search(standard_slots)
    placement = search.find_placement(expand_requirements([ALGEBRA])[0])

    assert placement.day == "Monday"
    assert [slot.id for slot in placement.time_slots] == ["1"]
    assert placement.instructor == PROF
    assert placement.classroom == THEORY_ROOM


def test_technical_training_lands_on_preferred_slots(standard_slots):
    search = build_search(standard_slots)
    placement = search.find_placement(expand_requirements([WORKSHOP])[0])

    assert placement.day == "Monday"
    assert [slot.id for slot in placement.time_slots] == ["6", "7"]
    assert placement.classroom == TT_ROOM


def test_repeat_lecture_skips_adjacent_slot(standard_slots):
    search = build_search(standard_slots)
    first, second = expand_requirements([ALGEBRA])

    commit(search, search.find_placement(first), ALGEBRA)
    placement = search.find_placement(second)

    assert placement.day == "Monday"
    assert [slot.id for slot in placement.time_slots] == ["3"]


def test_lab_skips_day_whose_only_free_pair_straddles_lunch(standard_slots):
    search = build_search(standard_slots, instructors=[PROF], classrooms=[THEORY_ROOM, LAB_ROOM])
    teaching = search.context.teaching_slots
    other_prof = Instructor(id="f9", name="Prof Z", subjects=("filler",))
    # Leave only slots 4 (11:40) and 6 (13:10) free on Monday.
    for index in (0, 1, 2, 5, 6, 7):
        search.context.store.occupy(
            "Monday", [teaching[index]], instructor=other_prof, classroom=THEORY_ROOM, subject=FILLER
        )

    placement = search.find_placement(expand_requirements([NETWORKS_LAB])[0])

    assert placement.day == "Tuesday"
    assert [slot.id for slot in placement.time_slots] == ["1", "2"]


def test_lab_without_contiguous_pair_is_not_placed():
    slots = [
        TimeSlot(id="am", start_time="09:00", end_time="10:00"),
        TimeSlot(id="lunch", start_time="10:00", end_time="11:00", is_lunch=True),
        TimeSlot(id="pm", start_time="11:00", end_time="12:00"),
    ]
    search = build_search(slots)

    assert search.find_placement(expand_requirements([NETWORKS_LAB])[0]) is None
    assert search.context.store.occupied_count() == 0


def test_duration_longer_than_the_day_fails_fast(standard_slots):
    marathon = Subject(id="net-lab", name="Networks Lab", type="Lab", duration=9)
    search = build_search(standard_slots)

    assert search.find_placement(expand_requirements([marathon])[0]) is None


def test_missing_instructor_or_room_fails_fast(standard_slots):
    requirement = expand_requirements([ALGEBRA])[0]

    assert build_search(standard_slots, instructors=[]).find_placement(requirement) is None
    assert build_search(standard_slots, classrooms=[LAB_ROOM]).find_placement(requirement) is None
    assert build_search(standard_slots, student_count=61).find_placement(requirement) is None


def test_instructor_availability_is_checked_per_slot(standard_slots):
    search = build_search(standard_slots, classrooms=[THEORY_ROOM, Classroom(id="r2", type="Theory", capacity=60)])
    teaching = search.context.teaching_slots
    search.context.store.occupy(
        "Monday", [teaching[0]], instructor=PROF, classroom=THEORY_ROOM, subject=FILLER
    )

    placement = search.find_placement(expand_requirements([ALGEBRA])[0])

    # Slot 1 holds f1, but f1 is free again at slot 2 the same day.
    assert [slot.id for slot in placement.time_slots] == ["2"]
    assert placement.instructor == PROF


def test_failed_search_leaves_store_untouched(standard_slots):
    search = build_search(standard_slots, days=("Monday",), classrooms=[THEORY_ROOM])
    teaching = search.context.teaching_slots
    for slot in teaching:
        search.context.store.occupy("Monday", [slot], instructor=SECOND_PROF, classroom=THEORY_ROOM, subject=FILLER)
    before = search.context.store.occupied_count()

    assert search.find_placement(expand_requirements([ALGEBRA])[0]) is None
    assert search.context.store.occupied_count() == before
