import pytest
from fastapi.testclient import TestClient

from lecture_scheduler.main import app
from lecture_scheduler.schemas.catalog import CatalogSnapshot, TimeSlot


STANDARD_DAY = [
    # Morning: four 50 minute periods
    {"id": "1", "startTime": "09:10", "endTime": "10:00", "isLunch": False},
    {"id": "2", "startTime": "10:00", "endTime": "10:50", "isLunch": False},
    {"id": "3", "startTime": "10:50", "endTime": "11:40", "isLunch": False},
    {"id": "4", "startTime": "11:40", "endTime": "12:30", "isLunch": False},
    # Lunch
    {"id": "5", "startTime": "12:30", "endTime": "13:10", "isLunch": True},
    # Afternoon
    {"id": "6", "startTime": "13:10", "endTime": "14:00", "isLunch": False},
    {"id": "7", "startTime": "14:00", "endTime": "14:50", "isLunch": False},
    {"id": "8", "startTime": "14:50", "endTime": "15:40", "isLunch": False},
    {"id": "9", "startTime": "15:40", "endTime": "16:30", "isLunch": False},
]


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def standard_day():
    return [dict(slot) for slot in STANDARD_DAY]


@pytest.fixture()
def standard_slots(standard_day):
    return [TimeSlot.model_validate(slot) for slot in standard_day]


@pytest.fixture()
def campus_payload(standard_day):
    """A realistic division with every subject type and enough resources."""
    return {
        "subjects": [
            {"id": "math", "name": "Mathematics", "code": "MA101", "type": "Theory", "lecturesPerWeek": 4, "duration": 1},
            {"id": "phy", "name": "Physics", "code": "PH101", "type": "Theory", "lecturesPerWeek": 3, "duration": 1},
            {"id": "chem", "name": "Chemistry", "code": "CH101", "type": "Theory", "lecturesPerWeek": 3, "duration": 1},
            {"id": "ds-lab", "name": "Data Structures Lab", "code": "CS151", "type": "Lab", "lecturesPerWeek": 2, "duration": 2},
            {"id": "phy-lab", "name": "Physics Lab", "code": "PH151", "type": "Lab", "lecturesPerWeek": 1, "duration": 2},
            {"id": "chem-lab", "name": "Chemistry Lab", "code": "CH151", "type": "Lab", "lecturesPerWeek": 1, "duration": 2},
            {"id": "training", "name": "Aptitude Training", "code": "TT101", "type": "Technical training", "lecturesPerWeek": 2, "duration": 2},
        ],
        "classrooms": [
            {"id": "lh-101", "name": "LH-101", "type": "Theory", "capacity": 70},
            {"id": "lh-102", "name": "LH-102", "type": "Theory", "capacity": 40},
            {"id": "lab-a", "name": "Lab A", "type": "Lab", "capacity": 60},
            {"id": "lab-b", "name": "Lab B", "type": "Lab", "capacity": 60},
            {"id": "tt-hall", "name": "Training Hall", "type": "Technical training", "capacity": 80},
        ],
        "instructors": [
            {"id": "f-math", "name": "Prof Rao", "subjects": ["math"]},
            {"id": "f-sci", "name": "Prof Iyer", "subjects": ["phy", "phy-lab", "chem"]},
            {"id": "f-chem", "name": "Prof Shah", "subjects": ["chem", "chem-lab"]},
            {"id": "f-cs", "name": "Prof Das", "subjects": ["ds-lab", "training"]},
        ],
        "divisions": [
            {"id": "cs-a", "name": "CS-A", "studentCount": 60, "subjects": ["math", "phy", "chem", "ds-lab", "phy-lab", "chem-lab", "training"]},
            {"id": "empty", "name": "Empty", "studentCount": 30, "subjects": ["retired-subject"]},
        ],
        "timeSlots": standard_day,
    }


@pytest.fixture()
def campus_catalog(campus_payload):
    return CatalogSnapshot.model_validate(campus_payload)
