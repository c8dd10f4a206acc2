from enum import Enum

from lecture_scheduler.models.subject import SubjectType


class RoomType(str, Enum):
    theory = "Theory"
    lab = "Lab"
    technical_training = "Technical training"


ROOM_TYPE_BY_SUBJECT_TYPE: dict[SubjectType, RoomType] = {
    SubjectType.theory: RoomType.theory,
    SubjectType.lab: RoomType.lab,
    SubjectType.technical_training: RoomType.technical_training,
}


def required_room_type(subject_type: SubjectType) -> RoomType:
    return ROOM_TYPE_BY_SUBJECT_TYPE.get(subject_type, RoomType.theory)
