from enum import Enum


class SubjectType(str, Enum):
    theory = "Theory"
    lab = "Lab"
    technical_training = "Technical training"


# Lower values are placed first.
SUBJECT_TYPE_PRIORITY: dict[SubjectType, int] = {
    SubjectType.technical_training: 0,
    SubjectType.lab: 1,
    SubjectType.theory: 2,
}
