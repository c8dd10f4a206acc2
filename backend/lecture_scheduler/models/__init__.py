from lecture_scheduler.models.room import ROOM_TYPE_BY_SUBJECT_TYPE, RoomType, required_room_type  # noqa: F401
from lecture_scheduler.models.subject import SUBJECT_TYPE_PRIORITY, SubjectType  # noqa: F401
