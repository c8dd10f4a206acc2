from fastapi import Depends

from lecture_scheduler.core.config import Settings, get_settings
from lecture_scheduler.services.policy import SchedulingPolicy


def get_scheduling_policy(settings: Settings = Depends(get_settings)) -> SchedulingPolicy:
    return SchedulingPolicy.from_settings(settings)
