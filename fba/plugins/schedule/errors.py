# fba/plugins/schedule/errors.py

from fba.core.exceptions import DatabaseError, NotFoundError


class ScheduleJobNotFoundError(NotFoundError):
    default_message = "定时任务不存在"


__all__ = ["DatabaseError", "ScheduleJobNotFoundError"]
