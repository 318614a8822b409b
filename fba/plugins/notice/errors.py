# fba/plugins/notice/errors.py

from fba.core.exceptions import DatabaseError, NotFoundError


class NoticeNotFoundError(NotFoundError):
    default_message = "通知公告不存在"


__all__ = ["DatabaseError", "NoticeNotFoundError"]
