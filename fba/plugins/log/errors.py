# fba/plugins/log/errors.py

from fba.core.exceptions import DatabaseError, NotFoundError, PermissionDeniedError


class LogNotFoundError(NotFoundError):
    default_message = "日志不存在"


__all__ = ["DatabaseError", "LogNotFoundError", "PermissionDeniedError"]
