# fba/plugins/code_generator/errors.py

from fba.core.exceptions import AlreadyExistsError, DatabaseError, NotFoundError


class BusinessNotFoundError(NotFoundError):
    default_message = "业务不存在"


class TableNotFoundError(NotFoundError):
    default_message = "数据库表不存在"


class BusinessExistsError(AlreadyExistsError):
    default_message = "已存在相同数据库表业务"


__all__ = ["DatabaseError", "BusinessNotFoundError", "TableNotFoundError", "BusinessExistsError"]
