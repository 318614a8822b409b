# fba/plugins/menu/errors.py

from fba.core.exceptions import DatabaseError, NotFoundError, OperationFailedError


class MenuNotFoundError(NotFoundError):
    default_message = "菜单不存在"


class MenuInUseError(OperationFailedError):
    default_message = "存在子菜单，无法删除"


__all__ = ["DatabaseError", "MenuNotFoundError", "MenuInUseError", "OperationFailedError"]
