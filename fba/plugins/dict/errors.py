# fba/plugins/dict/errors.py

from fba.core.exceptions import AlreadyExistsError, DatabaseError, NotFoundError, OperationFailedError


class DictTypeNotFoundError(NotFoundError):
    default_message = "字典类型不存在"


class DictDataNotFoundError(NotFoundError):
    default_message = "字典数据不存在"


class DictCodeExistsError(AlreadyExistsError):
    def __init__(self, code: str):
        super().__init__(f"字典编码 {code} 已存在")


class DictTypeInUseError(OperationFailedError):
    default_message = "存在关联的字典数据，无法删除"


__all__ = [
    "DatabaseError",
    "DictTypeNotFoundError",
    "DictDataNotFoundError",
    "DictCodeExistsError",
    "DictTypeInUseError",
]
