# fba/plugins/data_scope/errors.py

from fba.core.exceptions import AlreadyExistsError, DatabaseError, NotFoundError, ValidationFailedError


class DataRuleNotFoundError(NotFoundError):
    default_message = "数据规则不存在"


class DataScopeNotFoundError(NotFoundError):
    default_message = "数据范围不存在"


class DataRuleNameExistsError(AlreadyExistsError):
    def __init__(self, name: str):
        super().__init__(f"数据规则 {name} 已存在")


class DataScopeNameExistsError(AlreadyExistsError):
    def __init__(self, name: str):
        super().__init__(f"数据范围 {name} 已存在")


class DataRuleTargetError(ValidationFailedError):
    """규칙이 가리키는 모델이나 컬럼이 필터 대상이 아닐 때."""


__all__ = [
    "DatabaseError",
    "DataRuleNotFoundError",
    "DataScopeNotFoundError",
    "DataRuleNameExistsError",
    "DataScopeNameExistsError",
    "DataRuleTargetError",
]
