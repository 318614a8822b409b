# fba/plugins/config/errors.py

from fba.core.exceptions import AlreadyExistsError, DatabaseError, NotFoundError


class ConfigNotFoundError(NotFoundError):
    default_message = "配置不存在"


class ConfigKeyNotFoundError(NotFoundError):
    def __init__(self, key: str):
        super().__init__(f"配置键 {key} 不存在")


class ConfigKeyExistsError(AlreadyExistsError):
    def __init__(self, key: str):
        super().__init__(f"配置键 {key} 已存在")


__all__ = ["DatabaseError", "ConfigNotFoundError", "ConfigKeyNotFoundError", "ConfigKeyExistsError"]
