# fba/plugins/system/errors.py

"""'system' 플러그인의 오류 종류."""

from fba.core.exceptions import (
    AlreadyExistsError, DatabaseError, NotFoundError, OperationFailedError, PermissionDeniedError,
)


class UserNotFoundError(NotFoundError):
    default_message = "用户不存在"


class RoleNotFoundError(NotFoundError):
    default_message = "角色不存在"


class PermissionNotFoundError(NotFoundError):
    default_message = "权限不存在"


class DeptNotFoundError(NotFoundError):
    default_message = "部门不存在"


class UsernameExistsError(AlreadyExistsError):
    def __init__(self, username: str):
        super().__init__(f"用户名 {username} 已存在")


class RoleCodeExistsError(AlreadyExistsError):
    def __init__(self, code: str):
        super().__init__(f"角色编码 {code} 已存在")


class PermissionCodeExistsError(AlreadyExistsError):
    def __init__(self, code: str):
        super().__init__(f"权限编码 {code} 已存在")


class DeptInUseError(OperationFailedError):
    """하위 부서나 소속 사용자가 있는 부서는 삭제할 수 없습니다."""


class PasswordMismatchError(OperationFailedError):
    default_message = "旧密码错误"


__all__ = [
    "DatabaseError",
    "PermissionDeniedError",
    "OperationFailedError",
    "UserNotFoundError",
    "RoleNotFoundError",
    "PermissionNotFoundError",
    "DeptNotFoundError",
    "UsernameExistsError",
    "RoleCodeExistsError",
    "PermissionCodeExistsError",
    "DeptInUseError",
    "PasswordMismatchError",
]
