# fba/plugins/auth/errors.py

"""'auth' 플러그인의 오류 종류."""

from fba.core.exceptions import OperationFailedError, PermissionDeniedError


class InvalidCredentialsError(OperationFailedError):
    default_message = "用户名或密码错误"


class UserDisabledError(OperationFailedError):
    default_message = "用户已被禁用"


__all__ = ["InvalidCredentialsError", "UserDisabledError", "PermissionDeniedError"]
