# fba/plugins/oauth2/errors.py

from fba.core.exceptions import (
    AlreadyExistsError, DatabaseError, NotFoundError, OperationFailedError, UpstreamApiError,
)


class UnsupportedProviderError(OperationFailedError):
    def __init__(self, provider: str):
        super().__init__(f"不支持的OAuth提供商: {provider}")


class BindingNotFoundError(NotFoundError):
    default_message = "绑定不存在"


class AccountBoundElsewhereError(AlreadyExistsError):
    default_message = "该第三方账号已绑定其他用户"


class OAuthUpstreamError(UpstreamApiError):
    default_message = "OAuth2 上游请求失败"


__all__ = [
    "DatabaseError",
    "UnsupportedProviderError",
    "BindingNotFoundError",
    "AccountBoundElsewhereError",
    "OAuthUpstreamError",
]
