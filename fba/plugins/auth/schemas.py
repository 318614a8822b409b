# fba/plugins/auth/schemas.py

"""
'auth' 플러그인의 요청/응답 스키마입니다.
"""

from typing import Annotated, List

from sqlmodel import SQLModel

from fba.core.validators import length
from fba.plugins.system.schemas import UserRead


class LoginRequest(SQLModel):
    username: Annotated[str, length(1, 32, "用户名长度必须在1-32之间")]
    password: Annotated[str, length(1, 64, "密码长度必须在1-64之间")]


class RefreshRequest(SQLModel):
    refresh_token: Annotated[str, length(1, 4096, "刷新令牌不能为空")]


class TokenPair(SQLModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class AccessToken(SQLModel):
    """Swagger UI(OAuth2 password flow) 용 토큰 응답."""
    access_token: str
    token_type: str = "bearer"


class LoginResult(TokenPair):
    user: UserRead


class CurrentUserInfo(SQLModel):
    user: UserRead
    roles: List[str]
    codes: List[str]
