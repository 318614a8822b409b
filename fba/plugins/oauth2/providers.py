# fba/plugins/oauth2/providers.py

"""
지원하는 OAuth2 공급자 (github, google, linux-do) 의 엔드포인트와 사용자 정보 변환입니다.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

from .schemas import OAuthUserInfo


def _github_user(data: Dict[str, Any]) -> OAuthUserInfo:
    return OAuthUserInfo(
        provider="github",
        provider_user_id=str(data.get("id", "")),
        username=data.get("login") or "",
        email=data.get("email"),
        avatar_url=data.get("avatar_url"),
    )


def _google_user(data: Dict[str, Any]) -> OAuthUserInfo:
    return OAuthUserInfo(
        provider="google",
        provider_user_id=str(data.get("id", "")),
        username=data.get("name") or data.get("email") or "",
        email=data.get("email"),
        avatar_url=data.get("picture"),
    )


def _linux_do_user(data: Dict[str, Any]) -> OAuthUserInfo:
    return OAuthUserInfo(
        provider="linux-do",
        provider_user_id=str(data.get("id", "")),
        username=data.get("username") or data.get("name") or "",
        email=data.get("email"),
        avatar_url=data.get("avatar_url"),
    )


@dataclass(frozen=True)
class ProviderEndpoints:
    name: str
    authorize_url: str
    token_url: str
    userinfo_url: str
    scopes: Tuple[str, ...]
    parse_user: Callable[[Dict[str, Any]], OAuthUserInfo]


PROVIDERS: Dict[str, ProviderEndpoints] = {
    "github": ProviderEndpoints(
        name="github",
        authorize_url="https://github.com/login/oauth/authorize",
        token_url="https://github.com/login/oauth/access_token",
        userinfo_url="https://api.github.com/user",
        scopes=("user:email",),
        parse_user=_github_user,
    ),
    "google": ProviderEndpoints(
        name="google",
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        token_url="https://oauth2.googleapis.com/token",
        userinfo_url="https://www.googleapis.com/oauth2/v2/userinfo",
        scopes=("openid", "email", "profile"),
        parse_user=_google_user,
    ),
    "linux-do": ProviderEndpoints(
        name="linux-do",
        authorize_url="https://connect.linux.do/oauth2/authorize",
        token_url="https://connect.linux.do/oauth2/token",
        userinfo_url="https://connect.linux.do/api/user",
        scopes=("read",),
        parse_user=_linux_do_user,
    ),
}
