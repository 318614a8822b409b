# fba/plugins/oauth2/services.py

"""
OAuth2 인가 코드 흐름 (authorize URL 생성, 토큰 교환, 사용자 정보 조회) 입니다.
상위 공급자 호출은 호스트가 공유하는 httpx.AsyncClient 로 수행하며,
실패는 상위 상태 코드를 담은 UpstreamApiFailure(502) 로 바뀝니다.
"""

import logging
import secrets
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

import httpx

from fba.core.plugin import OAuth2Client, OAuth2Config

from . import errors as oauth_errors
from .providers import PROVIDERS, ProviderEndpoints
from .schemas import OAuthUserInfo

logger = logging.getLogger(__name__)


def resolve_provider(config: OAuth2Config, provider: str) -> Tuple[ProviderEndpoints, OAuth2Client]:
    endpoints = PROVIDERS.get(provider)
    client = config.get(provider)
    if endpoints is None or client is None:
        raise oauth_errors.UnsupportedProviderError(provider)
    return endpoints, client


def build_authorize_url(endpoints: ProviderEndpoints, client: OAuth2Client) -> Tuple[str, str]:
    """(인가 URL, state). state 는 요청마다 새로 만듭니다."""
    state = secrets.token_urlsafe(16)
    query = urlencode({
        "client_id": client.client_id,
        "redirect_uri": client.redirect_uri,
        "response_type": "code",
        "scope": " ".join(endpoints.scopes),
        "state": state,
    })
    return f"{endpoints.authorize_url}?{query}", state


async def _request_json(http: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
    try:
        response = await http.request(method, url, **kwargs)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning("OAuth2 upstream %s %s returned %s", method, url, e.response.status_code)
        raise oauth_errors.OAuthUpstreamError(
            f"OAuth2 上游请求失败: {e.response.text[:200]}", upstream_status=e.response.status_code,
        )
    except httpx.RequestError as e:
        logger.warning("OAuth2 upstream %s %s failed: %s", method, url, e)
        raise oauth_errors.OAuthUpstreamError(f"OAuth2 上游请求失败: {e}")
    try:
        return response.json()
    except ValueError:
        raise oauth_errors.OAuthUpstreamError("OAuth2 上游响应格式错误", upstream_status=response.status_code)


async def exchange_code(
    http: httpx.AsyncClient, endpoints: ProviderEndpoints, client: OAuth2Client, code: str,
    redirect_uri: Optional[str] = None,
) -> Dict[str, Any]:
    """인가 코드를 토큰 응답(JSON)으로 교환합니다."""
    payload = await _request_json(
        http, "POST", endpoints.token_url,
        data={
            "client_id": client.client_id,
            "client_secret": client.client_secret,
            "code": code,
            "redirect_uri": redirect_uri or client.redirect_uri,
            "grant_type": "authorization_code",
        },
        headers={"Accept": "application/json"},
    )
    if not payload.get("access_token"):
        # GitHub 는 잘못된 코드에도 200 과 error 필드를 돌려줍니다.
        detail = payload.get("error_description") or payload.get("error") or "missing access_token"
        raise oauth_errors.OAuthUpstreamError(f"OAuth2 上游请求失败: {detail}")
    return payload


async def fetch_user(http: httpx.AsyncClient, endpoints: ProviderEndpoints, access_token: str) -> Tuple[OAuthUserInfo, Dict[str, Any]]:
    data = await _request_json(
        http, "GET", endpoints.userinfo_url,
        headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
    )
    return endpoints.parse_user(data), data
