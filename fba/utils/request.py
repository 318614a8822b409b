# fba/utils/request.py

"""
요청에서 클라이언트 정보를 추출하는 헬퍼입니다.

- client_ip: X-Forwarded-For 의 첫 번째 공인 IP → X-Real-IP → 소켓 peer 주소
- parse_user_agent: User-Agent 문자열에서 OS / 브라우저 / 기기 종류를 판별
"""

import ipaddress
from dataclasses import dataclass
from typing import Optional

from starlette.requests import Request

UNKNOWN = "Unknown"


def _is_public(value: str) -> bool:
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        return False
    return not (address.is_private or address.is_loopback or address.is_link_local
                or address.is_reserved or address.is_unspecified)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        for candidate in (part.strip() for part in forwarded.split(",")):
            if _is_public(candidate):
                return candidate
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN


@dataclass(frozen=True)
class UserAgentInfo:
    user_agent: str
    os: str
    browser: str
    device: str


# 순서가 중요합니다. (예: Edge/Opera UA 에는 Chrome 이, Chrome UA 에는 Safari 가 포함됨)
_OS_MARKERS = (
    ("Windows", "Windows"),
    ("Android", "Android"),
    ("iPhone", "iOS"),
    ("iPad", "iOS"),
    ("Mac OS X", "macOS"),
    ("Linux", "Linux"),
)
_BROWSER_MARKERS = (
    ("Edg/", "Edge"),
    ("OPR/", "Opera"),
    ("Firefox/", "Firefox"),
    ("Chrome/", "Chrome"),
    ("Safari/", "Safari"),
    ("curl/", "curl"),
    ("python-httpx", "httpx"),
    ("PostmanRuntime", "Postman"),
)


def _match(user_agent: str, markers) -> Optional[str]:
    for marker, name in markers:
        if marker in user_agent:
            return name
    return None


def parse_user_agent(user_agent: Optional[str]) -> UserAgentInfo:
    ua = user_agent or ""
    if any(marker in ua for marker in ("iPad", "Tablet")):
        device = "Tablet"
    elif any(marker in ua for marker in ("Mobile", "iPhone", "Android")):
        device = "Mobile"
    elif _match(ua, _OS_MARKERS):
        device = "PC"
    else:
        device = UNKNOWN
    return UserAgentInfo(
        user_agent=ua,
        os=_match(ua, _OS_MARKERS) or UNKNOWN,
        browser=_match(ua, _BROWSER_MARKERS) or UNKNOWN,
        device=device,
    )
