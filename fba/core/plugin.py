# fba/core/plugin.py

"""
플러그인 계약(Plugin Contract)을 정의하는 모듈입니다.

플러그인은 자기 완결적인 기능 묶음으로 다음을 노출합니다.

- info(): 이름/버전/설명/작성자 (PluginInfo)
- mount: Extension(관리자 네임스페이스 /sys 아래 leaf 경로) 또는
  Independent(버전 접두사 바로 아래 자기 세그먼트)
- requires: 호스트가 제공해야 하는 핸들 (캐시, SMTP, OAuth2, 저장소)
- create_router(state): 아직 마운트되지 않은 자기 서브트리 라우터

플러그인은 프로세스 전역 상태를 읽지 않습니다. 필요한 모든 것은 PluginState 로 받습니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, AsyncGenerator, FrozenSet, List, Optional, Tuple

import httpx
from fastapi import APIRouter
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.database import SessionFactory
from fba.core.security import Authenticator


# =============================================================================
# 1. 메타데이터 / 마운트 방식 / 요구 핸들
# =============================================================================
@dataclass(frozen=True)
class PluginInfo:
    name: str
    version: str
    description: str
    author: str


class MountKind(str, Enum):
    EXTENSION = "extension"
    INDEPENDENT = "independent"


@dataclass(frozen=True)
class PluginMount:
    """
    플러그인 라우터가 호스트 트리에 붙는 방식입니다.
    Extension 은 leaf 세그먼트 여러 개를 가질 수 있습니다 (예: dict-types, dict-datas).
    """
    kind: MountKind
    segments: Tuple[str, ...]

    @classmethod
    def extension(cls, *leaves: str) -> "PluginMount":
        if not leaves:
            raise ValueError("extension mount needs at least one leaf segment")
        return cls(MountKind.EXTENSION, tuple(leaf.strip("/") for leaf in leaves))

    @classmethod
    def independent(cls, segment: str) -> "PluginMount":
        return cls(MountKind.INDEPENDENT, (segment.strip("/"),))


class Requirement(str, Enum):
    """호스트가 제공해야 하는 선택적 핸들. 데이터베이스는 항상 제공됩니다."""
    CACHE = "cache"
    SMTP = "smtp"
    OAUTH2 = "oauth2"
    STORAGE = "storage"


# =============================================================================
# 2. 제3자 설정 레코드
# =============================================================================
@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int
    username: Optional[str]
    password: Optional[str]
    sender: str
    use_tls: bool = True


@dataclass(frozen=True)
class OAuth2Client:
    client_id: str
    client_secret: str
    redirect_uri: str


@dataclass(frozen=True)
class OAuth2Config:
    """공급자 이름(github, google, linux-do) → 클라이언트 레코드."""
    clients: Tuple[Tuple[str, OAuth2Client], ...]

    def get(self, provider: str) -> Optional[OAuth2Client]:
        return dict(self.clients).get(provider)

    @property
    def providers(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.clients)


# =============================================================================
# 3. 플러그인 상태 (호스트 핸들의 복사본)
# =============================================================================
@dataclass(frozen=True)
class MountedPlugin:
    """조립이 끝난 플러그인의 공개 정보 (plugins 목록 API 용)."""
    info: PluginInfo
    kind: MountKind
    paths: Tuple[str, ...]


@dataclass
class PluginState:
    db: SessionFactory
    auth: Authenticator
    cache: Optional[Any] = None
    smtp: Optional[SmtpConfig] = None
    oauth2: Optional[OAuth2Config] = None
    http: Optional[httpx.AsyncClient] = None
    upload_dir: Optional[Path] = None
    upload_max_size: int = 10 * 1024 * 1024
    # 호스트가 조립 순서대로 채우는 공유 목록 (모든 상태가 같은 리스트를 참조)
    registry: List[MountedPlugin] = field(default_factory=list)

    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        FastAPI 의존성: 요청마다 새 세션을 열고 처리 후 닫습니다.
        커밋되지 않은 변경(취소된 요청 포함)은 닫힐 때 롤백됩니다.
        """
        async with self.db() as session:
            yield session


# =============================================================================
# 4. 플러그인 기반 클래스
# =============================================================================
class Plugin:
    """모든 플러그인의 기반 클래스. 하위 클래스는 INFO/MOUNT 를 선언합니다."""
    INFO: PluginInfo
    MOUNT: PluginMount
    REQUIRES: FrozenSet[Requirement] = frozenset()

    def info(self) -> PluginInfo:
        return self.INFO

    @property
    def name(self) -> str:
        return self.INFO.name

    @property
    def mount(self) -> PluginMount:
        return self.MOUNT

    @property
    def requires(self) -> FrozenSet[Requirement]:
        return self.REQUIRES

    def create_router(self, state: PluginState) -> APIRouter:
        raise NotImplementedError
