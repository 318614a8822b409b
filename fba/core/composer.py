# fba/core/composer.py

"""
호스트 조립기(Host Composer): 등록된 플러그인을 하나의 API 트리로 조립합니다.

알고리즘
1. 설정된 API 접두사(기본 /api/v1)에 최상위 라우터를 만듭니다.
2. 등록 순서대로 각 플러그인에 대해
   a. 선언한 요구 핸들이 호스트에 있는지 확인하고, 없으면 플러그인 이름과 빠진
      핸들을 명시한 PluginCompositionError 로 기동을 중단합니다.
   b. 호스트 핸들을 복사해 PluginState 를 만듭니다.
   c. plugin.create_router(state) 를 호출합니다.
   d. Extension 은 관리자 네임스페이스(/sys) 아래, Independent 는 자기 세그먼트 아래에
      붙입니다.
3. 두 플러그인이 같은 절대 경로를 차지하면 기동 오류입니다.

미들웨어 설치는 create_app(fba.main)이 조립된 트리 전체에 대해 수행합니다.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import httpx
from fastapi import APIRouter
from fastapi.routing import APIRoute

from fba import ADMIN_NAMESPACE, API_PREFIX
from fba.core.database import SessionFactory
from fba.core.plugin import (
    MountKind, MountedPlugin, OAuth2Config, Plugin, PluginState, Requirement, SmtpConfig,
)
from fba.core.security import Authenticator

logger = logging.getLogger(__name__)


class PluginCompositionError(RuntimeError):
    """플러그인 조립 실패 (기동 오류)."""


@dataclass
class HostHandles:
    """호스트가 기동 시 한 번 만들어 모든 플러그인 상태에 복사해 주는 공유 핸들."""
    db: SessionFactory
    auth: Authenticator
    cache: Optional[Any] = None
    smtp: Optional[SmtpConfig] = None
    oauth2: Optional[OAuth2Config] = None
    http: Optional[httpx.AsyncClient] = None
    upload_dir: Optional[Path] = None
    upload_max_size: int = 10 * 1024 * 1024

    def provides(self, requirement: Requirement) -> bool:
        handle = {
            Requirement.CACHE: self.cache,
            Requirement.SMTP: self.smtp,
            Requirement.OAUTH2: self.oauth2,
            Requirement.STORAGE: self.upload_dir,
        }[requirement]
        return handle is not None


def check_requirements(plugin: Plugin, handles: HostHandles) -> None:
    missing = sorted(req.value for req in plugin.requires if not handles.provides(req))
    if missing:
        raise PluginCompositionError(
            f"plugin '{plugin.name}' requires handle(s) {', '.join(repr(m) for m in missing)} "
            f"which the host was not configured with"
        )


def build_state(handles: HostHandles, registry: List[MountedPlugin]) -> PluginState:
    return PluginState(
        db=handles.db,
        auth=handles.auth,
        cache=handles.cache,
        smtp=handles.smtp,
        oauth2=handles.oauth2,
        http=handles.http,
        upload_dir=handles.upload_dir,
        upload_max_size=handles.upload_max_size,
        registry=registry,
    )


def _route_keys(router: APIRouter, base: str) -> Iterable[Tuple[str, str]]:
    for route in router.routes:
        if isinstance(route, APIRoute):
            for method in sorted(route.methods or ()):
                yield method, base + route.path


def _verify_leaf_routes(plugin: Plugin, router: APIRouter) -> None:
    """Extension 플러그인의 모든 경로는 선언한 leaf 세그먼트 아래에 있어야 합니다."""
    leaves = tuple(f"/{leaf}" for leaf in plugin.mount.segments)
    for route in router.routes:
        path = getattr(route, "path", "")
        if not any(path == leaf or path.startswith(leaf + "/") for leaf in leaves):
            raise PluginCompositionError(
                f"plugin '{plugin.name}' exposes route '{path}' outside its declared leaves {list(leaves)}"
            )


def compose_plugins(
    plugins: Iterable[Plugin],
    handles: HostHandles,
    *,
    prefix: str = API_PREFIX,
    admin_namespace: str = ADMIN_NAMESPACE,
) -> Tuple[APIRouter, List[MountedPlugin]]:
    """플러그인을 등록 순서대로 조립한 최상위 라우터와 조립 목록을 돌려줍니다."""
    api_router = APIRouter(prefix=prefix)
    registry: List[MountedPlugin] = []
    names: Set[str] = set()
    claimed: Dict[str, str] = {}            # 절대 마운트 경로 → 플러그인 이름
    routes: Dict[Tuple[str, str], str] = {}  # (메서드, 절대 경로) → 플러그인 이름

    for plugin in plugins:
        # a. 이름 중복 / 요구 핸들 확인
        if plugin.name in names:
            raise PluginCompositionError(f"plugin '{plugin.name}' registered twice")
        names.add(plugin.name)
        check_requirements(plugin, handles)

        # 마운트 경로 선점 확인
        if plugin.mount.kind is MountKind.EXTENSION:
            base = admin_namespace
            paths = tuple(f"{prefix}{admin_namespace}/{leaf}" for leaf in plugin.mount.segments)
        else:
            base = f"/{plugin.mount.segments[0]}"
            paths = (f"{prefix}{base}",)
            if base == admin_namespace:
                raise PluginCompositionError(
                    f"plugin '{plugin.name}' cannot mount independently on the admin namespace '{base}'"
                )
        for path in paths:
            if path in claimed:
                raise PluginCompositionError(
                    f"plugin '{plugin.name}' mounts '{path}' already mounted by plugin '{claimed[path]}'"
                )
            claimed[path] = plugin.name

        # b, c. 상태 생성 후 라우터 생성
        state = build_state(handles, registry)
        router = plugin.create_router(state)
        if plugin.mount.kind is MountKind.EXTENSION:
            _verify_leaf_routes(plugin, router)

        for key in _route_keys(router, prefix + base):
            if key in routes:
                raise PluginCompositionError(
                    f"plugin '{plugin.name}' route {key[0]} {key[1]} conflicts with plugin '{routes[key]}'"
                )
            routes[key] = plugin.name

        # d. 마운트
        api_router.include_router(router, prefix=base)
        registry.append(MountedPlugin(info=plugin.info(), kind=plugin.mount.kind, paths=paths))
        logger.info("Plugin '%s' v%s mounted at %s", plugin.name, plugin.info().version, ", ".join(paths))

    return api_router, registry
