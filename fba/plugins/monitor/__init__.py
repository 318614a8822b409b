# fba/plugins/monitor/__init__.py

"""'monitor' 플러그인: 서버/캐시 상태와 헬스 체크."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState, Requirement


class MonitorPlugin(Plugin):
    INFO = PluginInfo(
        name="monitor",
        version="0.0.1",
        description="系统监控",
        author="wu-clan",
    )
    MOUNT = PluginMount.extension("monitors")
    REQUIRES = frozenset({Requirement.CACHE})

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
