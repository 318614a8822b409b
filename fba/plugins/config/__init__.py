# fba/plugins/config/__init__.py

"""'config' 플러그인: 키-값 시스템 설정과 키 단위 캐시."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState, Requirement


class ConfigPlugin(Plugin):
    INFO = PluginInfo(
        name="config",
        version="0.0.2",
        description="시스템 설정",
        author="wu-clan",
    )
    MOUNT = PluginMount.extension("configs")
    REQUIRES = frozenset({Requirement.CACHE})

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
