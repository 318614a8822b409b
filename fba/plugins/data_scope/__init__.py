# fba/plugins/data_scope/__init__.py

"""'data_scope' 플러그인: 데이터 규칙과 데이터 범위, 역할별 범위 할당."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState


class DataScopePlugin(Plugin):
    INFO = PluginInfo(
        name="data_scope",
        version="0.0.2",
        description="数据权限",
        author="wu-clan",
    )
    MOUNT = PluginMount.extension("data-rules", "data-scopes", "role-data-scopes")

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
