# fba/plugins/dict/__init__.py

"""'dict' 플러그인: 데이터 사전 유형과 사전 데이터 관리."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState


class DictPlugin(Plugin):
    INFO = PluginInfo(
        name="dict",
        version="0.0.8",
        description="데이터 사전",
        author="wu-clan",
    )
    MOUNT = PluginMount.extension("dict-types", "dict-datas")

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
