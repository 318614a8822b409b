# fba/plugins/notice/__init__.py

"""'notice' 플러그인: 통지 공고 관리."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState


class NoticePlugin(Plugin):
    INFO = PluginInfo(
        name="notice",
        version="0.0.2",
        description="통지 공고",
        author="wu-clan",
    )
    MOUNT = PluginMount.extension("notices")

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
