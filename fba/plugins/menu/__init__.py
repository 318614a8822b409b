# fba/plugins/menu/__init__.py

"""'menu' 플러그인: 사이드바 메뉴 트리와 역할별 메뉴 할당."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState


class MenuPlugin(Plugin):
    INFO = PluginInfo(
        name="menu",
        version="0.0.3",
        description="메뉴 관리",
        author="wu-clan",
    )
    MOUNT = PluginMount.extension("menus", "role-menus")

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
