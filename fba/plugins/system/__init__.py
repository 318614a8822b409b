# fba/plugins/system/__init__.py

"""
'system' 플러그인: 사용자, 역할, 권한, 부서와 그 할당, 조립된 플러그인 목록을 관리합니다.
"""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState


class SystemPlugin(Plugin):
    INFO = PluginInfo(
        name="system",
        version="0.1.0",
        description="사용자/역할/권한/부서 관리",
        author="wu-clan",
    )
    MOUNT = PluginMount.extension(
        "users", "roles", "permissions", "depts", "user-roles", "role-permissions", "plugins",
    )

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
