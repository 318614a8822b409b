# fba/plugins/auth/__init__.py

"""
'auth' 플러그인: 로그인/토큰 갱신/로그아웃과 현재 사용자 정보를 제공합니다.
"""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState


class AuthPlugin(Plugin):
    INFO = PluginInfo(
        name="auth",
        version="0.1.0",
        description="JWT 로그인 인증",
        author="wu-clan",
    )
    MOUNT = PluginMount.independent("auth")

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
