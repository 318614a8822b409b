# fba/plugins/oauth2/__init__.py

"""'oauth2' 플러그인: GitHub / Google / LinuxDo 외부 계정 인증과 연결 관리."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState, Requirement


class OAuth2Plugin(Plugin):
    INFO = PluginInfo(
        name="oauth2",
        version="0.1.0",
        description="외부 계정 로그인 (GitHub, Google, LinuxDo)",
        author="wu-clan",
    )
    MOUNT = PluginMount.independent("oauth2")
    REQUIRES = frozenset({Requirement.OAUTH2})

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
