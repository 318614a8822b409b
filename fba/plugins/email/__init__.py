# fba/plugins/email/__init__.py

"""'email' 플러그인: SMTP 메일 발송과 발송 기록."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState, Requirement


class EmailPlugin(Plugin):
    INFO = PluginInfo(
        name="email",
        version="0.0.2",
        description="메일 발송",
        author="wu-clan",
    )
    MOUNT = PluginMount.independent("email")
    REQUIRES = frozenset({Requirement.SMTP})

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
