# fba/plugins/log/__init__.py

"""
'log' 플러그인: 로그인 로그, 작업 로그, 접근 로그의 조회/삭제 API 를 제공합니다.
로그 레코드 자체는 auth 플러그인과 접근 로그 미들웨어가 기록합니다.
"""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState

LOG_SEGMENT = "logs"


class LogPlugin(Plugin):
    INFO = PluginInfo(
        name="log",
        version="0.1.0",
        description="로그인/작업/접근 로그",
        author="wu-clan",
    )
    MOUNT = PluginMount.independent(LOG_SEGMENT)

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
