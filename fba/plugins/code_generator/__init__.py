# fba/plugins/code_generator/__init__.py

"""'code_generator' 플러그인: 테이블 반영 기반 CRUD 코드 생성 메타데이터 관리."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState


class CodeGeneratorPlugin(Plugin):
    INFO = PluginInfo(
        name="code_generator",
        version="0.0.6",
        description="코드 생성기",
        author="wu-clan",
    )
    MOUNT = PluginMount.independent("generates")

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
