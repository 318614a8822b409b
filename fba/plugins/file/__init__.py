# fba/plugins/file/__init__.py

"""
'file' 플러그인: 파일 업로드/다운로드와 파일 메타데이터 관리.
"""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState, Requirement


class FilePlugin(Plugin):
    INFO = PluginInfo(
        name="file",
        version="0.0.3",
        description="파일 업로드",
        author="wu-clan",
    )
    MOUNT = PluginMount.extension("files")
    REQUIRES = frozenset({Requirement.STORAGE})

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
