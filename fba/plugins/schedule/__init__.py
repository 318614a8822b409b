# fba/plugins/schedule/__init__.py

"""'schedule' 플러그인: 정기 작업(cron) 정의 관리."""

from fastapi import APIRouter

from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState


class SchedulePlugin(Plugin):
    INFO = PluginInfo(
        name="schedule",
        version="0.0.1",
        description="정기 작업",
        author="wu-clan",
    )
    MOUNT = PluginMount.extension("schedule-jobs")

    def create_router(self, state: PluginState) -> APIRouter:
        from .routers import build_router
        return build_router(state)
