# fba/plugins/monitor/routers.py

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.models import utc_now
from fba.core.plugin import PluginState
from fba.core.response import ResponseModel, success

from . import schemas as monitor_schemas
from . import services as monitor_services


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/monitors", tags=["System - Monitors (시스템 모니터)"])
    auth = state.auth
    cache = state.cache

    @router.get("/server", response_model=ResponseModel[monitor_schemas.ServerMetrics], summary="서버 상태",
                dependencies=[Depends(auth.require_permission("sys:monitor:server"))])
    async def read_server_metrics():
        return success(monitor_services.server_metrics())

    @router.get("/redis", response_model=ResponseModel[monitor_schemas.RedisMetrics], summary="캐시 상태",
                dependencies=[Depends(auth.require_permission("sys:monitor:redis"))])
    async def read_redis_metrics():
        return success(await monitor_services.redis_metrics(cache))

    @router.get("/status", response_model=ResponseModel[monitor_schemas.SystemStatus], summary="실행 상태",
                dependencies=[Depends(auth.current_user)])
    async def read_status():
        return success(monitor_schemas.SystemStatus(
            status="running", uptime_seconds=monitor_services.process_uptime(), timestamp=utc_now(),
        ))

    @router.get("/health", response_model=ResponseModel[monitor_schemas.HealthStatus], summary="헬스 체크",
                dependencies=[Depends(auth.current_user)])
    async def read_health(db: AsyncSession = Depends(state.get_session)):
        database = await monitor_services.database_status(db)
        redis = await monitor_services.cache_status(cache)
        healthy = database == "connected" and redis == "connected"
        return success(monitor_schemas.HealthStatus(
            status="healthy" if healthy else "unhealthy", database=database, redis=redis, timestamp=utc_now(),
        ))

    return router
