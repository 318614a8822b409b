# fba/core/tasks.py

"""
arq 워커 설정과 주기 작업입니다.

    arq fba.core.tasks.WorkerSettings

- 매일 00:00 데이터베이스 헬스 체크
- 매일 01:00 보존 기간이 지난 접근 로그 삭제
"""

import logging
from datetime import timedelta
from typing import Any, Dict

from arq import cron
from sqlmodel import select

from fba.core.cache import redis_settings
from fba.core.config import get_settings
from fba.core.database import build_engine, build_session_factory, session_scope
from fba.core.log import setup_logging
from fba.core.models import utc_now
from fba.plugins.log.crud import access_log

logger = logging.getLogger(__name__)


async def health_check_database_task(ctx: Dict[str, Any]) -> Dict[str, str]:
    """데이터베이스 연결 상태를 확인하고 결과를 남깁니다."""
    try:
        async with session_scope(ctx["session_factory"]) as db:
            result = await db.exec(select(1))
            if result.first() == 1:
                logger.info("Database health check succeeded")
                return {"status": "success", "message": "Database connection successful."}
        logger.error("Database health check failed: no result from test query")
        return {"status": "failed", "message": "No result from test query."}
    except Exception as e:
        logger.exception("Database health check failed")
        return {"status": "failed", "message": f"Database connection error: {e}"}


async def purge_access_logs_task(ctx: Dict[str, Any]) -> int:
    """보존 기간(ACCESS_LOG_RETENTION_DAYS)이 지난 sys_access_log 행을 삭제합니다."""
    days = ctx["settings"].ACCESS_LOG_RETENTION_DAYS
    before = utc_now() - timedelta(days=days)
    async with session_scope(ctx["session_factory"]) as db:
        removed = await access_log.purge_before(db, before)
    logger.info("Purged %d access log row(s) older than %d day(s)", removed, days)
    return removed


async def startup(ctx: Dict[str, Any]) -> None:
    settings = get_settings()
    setup_logging(settings)
    ctx["settings"] = settings
    ctx["engine"] = build_engine(settings)
    ctx["session_factory"] = build_session_factory(ctx["engine"])
    logger.info("arq worker started")


async def shutdown(ctx: Dict[str, Any]) -> None:
    engine = ctx.get("engine")
    if engine is not None:
        await engine.dispose()
    logger.info("arq worker stopped")


class WorkerSettings:
    functions = [health_check_database_task, purge_access_logs_task]
    cron_jobs = [
        cron(health_check_database_task, hour={0}, minute={0}, timeout=300, keep_result=600),
        cron(purge_access_logs_task, hour={1}, minute={0}, timeout=1800, keep_result=3600),
    ]
    on_startup = startup
    on_shutdown = shutdown
    redis_settings = redis_settings(get_settings().REDIS_URL)
