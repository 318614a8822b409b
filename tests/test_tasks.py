# tests/test_tasks.py

"""
arq 워커 작업 (헬스 체크, 접근 로그 정리) 을 워커 없이 직접 호출해 확인합니다.
"""

from datetime import timedelta

import pytest
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core import tasks
from fba.core.models import utc_now
from fba.plugins.log import models as log_models


@pytest.fixture
def worker_ctx(settings, session_factory):
    return {"settings": settings, "session_factory": session_factory}


@pytest.mark.asyncio
async def test_health_check_database_task(worker_ctx):
    result = await tasks.health_check_database_task(worker_ctx)
    assert result == {"status": "success", "message": "Database connection successful."}


@pytest.mark.asyncio
async def test_purge_access_logs_task(worker_ctx, db_session: AsyncSession):
    now = utc_now()
    db_session.add_all([
        log_models.AccessLog(trace_id="old", method="GET", url="http://test/old", status_code=200, client_ip="127.0.0.1",
                             created_time=now - timedelta(days=31)),
        log_models.AccessLog(trace_id="recent", method="GET", url="http://test/recent", status_code=200, client_ip="127.0.0.1",
                             created_time=now - timedelta(days=29)),
    ])
    await db_session.commit()

    assert await tasks.purge_access_logs_task(worker_ctx) == 1
    rows = (await db_session.exec(select(log_models.AccessLog.trace_id))).all()
    assert rows == ["recent"]


def test_worker_settings_register_cron_jobs():
    names = [job.name for job in tasks.WorkerSettings.cron_jobs]
    assert names == ["cron:health_check_database_task", "cron:purge_access_logs_task"]
