# tests/plugins/test_log.py

"""
'log' 플러그인 (로그인/작업/접근 로그 조회 및 삭제) 통합 테스트 모듈입니다.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.models import utc_now
from fba.plugins.log import crud as log_crud
from fba.plugins.log import models as log_models

from tests.conftest import API, body

LOGS = f"{API}/logs"


def _access_log(trace_id: str, **kwargs) -> log_models.AccessLog:
    values = {
        "trace_id": trace_id,
        "method": "GET",
        "url": f"http://test/{trace_id}",
        "status_code": 200,
        "client_ip": "127.0.0.1",
    }
    values.update(kwargs)
    return log_models.AccessLog(**values)


@pytest.mark.asyncio
async def test_login_logs_are_listed_and_filtered(admin_client: AsyncClient, client: AsyncClient):
    await client.post(f"{API}/auth/login", json={"username": "ghost", "password": "whatever"})

    data = body(await admin_client.get(f"{LOGS}/login"))["data"]
    assert data["total"] == 2
    assert data["items"][0]["username"] == "ghost"
    assert data["items"][0]["status"] == 0

    data = body(await admin_client.get(f"{LOGS}/login", params={"status": 1}))["data"]
    assert [item["username"] for item in data["items"]] == ["admin"]


@pytest.mark.asyncio
async def test_login_log_detail_delete_and_clear(admin_client: AsyncClient, client: AsyncClient):
    await client.post(f"{API}/auth/login", json={"username": "ghost", "password": "whatever"})
    items = body(await admin_client.get(f"{LOGS}/login"))["data"]["items"]
    target = items[0]["id"]

    assert body(await admin_client.get(f"{LOGS}/login/{target}"))["data"]["id"] == target

    response = await admin_client.request("DELETE", f"{LOGS}/login", json={"ids": [target]})
    assert body(response)["msg"] == "删除成功"
    response = await admin_client.get(f"{LOGS}/login/{target}")
    assert response.status_code == 404
    assert body(response)["msg"] == f"登录日志 {target} 不存在"

    response = await admin_client.delete(f"{LOGS}/login/all")
    assert body(response)["msg"] == "清空成功"
    assert body(await admin_client.get(f"{LOGS}/login"))["data"]["total"] == 0


@pytest.mark.asyncio
async def test_access_logs_filter_by_error_and_method(admin_client: AsyncClient, db_session: AsyncSession):
    db_session.add_all([
        _access_log("t-ok"),
        _access_log("t-error", method="PUT", status_code=500, is_error=True, error_msg="boom"),
    ])
    await db_session.commit()

    data = body(await admin_client.get(f"{LOGS}/access", params={"is_error": True}))["data"]
    assert [item["trace_id"] for item in data["items"]] == ["t-error"]

    data = body(await admin_client.get(f"{LOGS}/access", params={"method": "put"}))["data"]
    assert [item["trace_id"] for item in data["items"]] == ["t-error"]


@pytest.mark.asyncio
async def test_opera_log_listing(app, admin_client: AsyncClient):
    await admin_client.post(f"{API}/sys/configs", json={"name": "사이트", "key": "site.title", "value": "fba"})
    await app.state.access_log_writer.flush()

    data = body(await admin_client.get(f"{LOGS}/opera"))["data"]
    assert data["total"] == 1
    assert data["items"][0]["title"] == "参数配置"
    assert data["items"][0]["business_type"] == "create"


@pytest.mark.asyncio
async def test_log_endpoints_require_permission(user_factory, authorized_client_factory):
    await user_factory("nosy", "secret123")
    async with authorized_client_factory("nosy", "secret123") as nosy:
        assert (await nosy.get(f"{LOGS}/access")).status_code == 403
        assert (await nosy.delete(f"{LOGS}/login/all")).status_code == 403


@pytest.mark.asyncio
async def test_purge_before_removes_old_access_logs(db_session: AsyncSession):
    now = utc_now()
    db_session.add_all([
        _access_log("t-old", created_time=now - timedelta(days=40)),
        _access_log("t-new", created_time=now),
    ])
    await db_session.commit()

    removed = await log_crud.access_log.purge_before(db_session, now - timedelta(days=30))
    assert removed == 1
    rows = (await db_session.exec(select(log_models.AccessLog.trace_id))).all()
    assert rows == ["t-new"]
