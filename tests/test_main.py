# tests/test_main.py

"""
애플리케이션 팩토리(create_app)와 공통 미들웨어에 대한 통합 테스트입니다.

- 루트 (`/`) 와 헬스 체크 (`/health`) 엔드포인트
- 플러그인 조립 설정 (ENABLED_PLUGINS, 빠진 핸들)
- 오류 봉투 (미존재 경로, 인증 없음)
- 접근 로그 / 작업 로그 미들웨어와 trace id 헤더
- 핸들러에서 처리되지 않은 예외의 오류 봉투
"""

import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.composer import PluginCompositionError
from fba.core.plugin import Plugin, PluginInfo, PluginMount, PluginState
from fba.main import create_app
from fba.middleware.access_log import TRUNCATED_MARKER
from fba.plugins.log import models as log_models

from tests.conftest import API, body


# --- 루트 / 헬스 체크 ---

@pytest.mark.asyncio
async def test_read_root(client: AsyncClient):
    """루트 엔드포인트가 앱 정보와 조립된 플러그인 목록을 돌려주는지 테스트합니다."""
    response = await client.get("/")
    assert response.status_code == 200
    payload = body(response)
    assert payload["code"] == 200
    assert payload["data"]["docs"] == "/docs"
    assert payload["data"]["plugins"] == [
        "system", "auth", "menu", "data_scope", "log", "file", "notice", "config", "dict",
        "email", "oauth2", "code_generator", "schedule", "monitor",
    ]


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert body(response)["data"] == {"status": "ok", "database_connection": "successful"}


# --- 플러그인 조립 설정 ---

@pytest.mark.asyncio
async def test_enabled_plugins_limits_composition(settings, engine, cache):
    limited = settings.model_copy(update={"ENABLED_PLUGINS": ["notice", "system", "auth"]})
    app = create_app(limited, engine=engine, cache=cache)
    assert [mounted.info.name for mounted in app.state.plugins] == ["system", "auth", "notice"]

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get(f"{API}/sys/configs/1")
    await app.state.access_log_writer.stop()
    assert response.status_code == 404


def test_unknown_enabled_plugin_is_startup_error(settings, cache):
    broken = settings.model_copy(update={"ENABLED_PLUGINS": ["notice", "billing"]})
    with pytest.raises(PluginCompositionError) as exc_info:
        create_app(broken, cache=cache)
    assert "billing" in str(exc_info.value)


def test_missing_handle_is_startup_error(settings, cache):
    """SMTP 설정이 없으면 email 플러그인 조립이 실패합니다."""
    no_smtp = settings.model_copy(update={"SMTP_HOST": None})
    with pytest.raises(PluginCompositionError) as exc_info:
        create_app(no_smtp, cache=cache)
    assert "'email'" in str(exc_info.value)
    assert "smtp" in str(exc_info.value)


# --- 오류 봉투 ---

@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    response = await client.get(f"{API}/does-not-exist")
    assert response.status_code == 404
    assert body(response) == {"code": 404, "msg": "Not Found"}


@pytest.mark.asyncio
async def test_protected_route_without_token_is_denied(client: AsyncClient):
    response = await client.get(f"{API}/sys/notices")
    assert response.status_code == 403
    assert body(response) == {"code": 403, "msg": "permission denied"}


@pytest.mark.asyncio
async def test_invalid_token_is_denied(client: AsyncClient):
    response = await client.get(f"{API}/sys/notices", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 403
    assert body(response)["msg"] == "permission denied"


# --- 접근 로그 / 작업 로그 ---

@pytest.mark.asyncio
async def test_trace_id_header_is_echoed_or_generated(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "trace-abc"})
    assert response.headers["X-Request-ID"] == "trace-abc"

    response = await client.get("/health")
    assert len(response.headers["X-Request-ID"]) == 32


@pytest.mark.asyncio
async def test_mutating_request_writes_access_and_opera_logs(app, admin_client: AsyncClient, db_session: AsyncSession):
    response = await admin_client.post(
        f"{API}/sys/notices", json={"title": "log check", "content": "body"},
        headers={"X-Request-ID": "trace-opera"},
    )
    assert response.status_code == 200
    await app.state.access_log_writer.flush()

    access = (await db_session.exec(
        select(log_models.AccessLog).where(log_models.AccessLog.trace_id == "trace-opera")
    )).one()
    assert access.method == "POST"
    assert access.status_code == 200
    assert access.user_name == "admin"
    assert access.is_error is False
    assert "log check" in access.request_body
    assert '"code":200' in access.response_body.replace(" ", "")

    opera = (await db_session.exec(
        select(log_models.OperaLog).where(log_models.OperaLog.trace_id == "trace-opera")
    )).one()
    assert opera.title == "通知公告"
    assert opera.business_type == "create"
    assert opera.status == 1
    assert opera.username == "admin"


@pytest.mark.asyncio
async def test_failed_request_is_logged_as_error(app, admin_client: AsyncClient, db_session: AsyncSession):
    response = await admin_client.get(f"{API}/sys/notices/424242", headers={"X-Request-ID": "trace-missing"})
    assert response.status_code == 404
    await app.state.access_log_writer.flush()

    access = (await db_session.exec(
        select(log_models.AccessLog).where(log_models.AccessLog.trace_id == "trace-missing")
    )).one()
    assert access.is_error is True
    assert access.error_msg == "通知公告不存在"


@pytest.mark.asyncio
async def test_large_request_body_is_truncated(app, admin_client: AsyncClient, db_session: AsyncSession):
    content = "x" * 20000
    response = await admin_client.post(
        f"{API}/sys/notices", json={"title": "큰 본문", "content": content},
        headers={"X-Request-ID": "trace-large"},
    )
    assert response.status_code == 200
    await app.state.access_log_writer.flush()

    access = (await db_session.exec(
        select(log_models.AccessLog).where(log_models.AccessLog.trace_id == "trace-large")
    )).one()
    assert access.request_body.endswith(TRUNCATED_MARKER)


@pytest.mark.asyncio
async def test_log_endpoints_and_health_are_not_logged(app, admin_client: AsyncClient, db_session: AsyncSession):
    await admin_client.get("/health", headers={"X-Request-ID": "trace-health"})
    await admin_client.get(f"{API}/logs/access", headers={"X-Request-ID": "trace-logs"})
    await app.state.access_log_writer.flush()

    rows = (await db_session.exec(
        select(log_models.AccessLog).where(log_models.AccessLog.trace_id.in_(["trace-health", "trace-logs"]))
    )).all()
    assert rows == []


# --- 처리되지 않은 예외 ---

class BoomPlugin(Plugin):
    INFO = PluginInfo(name="boom", version="0.0.1", description="handler that raises", author="test")
    MOUNT = PluginMount.independent("boom")

    def create_router(self, state: PluginState) -> APIRouter:
        router = APIRouter()

        @router.get("/explode")
        async def explode():
            raise RuntimeError("handler exploded")

        return router


@pytest.mark.asyncio
async def test_unhandled_exception_becomes_logged_database_error(settings, engine, cache, db_session: AsyncSession):
    app = create_app(settings, engine=engine, cache=cache, plugins=[BoomPlugin()])
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get(f"{API}/boom/explode", headers={"X-Request-ID": "trace-boom"})
    await app.state.access_log_writer.stop()

    assert response.status_code == 500
    assert body(response) == {"code": 500, "msg": "服务器内部错误"}
    assert response.headers["content-type"].startswith("application/json")
    assert response.headers["X-Request-ID"] == "trace-boom"

    access = (await db_session.exec(
        select(log_models.AccessLog).where(log_models.AccessLog.trace_id == "trace-boom")
    )).one()
    assert access.status_code == 500
    assert access.is_error is True
    assert access.error_msg == "服务器内部错误"


@pytest.mark.asyncio
async def test_unhandled_exception_without_access_log(settings, engine, cache):
    quiet = settings.model_copy(update={"ACCESS_LOG_ENABLED": False})
    app = create_app(quiet, engine=engine, cache=cache, plugins=[BoomPlugin()])
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get(f"{API}/boom/explode")

    assert response.status_code == 500
    assert body(response) == {"code": 500, "msg": "服务器内部错误"}
    assert len(response.headers["X-Request-ID"]) == 32
