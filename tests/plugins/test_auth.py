# tests/plugins/test_auth.py

"""
'auth' 플러그인 (로그인, 토큰, 현재 사용자) 통합 테스트 모듈입니다.

- JSON 로그인 / OAuth2 폼 토큰 / 리프레시 토큰
- 로그인 성공/실패 기록 (sys_login_log)
- 권한 코드에 따른 인가 (슈퍼유저 우회 포함)
"""

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.plugins.log import models as log_models

from tests.conftest import ADMIN_PASSWORD, API, body, login


# --- 로그인 ---

@pytest.mark.asyncio
async def test_login_success_returns_token_pair(client: AsyncClient, admin_user):
    response = await client.post(f"{API}/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    payload = body(response)
    assert payload["msg"] == "登录成功"
    data = payload["data"]
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == 60 * 24 * 60
    assert data["access_token"] and data["refresh_token"]
    assert data["user"]["username"] == "admin"
    assert data["user"]["is_super"] is True
    assert "password_hash" not in data["user"]


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, admin_user):
    response = await client.post(f"{API}/auth/login", json={"username": "admin", "password": "wrong-password"})
    assert response.status_code == 400
    assert body(response) == {"code": 400, "msg": "用户名或密码错误"}


@pytest.mark.asyncio
async def test_login_validation_error(client: AsyncClient):
    response = await client.post(f"{API}/auth/login", json={"username": "", "password": ""})
    assert response.status_code == 422
    assert body(response)["msg"] == "用户名长度必须在1-32之间, 密码长度必须在1-64之间"


@pytest.mark.asyncio
async def test_disabled_user_cannot_login(client: AsyncClient, user_factory):
    await user_factory("sleeper", "secret123", status=0)
    response = await client.post(f"{API}/auth/login", json={"username": "sleeper", "password": "secret123"})
    assert response.status_code == 400
    assert body(response)["msg"] == "用户已被禁用"


@pytest.mark.asyncio
async def test_login_attempts_are_recorded(client: AsyncClient, admin_user, db_session: AsyncSession):
    await client.post(f"{API}/auth/login", json={"username": "admin", "password": "wrong-password"})
    await client.post(f"{API}/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})

    rows = (await db_session.exec(select(log_models.LoginLog).order_by(log_models.LoginLog.id))).all()
    assert [(row.username, row.status) for row in rows] == [("admin", 0), ("admin", 1)]
    assert rows[0].msg == "用户名或密码错误"
    assert rows[1].msg == "登录成功"
    assert rows[1].user_id == admin_user.id


@pytest.mark.asyncio
async def test_token_endpoint_accepts_form(client: AsyncClient, admin_user):
    response = await client.post(
        f"{API}/auth/token", data={"username": "admin", "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    data = body(response)["data"]
    assert data["token_type"] == "bearer"
    assert data["access_token"]


# --- 토큰 ---

@pytest.mark.asyncio
async def test_refresh_issues_new_pair(client: AsyncClient, admin_user):
    tokens = await login(client, "admin", ADMIN_PASSWORD)
    response = await client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200
    assert body(response)["data"]["access_token"]


@pytest.mark.asyncio
async def test_access_token_cannot_be_used_as_refresh_token(client: AsyncClient, admin_user):
    tokens = await login(client, "admin", ADMIN_PASSWORD)
    response = await client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_refresh_token_is_not_a_bearer_token(client: AsyncClient, admin_user):
    tokens = await login(client, "admin", ADMIN_PASSWORD)
    response = await client.get(
        f"{API}/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_logout_requires_authentication(client: AsyncClient, admin_client: AsyncClient):
    assert (await client.post(f"{API}/auth/logout")).status_code == 403
    response = await admin_client.post(f"{API}/auth/logout")
    assert body(response) == {"code": 200, "msg": "登出成功"}


# --- 현재 사용자 / 인가 ---

@pytest.mark.asyncio
async def test_me_lists_roles_and_codes(user_factory, grant_permissions, authorized_client_factory):
    user = await user_factory("editor", "secret123")
    await grant_permissions(user, "sys:notice:list", "sys:notice:add")

    async with authorized_client_factory("editor", "secret123") as editor:
        response = await editor.get(f"{API}/auth/me")
        assert response.status_code == 200
        data = body(response)["data"]
        assert data["user"]["username"] == "editor"
        assert data["roles"] == ["role_editor"]
        assert data["codes"] == ["sys:notice:add", "sys:notice:list"]

        codes = body(await editor.get(f"{API}/auth/codes"))["data"]
        assert codes == ["sys:notice:add", "sys:notice:list"]


@pytest.mark.asyncio
async def test_permission_codes_gate_endpoints(user_factory, grant_permissions, authorized_client_factory):
    user = await user_factory("reader", "secret123")
    await grant_permissions(user, "sys:notice:list")

    async with authorized_client_factory("reader", "secret123") as reader:
        assert (await reader.get(f"{API}/sys/notices")).status_code == 200
        response = await reader.post(f"{API}/sys/notices", json={"title": "t", "content": "c"})
        assert response.status_code == 403
        assert body(response) == {"code": 403, "msg": "permission denied"}


@pytest.mark.asyncio
async def test_super_user_bypasses_permission_codes(admin_client: AsyncClient):
    response = await admin_client.post(f"{API}/sys/notices", json={"title": "t", "content": "c"})
    assert response.status_code == 200
    assert body(response)["msg"] == "创建成功"
