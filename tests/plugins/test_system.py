# tests/plugins/test_system.py

"""
'system' 플러그인 (사용자/역할/권한/부서/플러그인 목록) 통합 테스트 모듈입니다.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import API, body, login

SYS = f"{API}/sys"


# --- 사용자 ---

@pytest.mark.asyncio
async def test_create_user_and_duplicate_username(admin_client: AsyncClient):
    user_data = {"username": "alice", "password": "secret123", "email": "alice@example.com"}
    response = await admin_client.post(f"{SYS}/users", json=user_data)
    assert response.status_code == 200
    created = body(response)["data"]
    assert created["username"] == "alice"
    assert created["nickname"] == "alice"
    assert created["updated_time"] is None

    response = await admin_client.post(f"{SYS}/users", json=user_data)
    assert response.status_code == 409
    assert body(response) == {"code": 409, "msg": "用户名 alice 已存在"}


@pytest.mark.asyncio
async def test_create_user_validation_messages(admin_client: AsyncClient):
    response = await admin_client.post(f"{SYS}/users", json={"username": "bad name", "password": "123"})
    assert response.status_code == 422
    assert body(response)["msg"] == "用户名只能包含字母、数字和下划线, 密码长度必须在6-64之间"


@pytest.mark.asyncio
async def test_user_page_and_filters(admin_client: AsyncClient, user_factory):
    for name in ("bob", "bobby", "carol"):
        await user_factory(name)
    response = await admin_client.get(f"{SYS}/users", params={"username": "bob"})
    data = body(response)["data"]
    assert data["total"] == 2
    assert {item["username"] for item in data["items"]} == {"bob", "bobby"}


@pytest.mark.asyncio
async def test_update_user_sets_updated_time(admin_client: AsyncClient, user_factory):
    user = await user_factory("dave")
    response = await admin_client.put(f"{SYS}/users/{user.id}", json={"nickname": "데이브"})
    assert response.status_code == 200
    data = body(response)["data"]
    assert data["nickname"] == "데이브"
    assert data["updated_time"] is not None


@pytest.mark.asyncio
async def test_cannot_disable_or_delete_self(admin_client: AsyncClient, admin_user):
    response = await admin_client.put(f"{SYS}/users/{admin_user.id}/status", json={"status": 0})
    assert response.status_code == 400
    assert body(response)["msg"] == "不能禁用当前用户"

    response = await admin_client.request("DELETE", f"{SYS}/users", json={"ids": [admin_user.id]})
    assert response.status_code == 400
    assert body(response)["msg"] == "不能删除当前用户"


@pytest.mark.asyncio
async def test_deleted_user_is_hidden_and_cannot_login(client: AsyncClient, admin_client: AsyncClient, user_factory):
    user = await user_factory("erin", "secret123")
    response = await admin_client.request("DELETE", f"{SYS}/users", json={"ids": [user.id]})
    assert body(response) == {"code": 200, "msg": "删除成功"}

    assert (await admin_client.get(f"{SYS}/users/{user.id}")).status_code == 404
    response = await client.post(f"{API}/auth/login", json={"username": "erin", "password": "secret123"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_password_reset_and_change(client: AsyncClient, admin_client: AsyncClient,
                                         user_factory, authorized_client_factory):
    user = await user_factory("frank", "secret123")
    response = await admin_client.put(f"{SYS}/users/{user.id}/password", json={"password": "newpass123"})
    assert body(response)["msg"] == "密码重置成功"
    await login(client, "frank", "newpass123")

    async with authorized_client_factory("frank", "newpass123") as frank:
        response = await frank.put(f"{SYS}/users/me/password",
                                   json={"old_password": "wrong", "new_password": "another123"})
        assert response.status_code == 400
        assert body(response)["msg"] == "旧密码错误"

        response = await frank.put(f"{SYS}/users/me/password",
                                   json={"old_password": "newpass123", "new_password": "another123"})
        assert body(response)["msg"] == "密码修改成功"

        me = body(await frank.get(f"{SYS}/users/me"))["data"]
        assert me["username"] == "frank"


# --- 역할 / 권한 / 할당 ---

@pytest.mark.asyncio
async def test_role_permission_assignment_flow(admin_client: AsyncClient, user_factory, authorized_client_factory):
    response = await admin_client.post(f"{SYS}/permissions", json={"name": "공지 조회", "code": "sys:notice:list"})
    permission_id = body(response)["data"]["id"]
    response = await admin_client.post(f"{SYS}/roles", json={"name": "공지 열람자", "code": "notice_reader"})
    role_id = body(response)["data"]["id"]

    response = await admin_client.put(f"{SYS}/role-permissions/{role_id}", json={"permission_ids": [permission_id]})
    assert body(response) == {"code": 200, "msg": "分配成功", "data": [permission_id]}

    user = await user_factory("grace", "secret123")
    response = await admin_client.put(f"{SYS}/user-roles/{user.id}", json={"role_ids": [role_id, role_id]})
    assert body(response)["data"] == [role_id]

    roles = body(await admin_client.get(f"{SYS}/users/{user.id}/roles"))["data"]
    assert [role["code"] for role in roles] == ["notice_reader"]
    permissions = body(await admin_client.get(f"{SYS}/roles/{role_id}/permissions"))["data"]
    assert [permission["code"] for permission in permissions] == ["sys:notice:list"]

    async with authorized_client_factory("grace", "secret123") as grace:
        assert (await grace.get(f"{SYS}/notices")).status_code == 200
        assert (await grace.get(f"{SYS}/configs")).status_code == 403


@pytest.mark.asyncio
async def test_assigning_unknown_role_fails(admin_client: AsyncClient, user_factory):
    user = await user_factory("heidi")
    response = await admin_client.put(f"{SYS}/user-roles/{user.id}", json={"role_ids": [9999]})
    assert response.status_code == 404
    assert body(response)["msg"] == "角色 9999 不存在"


@pytest.mark.asyncio
async def test_duplicate_role_code_conflicts(admin_client: AsyncClient):
    role = {"name": "운영자", "code": "operator"}
    assert (await admin_client.post(f"{SYS}/roles", json=role)).status_code == 200
    response = await admin_client.post(f"{SYS}/roles", json=role)
    assert response.status_code == 409
    assert body(response)["msg"] == "角色编码 operator 已存在"


@pytest.mark.asyncio
async def test_permission_tree(admin_client: AsyncClient):
    parent = body(await admin_client.post(
        f"{SYS}/permissions", json={"name": "시스템", "code": "sys", "type": 0},
    ))["data"]
    await admin_client.post(
        f"{SYS}/permissions", json={"name": "사용자", "code": "sys:user", "type": 1, "parent_id": parent["id"]},
    )
    tree = body(await admin_client.get(f"{SYS}/permissions/tree"))["data"]
    assert len(tree) == 1
    assert tree[0]["code"] == "sys"
    assert [child["code"] for child in tree[0]["children"]] == ["sys:user"]


@pytest.mark.asyncio
async def test_permission_cannot_be_its_own_parent(admin_client: AsyncClient):
    permission = body(await admin_client.post(f"{SYS}/permissions", json={"name": "p", "code": "p"}))["data"]
    response = await admin_client.put(f"{SYS}/permissions/{permission['id']}", json={"parent_id": permission["id"]})
    assert response.status_code == 400
    assert body(response)["msg"] == "上级权限不能是自身"


# --- 부서 ---

@pytest.mark.asyncio
async def test_dept_tree_and_delete_rules(admin_client: AsyncClient, user_factory):
    root = body(await admin_client.post(f"{SYS}/depts", json={"name": "본사"}))["data"]
    child = body(await admin_client.post(f"{SYS}/depts", json={"name": "개발팀", "parent_id": root["id"]}))["data"]

    tree = body(await admin_client.get(f"{SYS}/depts/tree"))["data"]
    assert [node["name"] for node in tree] == ["본사"]
    assert [node["name"] for node in tree[0]["children"]] == ["개발팀"]

    response = await admin_client.request("DELETE", f"{SYS}/depts", json={"ids": [root["id"]]})
    assert response.status_code == 400
    assert body(response)["msg"] == "存在子部门，无法删除"

    await user_factory("ivan", dept_id=child["id"])
    response = await admin_client.request("DELETE", f"{SYS}/depts", json={"ids": [child["id"]]})
    assert body(response)["msg"] == "部门下存在用户，无法删除"


@pytest.mark.asyncio
async def test_dept_with_unknown_parent(admin_client: AsyncClient):
    response = await admin_client.post(f"{SYS}/depts", json={"name": "고아", "parent_id": 777})
    assert response.status_code == 404
    assert body(response)["msg"] == "部门不存在"


# --- 플러그인 목록 ---

@pytest.mark.asyncio
async def test_plugin_list_describes_mounts(admin_client: AsyncClient):
    plugins = {plugin["name"]: plugin for plugin in body(await admin_client.get(f"{SYS}/plugins"))["data"]}
    assert plugins["notice"]["kind"] == "extension"
    assert plugins["notice"]["paths"] == [f"{SYS}/notices"]
    assert plugins["dict"]["paths"] == [f"{SYS}/dict-types", f"{SYS}/dict-datas"]
    assert plugins["auth"]["kind"] == "independent"
    assert plugins["auth"]["paths"] == [f"{API}/auth"]
    assert plugins["menu"]["paths"] == [f"{SYS}/menus", f"{SYS}/role-menus"]
    assert plugins["monitor"]["paths"] == [f"{SYS}/monitors"]
