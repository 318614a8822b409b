# tests/plugins/test_menu.py

"""
'menu' 플러그인 (메뉴 트리, 사이드바, 역할 메뉴 할당) 통합 테스트 모듈입니다.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import API, body

SYS = f"{API}/sys"
MENUS = f"{SYS}/menus"


async def _menu(client: AsyncClient, title: str, **fields) -> dict:
    payload = {"title": title, "name": title.replace(" ", ""), **fields}
    response = await client.post(MENUS, json=payload)
    assert response.status_code == 200, response.text
    return body(response)["data"]


@pytest.mark.asyncio
async def test_menu_tree_and_defaults(admin_client: AsyncClient):
    root = await _menu(admin_client, "system", type=0, sort=1)
    users = await _menu(admin_client, "users", parent_id=root["id"], path="/system/users", sort=2)
    await _menu(admin_client, "roles", parent_id=root["id"], sort=1)
    await _menu(admin_client, "user add", parent_id=users["id"], type=2, perms="sys:user:add")

    assert (users["status"], users["display"], users["cache"], users["type"]) == (1, True, False, 1)

    [tree] = body(await admin_client.get(f"{MENUS}/tree"))["data"]
    assert tree["title"] == "system"
    assert [child["title"] for child in tree["children"]] == ["roles", "users"]
    assert [leaf["perms"] for leaf in tree["children"][1]["children"]] == ["sys:user:add"]

    data = body(await admin_client.get(MENUS, params={"type": 2}))["data"]
    assert data["total"] == 1


@pytest.mark.asyncio
async def test_menu_validation(admin_client: AsyncClient):
    response = await admin_client.post(MENUS, json={"title": "", "name": "x", "type": 5})
    assert response.status_code == 422
    assert body(response)["msg"] == "菜单标题长度必须在1-100之间, 菜单类型必须在0-2之间"


@pytest.mark.asyncio
async def test_menu_parent_rules(admin_client: AsyncClient):
    response = await admin_client.post(MENUS, json={"title": "orphan", "name": "orphan", "parent_id": 777})
    assert response.status_code == 404
    assert body(response)["msg"] == "菜单不存在"

    menu = await _menu(admin_client, "self")
    response = await admin_client.put(f"{MENUS}/{menu['id']}", json={"parent_id": menu["id"]})
    assert response.status_code == 400
    assert body(response)["msg"] == "上级菜单不能是自身"


@pytest.mark.asyncio
async def test_menu_with_children_cannot_be_deleted(admin_client: AsyncClient):
    parent = await _menu(admin_client, "parent", type=0)
    child = await _menu(admin_client, "child", parent_id=parent["id"])

    response = await admin_client.request("DELETE", MENUS, json={"ids": [parent["id"]]})
    assert response.status_code == 400
    assert body(response)["msg"] == "存在子菜单，无法删除"

    response = await admin_client.request("DELETE", MENUS, json={"ids": [parent["id"], child["id"]]})
    assert body(response)["msg"] == "删除成功"
    assert body(await admin_client.get(f"{MENUS}/all"))["data"] == []


@pytest.mark.asyncio
async def test_super_user_sidebar_skips_buttons_and_hidden_menus(admin_client: AsyncClient):
    root = await _menu(admin_client, "dashboard", type=0)
    await _menu(admin_client, "overview", parent_id=root["id"])
    await _menu(admin_client, "hidden", parent_id=root["id"], display=False)
    await _menu(admin_client, "disabled", parent_id=root["id"], status=0)
    await _menu(admin_client, "export", parent_id=root["id"], type=2)

    [node] = body(await admin_client.get(f"{MENUS}/sidebar"))["data"]
    assert [child["title"] for child in node["children"]] == ["overview"]


@pytest.mark.asyncio
async def test_role_menus_drive_the_sidebar(admin_client: AsyncClient, user_factory, authorized_client_factory):
    root = await _menu(admin_client, "content", type=0)
    notices = await _menu(admin_client, "notices", parent_id=root["id"])
    await _menu(admin_client, "configs", parent_id=root["id"])

    role_id = body(await admin_client.post(f"{SYS}/roles", json={"name": "편집자", "code": "editor"}))["data"]["id"]
    response = await admin_client.put(f"{SYS}/role-menus/{role_id}", json={"menu_ids": [root["id"], notices["id"]]})
    assert body(response) == {"code": 200, "msg": "分配成功", "data": [root["id"], notices["id"]]}
    assert body(await admin_client.get(f"{SYS}/role-menus/{role_id}"))["data"] == [root["id"], notices["id"]]

    user = await user_factory("mia", "secret123")
    await admin_client.put(f"{SYS}/user-roles/{user.id}", json={"role_ids": [role_id]})

    async with authorized_client_factory("mia", "secret123") as mia:
        [node] = body(await mia.get(f"{MENUS}/sidebar"))["data"]
        assert [child["title"] for child in node["children"]] == ["notices"]
        assert (await mia.get(f"{MENUS}/tree")).status_code == 403

    # 역할이 비활성화되면 메뉴도 사라집니다
    await admin_client.put(f"{SYS}/roles/{role_id}", json={"status": 0})
    async with authorized_client_factory("mia", "secret123") as mia:
        assert body(await mia.get(f"{MENUS}/sidebar"))["data"] == []


@pytest.mark.asyncio
async def test_role_menu_assignment_errors(admin_client: AsyncClient):
    response = await admin_client.put(f"{SYS}/role-menus/4242", json={"menu_ids": []})
    assert response.status_code == 404
    assert body(response)["msg"] == "角色不存在"

    role_id = body(await admin_client.post(f"{SYS}/roles", json={"name": "r", "code": "r"}))["data"]["id"]
    response = await admin_client.put(f"{SYS}/role-menus/{role_id}", json={"menu_ids": [999]})
    assert response.status_code == 404
    assert body(response)["msg"] == "菜单 999 不存在"


@pytest.mark.asyncio
async def test_deleting_menu_removes_role_links(admin_client: AsyncClient):
    menu = await _menu(admin_client, "temp")
    role_id = body(await admin_client.post(f"{SYS}/roles", json={"name": "t", "code": "t"}))["data"]["id"]
    await admin_client.put(f"{SYS}/role-menus/{role_id}", json={"menu_ids": [menu["id"]]})

    await admin_client.request("DELETE", MENUS, json={"ids": [menu["id"]]})
    assert body(await admin_client.get(f"{SYS}/role-menus/{role_id}"))["data"] == []
