# tests/plugins/test_data_scope.py

"""
'data_scope' 플러그인 (데이터 규칙/범위, 역할 범위 할당, 필터 생성) 테스트 모듈입니다.
"""

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.plugins.data_scope import crud as scope_crud
from fba.plugins.data_scope import errors as scope_errors
from fba.plugins.data_scope.filters import build_filter
from fba.plugins.data_scope.models import DataRule
from fba.plugins.system.models import Dept, User

from tests.conftest import API, body

SYS = f"{API}/sys"
RULES = f"{SYS}/data-rules"
SCOPES = f"{SYS}/data-scopes"


def _rule(column: str, expression: int, value: str, operator: int = 0, model: str = "User") -> DataRule:
    return DataRule(name=f"{column}-{expression}-{value}", model=model, column=column,
                    operator=operator, expression=expression, value=value)


async def _usernames(db: AsyncSession, *rules: DataRule) -> list:
    result = await db.execute(select(User.username).where(build_filter(User, rules)).order_by(User.id))
    return list(result.scalars().all())


# --- 필터 생성 ---

@pytest.mark.asyncio
async def test_build_filter_combines_and_and_or_groups(db_session: AsyncSession, user_factory):
    for name, nickname in (("amy", "a"), ("bob", "b"), ("cat", "boss"), ("dan", "d")):
        await user_factory(name, nickname=nickname)

    assert await _usernames(db_session) == ["amy", "bob", "cat", "dan"]
    assert await _usernames(db_session, _rule("username", 6, "amy, bob")) == ["amy", "bob"]
    assert await _usernames(db_session, _rule("username", 7, "amy,bob")) == ["cat", "dan"]
    assert await _usernames(
        db_session,
        _rule("username", 6, "amy,bob"),
        _rule("username", 1, "bob"),
        _rule("nickname", 0, "boss", operator=1),
    ) == ["amy", "cat"]


@pytest.mark.asyncio
async def test_build_filter_coerces_numeric_values(db_session: AsyncSession, user_factory):
    await user_factory("eve")
    await user_factory("fay", status=0)

    assert await _usernames(db_session, _rule("status", 2, "0")) == ["eve"]
    assert await _usernames(db_session, _rule("status", 5, "0")) == ["fay"]


@pytest.mark.asyncio
async def test_build_filter_ignores_rules_for_other_models(db_session: AsyncSession, user_factory):
    await user_factory("gus")
    assert await _usernames(db_session, _rule("name", 0, "nobody", model="Dept")) == ["gus"]


def test_build_filter_rejects_bad_rules():
    with pytest.raises(scope_errors.DataRuleTargetError) as exc_info:
        build_filter(User, [_rule("status", 0, "active")])
    assert exc_info.value.message == "字段 status 的规则值 active 类型不正确"

    with pytest.raises(scope_errors.DataRuleTargetError) as exc_info:
        build_filter(User, [_rule("password_hash", 0, "x")])
    assert exc_info.value.message == "模型 User 不存在字段 password_hash"

    # 규칙이 없으면 항상 참
    assert str(build_filter(Dept, [])) == "true"


# --- 데이터 규칙 ---

@pytest.mark.asyncio
async def test_rule_models_and_columns(admin_client: AsyncClient):
    models = body(await admin_client.get(f"{RULES}/models"))["data"]
    assert [(m["model"], m["table_name"]) for m in models] == [
        ("User", "sys_user"), ("Role", "sys_role"), ("Dept", "sys_dept"), ("Menu", "sys_menu"),
    ]

    columns = {c["name"]: c for c in body(await admin_client.get(f"{RULES}/models/User/columns"))["data"]}
    assert columns["username"]["nullable"] is False
    assert columns["dept_id"]["nullable"] is True
    assert "password_hash" not in columns

    response = await admin_client.get(f"{RULES}/models/Invoice/columns")
    assert response.status_code == 422
    assert body(response) == {"code": 422, "msg": "数据规则模型 Invoice 不存在"}


@pytest.mark.asyncio
async def test_rule_crud_and_target_checks(admin_client: AsyncClient):
    rule_in = {"name": "본인 부서", "model": "User", "column": "dept_id", "expression": 0, "value": "1"}
    response = await admin_client.post(RULES, json=rule_in)
    assert response.status_code == 200
    rule = body(response)["data"]
    assert (rule["operator"], rule["expression"]) == (0, 0)

    response = await admin_client.post(RULES, json=rule_in)
    assert response.status_code == 409
    assert body(response)["msg"] == "数据规则 본인 부서 已存在"

    response = await admin_client.post(RULES, json={**rule_in, "name": "other", "column": "salary"})
    assert response.status_code == 422
    assert body(response)["msg"] == "模型 User 不存在字段 salary"

    response = await admin_client.put(f"{RULES}/{rule['id']}", json={"model": "Dept"})
    assert response.status_code == 422
    assert body(response)["msg"] == "模型 Dept 不存在字段 dept_id"

    response = await admin_client.put(f"{RULES}/{rule['id']}", json={"value": "2", "operator": 1})
    assert body(response)["data"]["value"] == "2"
    assert body(response)["data"]["operator"] == 1

    data = body(await admin_client.get(RULES, params={"model": "User"}))["data"]
    assert data["total"] == 1


@pytest.mark.asyncio
async def test_rule_validation_messages(admin_client: AsyncClient):
    response = await admin_client.post(RULES, json={
        "name": "n", "model": "User", "column": "status", "operator": 2, "expression": 8, "value": "",
    })
    assert response.status_code == 422
    assert body(response)["msg"] == "运算符必须是0或1, 表达式必须在0-7之间, 规则值长度必须在1-256个字符之间"


# --- 데이터 범위 ---

@pytest.mark.asyncio
async def test_scope_rule_assignment(admin_client: AsyncClient):
    rule = body(await admin_client.post(RULES, json={
        "name": "활성", "model": "User", "column": "status", "value": "1",
    }))["data"]
    scope = body(await admin_client.post(SCOPES, json={"name": "기본 범위"}))["data"]
    assert scope["status"] == 1

    response = await admin_client.put(f"{SCOPES}/{scope['id']}/rules", json={"rule_ids": [rule["id"], rule["id"]]})
    assert body(response) == {"code": 200, "msg": "分配成功", "data": [rule["id"]]}
    assert body(await admin_client.get(f"{SCOPES}/{scope['id']}/rules"))["data"] == [rule["id"]]

    response = await admin_client.put(f"{SCOPES}/{scope['id']}/rules", json={"rule_ids": [999]})
    assert response.status_code == 404
    assert body(response)["msg"] == "数据规则 999 不存在"

    # 규칙을 지우면 범위 연결도 정리됩니다
    await admin_client.request("DELETE", RULES, json={"ids": [rule["id"]]})
    assert body(await admin_client.get(f"{SCOPES}/{scope['id']}/rules"))["data"] == []


@pytest.mark.asyncio
async def test_scope_name_conflict_and_missing_scope(admin_client: AsyncClient):
    await admin_client.post(SCOPES, json={"name": "dup"})
    response = await admin_client.post(SCOPES, json={"name": "dup"})
    assert response.status_code == 409
    assert body(response)["msg"] == "数据范围 dup 已存在"

    response = await admin_client.get(f"{SCOPES}/4242/rules")
    assert response.status_code == 404
    assert body(response)["msg"] == "数据范围不存在"


@pytest.mark.asyncio
async def test_role_scopes_resolve_user_rules(admin_client: AsyncClient, db_session: AsyncSession, user_factory):
    rule_a = body(await admin_client.post(RULES, json={
        "name": "a", "model": "User", "column": "status", "value": "1",
    }))["data"]
    rule_b = body(await admin_client.post(RULES, json={
        "name": "b", "model": "Dept", "column": "name", "value": "HQ",
    }))["data"]
    active = body(await admin_client.post(SCOPES, json={"name": "active"}))["data"]
    paused = body(await admin_client.post(SCOPES, json={"name": "paused", "status": 0}))["data"]
    await admin_client.put(f"{SCOPES}/{active['id']}/rules", json={"rule_ids": [rule_a["id"]]})
    await admin_client.put(f"{SCOPES}/{paused['id']}/rules", json={"rule_ids": [rule_b["id"]]})

    role_id = body(await admin_client.post(f"{SYS}/roles", json={"name": "분석가", "code": "analyst"}))["data"]["id"]
    response = await admin_client.put(f"{SYS}/role-data-scopes/{role_id}",
                                      json={"data_scope_ids": [active["id"], paused["id"]]})
    assert body(response)["data"] == [active["id"], paused["id"]]

    user = await user_factory("hal")
    await admin_client.put(f"{SYS}/user-roles/{user.id}", json={"role_ids": [role_id]})

    rules = await scope_crud.data_scope.rules_for_user(db_session, user.id)
    assert [rule.name for rule in rules] == ["a"]

    response = await admin_client.put(f"{SYS}/role-data-scopes/{role_id}", json={"data_scope_ids": [777]})
    assert response.status_code == 404
    assert body(response)["msg"] == "数据范围 777 不存在"

    # 범위를 지우면 역할 연결도 정리됩니다
    await admin_client.request("DELETE", SCOPES, json={"ids": [active["id"]]})
    assert body(await admin_client.get(f"{SYS}/role-data-scopes/{role_id}"))["data"] == [paused["id"]]
