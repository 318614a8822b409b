# tests/plugins/test_code_generator.py

"""
'code_generator' 플러그인 통합 테스트 모듈입니다.

테스트 데이터베이스(SQLite)의 실제 테이블을 반영해 업무/컬럼 메타데이터를 만듭니다.
"""

import pytest
from httpx import AsyncClient

from fba.plugins.code_generator import services as gen_services

from tests.conftest import API, body

GEN = f"{API}/generates"


@pytest.mark.parametrize(
    "column_type, python_type, ts_type",
    [
        ("VARCHAR(64)", "str", "string"),
        ("BIGINT", "int", "number"),
        ("TIMESTAMP WITH TIME ZONE", "datetime", "string"),
        ("NUMERIC(10, 2)", "float", "number"),
        ("JSONB", "dict", "object"),
        ("GEOMETRY", "str", "string"),
    ],
)
def test_type_mapping(column_type, python_type, ts_type):
    assert gen_services.python_type(column_type) == python_type
    assert gen_services.ts_type(column_type) == ts_type


def test_pascal_case():
    assert gen_services.pascal_case("sys_dict_type") == "SysDictType"


@pytest.mark.asyncio
async def test_list_tables_and_columns(admin_client: AsyncClient):
    tables = body(await admin_client.get(f"{GEN}/codes/tables"))["data"]
    names = [table["table_name"] for table in tables]
    assert "sys_notice" in names
    assert names == sorted(names)

    columns = body(await admin_client.get(f"{GEN}/codes/tables/sys_notice/columns"))["data"]
    by_name = {column["column_name"]: column for column in columns}
    assert by_name["id"]["column_key"] == "PRI"
    assert by_name["title"]["data_type"] == "varchar"
    assert by_name["title"]["is_nullable"] == "NO"
    assert by_name["updated_time"]["is_nullable"] == "YES"


@pytest.mark.asyncio
async def test_columns_of_missing_table(admin_client: AsyncClient):
    response = await admin_client.get(f"{GEN}/codes/tables/no_such_table/columns")
    assert response.status_code == 404
    assert body(response) == {"code": 404, "msg": "数据库表不存在"}


@pytest.mark.asyncio
async def test_import_table(admin_client: AsyncClient):
    response = await admin_client.post(f"{GEN}/businesses/import", json={"app": "notice", "table_name": "sys_notice"})
    assert response.status_code == 200
    payload = body(response)
    assert payload["msg"] == "导入成功"
    business = payload["data"]
    assert business["class_name"] == "SysNotice"
    assert business["filename"] == "sys_notice"
    assert business["doc_comment"] == "notice"

    columns = body(await admin_client.get(f"{GEN}/businesses/{business['id']}/columns"))["data"]
    by_name = {column["column_name"]: column for column in columns}
    assert [column["sort"] for column in columns] == list(range(len(columns)))
    assert by_name["id"]["is_pk"] is True
    assert by_name["id"]["is_form"] is False
    assert by_name["title"]["python_type"] == "str"
    assert by_name["title"]["required"] is True
    assert by_name["type"]["python_type"] == "int"
    assert by_name["type"]["ts_type"] == "number"

    paths = body(await admin_client.get(f"{GEN}/businesses/{business['id']}/paths"))["data"]["paths"]
    assert paths == [
        "backend/app/notice/api/v1/sys_notice.py",
        "backend/app/notice/model/sys_notice.py",
        "backend/app/notice/schema/sys_notice.py",
        "backend/app/notice/service/sys_notice_service.py",
        "backend/app/notice/crud/crud_sys_notice.py",
    ]


@pytest.mark.asyncio
async def test_import_errors(admin_client: AsyncClient):
    await admin_client.post(f"{GEN}/businesses/import", json={"app": "notice", "table_name": "sys_notice"})
    response = await admin_client.post(f"{GEN}/businesses/import", json={"app": "notice", "table_name": "sys_notice"})
    assert response.status_code == 409
    assert body(response)["msg"] == "已存在相同数据库表业务"

    response = await admin_client.post(f"{GEN}/businesses/import", json={"app": "x", "table_name": "ghost_table"})
    assert response.status_code == 404
    assert body(response)["msg"] == "数据库表不存在"

    response = await admin_client.post(f"{GEN}/businesses/import", json={"app": "1x", "table_name": "bad-name"})
    assert response.status_code == 422
    assert body(response)["msg"] == "应用名称只能包含字母、数字和下划线, 表名只能包含字母、数字和下划线"


@pytest.mark.asyncio
async def test_business_update_and_cascading_delete(admin_client: AsyncClient):
    business = body(await admin_client.post(
        f"{GEN}/businesses/import", json={"app": "notice", "table_name": "sys_notice"},
    ))["data"]

    response = await admin_client.put(
        f"{GEN}/businesses/{business['id']}", json={"gen_path": "src/notice", "api_version": "v2"},
    )
    updated = body(response)["data"]
    assert updated["table_name"] == "sys_notice"
    paths = body(await admin_client.get(f"{GEN}/businesses/{business['id']}/paths"))["data"]["paths"]
    assert paths[0] == "src/notice/api/v2/sys_notice.py"

    response = await admin_client.delete(f"{GEN}/businesses/{business['id']}")
    assert body(response) == {"code": 200, "msg": "删除成功"}
    assert (await admin_client.get(f"{GEN}/businesses/{business['id']}")).status_code == 404
    response = await admin_client.get(f"{GEN}/businesses/{business['id']}/columns")
    assert response.status_code == 404
    assert body(response)["msg"] == "业务不存在"


@pytest.mark.asyncio
async def test_manual_business_listing(admin_client: AsyncClient):
    response = await admin_client.post(f"{GEN}/businesses", json={
        "app_name": "shop", "table_name": "shop_order", "doc_comment": "주문",
    })
    assert body(response)["msg"] == "创建成功"

    data = body(await admin_client.get(f"{GEN}/businesses", params={"app_name": "sho"}))["data"]
    assert data["total"] == 1
    assert len(body(await admin_client.get(f"{GEN}/businesses/all"))["data"]) == 1
