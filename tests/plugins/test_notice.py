# tests/plugins/test_notice.py

"""
'notice' 플러그인 (통지 공고) 통합 테스트 모듈입니다.

페이지 조회, 검증 오류 집계, 일괄 삭제의 끝단 간(end-to-end) 동작을 확인합니다.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.plugins.notice import crud as notice_crud
from fba.plugins.notice import schemas as notice_schemas

from tests.conftest import API, body

NOTICES = f"{API}/sys/notices"


@pytest_asyncio.fixture
async def notices(db_session: AsyncSession):
    """공지 25건 (짝수 번째는 게시 중지)."""
    created = []
    for index in range(25):
        notice_in = notice_schemas.NoticeCreate(
            title=f"공지 {index:02d}", type=index % 2, status=0 if index % 2 == 0 else 1, content="내용",
        )
        created.append(await notice_crud.notice.create(db_session, obj_in=notice_in))
    return created


# --- 조회 ---

@pytest.mark.asyncio
async def test_paged_list_second_page(admin_client: AsyncClient, notices):
    response = await admin_client.get(NOTICES, params={"page": 2, "size": 10})
    assert response.status_code == 200
    payload = body(response)
    assert payload["code"] == 200
    data = payload["data"]
    assert data["total"] == 25
    assert len(data["items"]) == 10
    assert data["page"] == 2
    assert data["pages"] == 3


@pytest.mark.asyncio
async def test_paged_list_when_empty(admin_client: AsyncClient):
    data = body(await admin_client.get(NOTICES, params={"size": 10}))["data"]
    assert data == {"total": 0, "items": [], "page": 1, "size": 10, "pages": 0}


@pytest.mark.asyncio
async def test_page_size_above_limit_is_rejected(admin_client: AsyncClient):
    response = await admin_client.get(NOTICES, params={"size": 101})
    assert response.status_code == 422
    assert body(response)["msg"].startswith("size: ")


@pytest.mark.asyncio
async def test_list_filters(admin_client: AsyncClient, notices):
    data = body(await admin_client.get(NOTICES, params={"title": "공지 1", "size": 100}))["data"]
    assert data["total"] == 10  # 공지 10 ~ 19
    data = body(await admin_client.get(NOTICES, params={"status": 1, "size": 100}))["data"]
    assert data["total"] == 12


@pytest.mark.asyncio
async def test_visible_notices_for_any_user(user_factory, authorized_client_factory, notices):
    await user_factory("viewer", "secret123")
    async with authorized_client_factory("viewer", "secret123") as viewer:
        data = body(await viewer.get(f"{NOTICES}/visible"))["data"]
    assert len(data) == 12
    assert all(item["status"] == 1 for item in data)
    assert data[0]["title"] == "공지 23"


@pytest.mark.asyncio
async def test_all_notices(admin_client: AsyncClient, notices):
    assert len(body(await admin_client.get(f"{NOTICES}/all"))["data"]) == 25


# --- 생성 / 수정 ---

@pytest.mark.asyncio
async def test_create_validation_error_joins_messages(admin_client: AsyncClient):
    response = await admin_client.post(NOTICES, json={"title": "", "type": 0, "status": 0, "content": ""})
    assert response.status_code == 422
    payload = body(response)
    assert payload["code"] == 422
    assert payload["msg"] == "标题长度必须在1-64之间, 内容长度必须在1-50000之间"
    assert "data" not in payload


@pytest.mark.asyncio
async def test_create_and_update_notice(admin_client: AsyncClient):
    response = await admin_client.post(NOTICES, json={"title": "점검", "content": "새벽 점검"})
    payload = body(response)
    assert payload["msg"] == "创建成功"
    notice = payload["data"]
    assert (notice["type"], notice["status"]) == (0, 1)
    assert notice["updated_time"] is None

    response = await admin_client.put(f"{NOTICES}/{notice['id']}", json={"status": 0})
    updated = body(response)["data"]
    assert body(response)["msg"] == "更新成功"
    assert updated["status"] == 0
    assert updated["title"] == "점검"
    assert updated["created_time"] == notice["created_time"]
    assert updated["updated_time"] > updated["created_time"]


@pytest.mark.asyncio
async def test_update_missing_notice(admin_client: AsyncClient):
    response = await admin_client.put(f"{NOTICES}/999999", json={"status": 0})
    assert response.status_code == 404
    assert body(response) == {"code": 404, "msg": "通知公告不存在"}


# --- 삭제 ---

@pytest.mark.asyncio
async def test_batch_delete_with_duplicate_ids(admin_client: AsyncClient, db_session: AsyncSession):
    for title in ("첫째", "둘째"):
        await notice_crud.notice.create(db_session, obj_in=notice_schemas.NoticeCreate(title=title, content="c"))

    response = await admin_client.request("DELETE", NOTICES, json={"ids": [1, 2, 1]})
    assert response.status_code == 200
    assert body(response) == {"code": 200, "msg": "删除成功"}

    for pk in (1, 2):
        response = await admin_client.get(f"{NOTICES}/{pk}")
        assert response.status_code == 404
        assert body(response)["code"] == 404


@pytest.mark.asyncio
async def test_batch_delete_empty_and_repeated(admin_client: AsyncClient, db_session: AsyncSession):
    notice = await notice_crud.notice.create(
        db_session, obj_in=notice_schemas.NoticeCreate(title="한 번", content="c"),
    )
    assert body(await admin_client.request("DELETE", NOTICES, json={"ids": []}))["code"] == 200
    assert body(await admin_client.request("DELETE", NOTICES, json={"ids": [notice.id]}))["code"] == 200
    assert body(await admin_client.request("DELETE", NOTICES, json={"ids": [notice.id]}))["code"] == 200
