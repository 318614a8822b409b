# tests/test_core.py

"""
fba.core 의 공통 구성 요소에 대한 단위 테스트입니다.

- 응답 봉투와 오류 종류 매핑
- 선언적 검증 규칙과 검증 메시지 집계
- 페이지 계산
- 플러그인 조립기 (요구 핸들, 경로 충돌)
- CRUDBase 의 타임스탬프 / 소프트 삭제 / 고유성 정책
"""

import json
from typing import Annotated

import pytest
import pytest_asyncio
from fastapi import APIRouter
from pydantic import TypeAdapter, ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core import exceptions
from fba.core.composer import HostHandles, PluginCompositionError, compose_plugins
from fba.core.database import build_engine, build_session_factory
from fba.core.exceptions import ErrorKind, collect_validation_messages, validation_message
from fba.core.models import utc_now
from fba.core.pagination import PageData, PageParams, total_pages
from fba.core.plugin import MountKind, Plugin, PluginInfo, PluginMount, PluginState, Requirement
from fba.core.response import error, success, success_msg, success_with
from fba.core.security import Authenticator
from fba.core.validators import cron, email
from fba.plugins.config import crud as config_crud
from fba.plugins.config import errors as config_errors
from fba.plugins.config import schemas as config_schemas
from fba.plugins.notice import crud as notice_crud
from fba.plugins.notice import models as notice_models
from fba.plugins.notice import schemas as notice_schemas
from fba.plugins.system import crud as sys_crud
from fba.plugins.system import schemas as sys_schemas
from fba.plugins.system.crud import SystemCredentialsSource


def _json(response) -> dict:
    return json.loads(response.body)


# --- 응답 봉투 ---

def test_success_envelope_shapes():
    assert _json(success({"a": 1})) == {"code": 200, "msg": "success", "data": {"a": 1}}
    assert _json(success_msg("删除成功")) == {"code": 200, "msg": "删除成功"}
    assert _json(success_with("创建成功", [1, 2])) == {"code": 200, "msg": "创建成功", "data": [1, 2]}


def test_error_envelope_omits_data_and_uses_code_as_status():
    response = error(404, "配置不存在")
    assert response.status_code == 404
    assert _json(response) == {"code": 404, "msg": "配置不存在"}


@pytest.mark.parametrize("kind, expected", [
    (ErrorKind.DATABASE_ERROR, (500, 500)),
    (ErrorKind.NOT_FOUND, (404, 404)),
    (ErrorKind.ALREADY_EXISTS, (409, 409)),
    (ErrorKind.OPERATION_FAILED, (400, 400)),
    (ErrorKind.VALIDATION_ERROR, (422, 422)),
    (ErrorKind.PERMISSION_DENIED, (403, 403)),
    (ErrorKind.UPSTREAM_API_FAILURE, (502, 502)),
])
def test_error_kind_mapping(kind, expected):
    assert (kind.http_status, kind.code) == expected


def test_plugin_error_carries_its_own_message():
    err = config_errors.ConfigKeyExistsError("site.name")
    response = err.to_response()
    assert response.status_code == 409
    assert _json(response) == {"code": 409, "msg": "配置键 site.name 已存在"}


@pytest.mark.parametrize("error_class, kind", [
    (exceptions.DatabaseError, ErrorKind.DATABASE_ERROR),
    (exceptions.NotFoundError, ErrorKind.NOT_FOUND),
    (exceptions.AlreadyExistsError, ErrorKind.ALREADY_EXISTS),
    (exceptions.OperationFailedError, ErrorKind.OPERATION_FAILED),
    (exceptions.ValidationFailedError, ErrorKind.VALIDATION_ERROR),
    (exceptions.PermissionDeniedError, ErrorKind.PERMISSION_DENIED),
    (exceptions.UpstreamApiError, ErrorKind.UPSTREAM_API_FAILURE),
])
def test_generic_errors_use_default_messages(error_class, kind):
    response = error_class().to_response()
    assert response.status_code == kind.http_status
    assert _json(response) == {"code": kind.code, "msg": error_class.default_message}


def test_permission_denied_hides_reason():
    err = exceptions.PermissionDeniedError("missing sys:user:add")
    assert err.message == "permission denied"


def test_upstream_error_appends_status():
    assert exceptions.UpstreamApiError("upstream failed", upstream_status=503).message == "upstream failed (status 503)"


# --- 검증 규칙 / 메시지 집계 ---

def test_validation_messages_follow_field_order():
    with pytest.raises(ValidationError) as exc_info:
        notice_schemas.NoticeCreate.model_validate({"title": "", "type": 0, "status": 0, "content": ""})
    message = validation_message(exc_info.value.errors())
    assert message == "标题长度必须在1-64之间, 内容长度必须在1-50000之间"


def test_passing_fields_contribute_nothing():
    with pytest.raises(ValidationError) as exc_info:
        notice_schemas.NoticeCreate.model_validate({"title": "ok", "type": 5, "status": 1, "content": "body"})
    assert collect_validation_messages(exc_info.value.errors()) == ["类型必须是0或1"]


def test_builtin_errors_are_prefixed_with_field_name():
    with pytest.raises(ValidationError) as exc_info:
        notice_schemas.NoticeCreate.model_validate({"title": "ok"})
    messages = collect_validation_messages(exc_info.value.errors())
    assert len(messages) == 1
    assert messages[0].startswith("content: ")


def test_one_message_per_field_even_with_several_rules():
    """길이와 패턴 규칙이 모두 걸려 있는 필드라도 메시지는 하나입니다."""
    with pytest.raises(ValidationError) as exc_info:
        config_schemas.ConfigCreate.model_validate({"name": "n", "key": "bad key!"})
    assert collect_validation_messages(exc_info.value.errors()) == ["配置键只能包含字母、数字、点和下划线"]


def test_optional_fields_skip_rules_when_absent():
    notice_in = notice_schemas.NoticeUpdate.model_validate({"status": 0})
    assert notice_in.title is None
    assert notice_in.model_dump(exclude_unset=True) == {"status": 0}


EmailField = Annotated[str, email("邮箱格式不正确")]
CronField = Annotated[str, cron("cron表达式格式不正确")]


@pytest.mark.parametrize("address", ["o'brien@example.com", "user@例え.jp", "first.last+tag@sub.example.co.kr"])
def test_email_rule_accepts_real_addresses(address):
    assert TypeAdapter(EmailField).validate_python(address) == address


@pytest.mark.parametrize("address", ["not-an-email", "a@b", "two@@example.com", "space in@example.com"])
def test_email_rule_rejects_malformed_addresses(address):
    with pytest.raises(ValidationError) as exc_info:
        TypeAdapter(EmailField).validate_python(address)
    assert collect_validation_messages(exc_info.value.errors()) == ["邮箱格式不正确"]


@pytest.mark.parametrize("expression", ["0 3 * * *", "*/5 * * * *", "0 9 * * MON-FRI", "30 0 3 * * *"])
def test_cron_rule_accepts_valid_expressions(expression):
    assert TypeAdapter(CronField).validate_python(expression) == expression


@pytest.mark.parametrize("expression", [
    "99 99 99 99 99",
    "foo bar baz qux quux",
    "*/0 * * * *",
    "0 3 * * * * 2030",
])
def test_cron_rule_rejects_out_of_range_fields(expression):
    with pytest.raises(ValidationError) as exc_info:
        TypeAdapter(CronField).validate_python(expression)
    assert collect_validation_messages(exc_info.value.errors()) == ["cron表达式格式不正确"]


# --- 페이지 ---

@pytest.mark.parametrize("total, size, expected", [
    (0, 10, 0),
    (1, 10, 1),
    (10, 10, 1),
    (25, 10, 3),
    (100, 100, 1),
])
def test_total_pages(total, size, expected):
    assert total_pages(total, size) == expected


def test_page_params_offset_and_bounds():
    params = PageParams(page=3, size=20)
    assert (params.offset, params.limit) == (40, 20)
    with pytest.raises(ValidationError):
        PageParams(page=0)
    with pytest.raises(ValidationError):
        PageParams(size=101)


def test_page_data_for_empty_result():
    page = PageData.build([], 0, PageParams())
    assert page.model_dump() == {"total": 0, "items": [], "page": 1, "size": 10, "pages": 0}


# --- 플러그인 조립 ---

class EchoPlugin(Plugin):
    INFO = PluginInfo(name="echo", version="0.0.1", description="echo", author="test")
    MOUNT = PluginMount.extension("echo")

    def create_router(self, state: PluginState) -> APIRouter:
        router = APIRouter(prefix="/echo")

        @router.get("")
        async def echo():
            return success("echo")

        return router


class EchoTwinPlugin(EchoPlugin):
    INFO = PluginInfo(name="echo-twin", version="0.0.1", description="same leaf", author="test")


class CachedEchoPlugin(EchoPlugin):
    INFO = PluginInfo(name="cached-echo", version="0.0.1", description="needs cache", author="test")
    MOUNT = PluginMount.extension("cached-echo")
    REQUIRES = frozenset({Requirement.CACHE})

    def create_router(self, state: PluginState) -> APIRouter:
        return APIRouter(prefix="/cached-echo")


class StrayRoutePlugin(EchoPlugin):
    """선언한 leaf(stray) 밖의 경로를 노출합니다."""
    INFO = PluginInfo(name="stray", version="0.0.1", description="stray", author="test")
    MOUNT = PluginMount.extension("stray")


class AdminSquatterPlugin(EchoPlugin):
    INFO = PluginInfo(name="squatter", version="0.0.1", description="squatter", author="test")
    MOUNT = PluginMount.independent("sys")


@pytest.fixture
def handles(settings) -> HostHandles:
    # 라우터 조립만 검사하므로 연결하지 않는 엔진으로 충분합니다.
    session_factory = build_session_factory(build_engine(settings))
    authenticator = Authenticator(
        secret_key=settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
        access_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        refresh_expire_minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES,
        session_factory=session_factory,
        source=SystemCredentialsSource(),
        token_url="/api/v1/auth/token",
    )
    return HostHandles(db=session_factory, auth=authenticator)


def test_compose_mounts_extension_under_admin_namespace(handles):
    router, registry = compose_plugins([EchoPlugin()], handles)
    assert [mounted.info.name for mounted in registry] == ["echo"]
    assert registry[0].kind is MountKind.EXTENSION
    assert registry[0].paths == ("/api/v1/sys/echo",)
    assert "/api/v1/sys/echo" in {route.path for route in router.routes}


def test_compose_fails_on_missing_handle(handles):
    with pytest.raises(PluginCompositionError) as exc_info:
        compose_plugins([CachedEchoPlugin()], handles)
    assert "cached-echo" in str(exc_info.value)
    assert "cache" in str(exc_info.value)


def test_compose_fails_on_duplicate_mount_path(handles):
    with pytest.raises(PluginCompositionError) as exc_info:
        compose_plugins([EchoPlugin(), EchoTwinPlugin()], handles)
    assert "already mounted by plugin 'echo'" in str(exc_info.value)


def test_compose_fails_on_duplicate_plugin_name(handles):
    with pytest.raises(PluginCompositionError):
        compose_plugins([EchoPlugin(), EchoPlugin()], handles)


def test_compose_rejects_routes_outside_declared_leaves(handles):
    with pytest.raises(PluginCompositionError) as exc_info:
        compose_plugins([StrayRoutePlugin()], handles)
    assert "outside its declared leaves" in str(exc_info.value)


def test_compose_rejects_independent_mount_on_admin_namespace(handles):
    with pytest.raises(PluginCompositionError):
        compose_plugins([AdminSquatterPlugin()], handles)


def test_every_plugin_state_shares_the_registry(handles):
    states = []

    class Recorder(EchoPlugin):
        def create_router(self, state: PluginState) -> APIRouter:
            states.append(state)
            return super().create_router(state)

    class RecorderTwin(Recorder):
        INFO = PluginInfo(name="recorder-twin", version="0.0.1", description="", author="test")
        MOUNT = PluginMount.extension("echo-twin")

        def create_router(self, state: PluginState) -> APIRouter:
            states.append(state)
            return APIRouter(prefix="/echo-twin")

    _, registry = compose_plugins([Recorder(), RecorderTwin()], handles)
    assert states[0].registry is states[1].registry is registry


# --- CRUDBase 정책 ---

@pytest_asyncio.fixture
async def notice(db_session: AsyncSession):
    notice_in = notice_schemas.NoticeCreate(title="점검 공지", content="서버 점검")
    return await notice_crud.notice.create(db_session, obj_in=notice_in)


@pytest.mark.asyncio
async def test_create_sets_created_time_only(notice):
    assert notice.id is not None
    assert notice.created_time is not None
    assert notice.updated_time is None


@pytest.mark.asyncio
async def test_updates_keep_updated_time_monotonic(db_session: AsyncSession, notice):
    created_time = notice.created_time
    first = await notice_crud.notice.update(db_session, db_obj=notice, obj_in={"title": "1차 수정"})
    first_updated = first.updated_time
    assert first_updated > created_time

    second = await notice_crud.notice.update(
        db_session, db_obj=first, obj_in=notice_schemas.NoticeUpdate(status=0),
    )
    assert second.updated_time >= first_updated
    assert second.created_time == created_time
    assert second.title == "1차 수정"


@pytest.mark.asyncio
async def test_update_ignores_null_for_required_columns(db_session: AsyncSession, notice):
    updated = await notice_crud.notice.update(db_session, db_obj=notice, obj_in={"title": None})
    assert updated.title == "점검 공지"


@pytest.mark.asyncio
async def test_soft_deleted_rows_are_invisible(db_session: AsyncSession):
    dept = await sys_crud.dept.create(db_session, obj_in=sys_schemas.DeptCreate(name="개발팀"))
    assert await sys_crud.dept.count(db_session) == 1

    assert await sys_crud.dept.delete_batch(db_session, ids=[dept.id]) == 1
    assert await sys_crud.dept.get(db_session, dept.id) is None
    assert await sys_crud.dept.get_multi(db_session) == []
    assert await sys_crud.dept.count(db_session) == 0
    # 이미 삭제된 행은 다시 세지 않습니다.
    assert await sys_crud.dept.delete_batch(db_session, ids=[dept.id]) == 0


@pytest.mark.asyncio
async def test_hard_delete_is_idempotent(db_session: AsyncSession, notice):
    assert await notice_crud.notice.delete_batch(db_session, ids=[notice.id, notice.id, 9999]) == 1
    assert await notice_crud.notice.get(db_session, notice.id) is None
    assert await notice_crud.notice.delete_batch(db_session, ids=[notice.id]) == 0
    assert await notice_crud.notice.delete_batch(db_session, ids=[]) == 0


@pytest.mark.asyncio
async def test_unique_field_conflict_raises_plugin_error(db_session: AsyncSession):
    config_in = config_schemas.ConfigCreate(name="사이트", key="site.name", value="fba")
    await config_crud.config.create(db_session, obj_in=config_in)
    with pytest.raises(config_errors.ConfigKeyExistsError):
        await config_crud.config.create(db_session, obj_in=config_in)


@pytest.mark.asyncio
async def test_unique_violation_at_commit_names_the_conflicting_value(db_session: AsyncSession, monkeypatch):
    """사전 검사를 통과한 뒤 제약 조건에 걸려도 어떤 값이 충돌했는지 알려줍니다."""
    config_in = config_schemas.ConfigCreate(name="사이트", key="site.name", value="fba")
    await config_crud.config.create(db_session, obj_in=config_in)

    real_check = config_crud.config._check_unique
    checked = []

    async def check_only_after_write(db, values, exclude_id=None):
        # 첫 호출(쓰기 전 검사)은 동시 요청에 밀린 것처럼 통과시킵니다.
        checked.append(values["key"])
        if len(checked) > 1:
            await real_check(db, values, exclude_id)

    monkeypatch.setattr(config_crud.config, "_check_unique", check_only_after_write)
    with pytest.raises(config_errors.ConfigKeyExistsError) as exc_info:
        await config_crud.config.create(db_session, obj_in=config_in)
    assert exc_info.value.message == "配置键 site.name 已存在"
    assert checked == ["site.name", "site.name"]
    assert await config_crud.config.count(db_session) == 1


@pytest.mark.asyncio
async def test_other_integrity_violations_are_database_errors(db_session: AsyncSession):
    db_session.add(notice_models.Notice(title=None, content="제목 없음", created_time=utc_now()))
    with pytest.raises(exceptions.DatabaseError) as exc_info:
        await notice_crud.notice._commit(db_session, {"title": None})
    assert exc_info.value.kind is ErrorKind.DATABASE_ERROR
    assert exc_info.value.message.startswith("数据库错误: ")
    assert await notice_crud.notice.count(db_session) == 0


@pytest.mark.asyncio
async def test_get_page_filters_and_orders(db_session: AsyncSession):
    for index in range(5):
        await notice_crud.notice.create(
            db_session,
            obj_in=notice_schemas.NoticeCreate(title=f"공지 {index}", type=index % 2, content="내용"),
        )
    items, total = await notice_crud.notice.get_page(
        db_session, params=PageParams(page=1, size=2), filters={"type": 0, "status": None},
    )
    assert total == 3
    assert [item.title for item in items] == ["공지 4", "공지 2"]

    items, total = await notice_crud.notice.get_page(
        db_session, params=PageParams(), like_filters={"title": "3"},
    )
    assert total == 1
    assert items[0].title == "공지 3"
