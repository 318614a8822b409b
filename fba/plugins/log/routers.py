# fba/plugins/log/routers.py

"""
'log' 플러그인의 API 엔드포인트 (로그인/작업/접근 로그 조회와 삭제) 입니다.

이 경로들은 접근 로그 미들웨어의 기록 대상에서 제외됩니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg
from fba.core.schemas import DeleteBatch

from . import crud as log_crud
from . import schemas as log_schemas


def build_login_log_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/login", tags=["Logs - Login (로그인 로그)"])
    list_perm = [Depends(state.auth.require_permission("sys:log:list"))]
    del_perm = [Depends(state.auth.require_permission("sys:log:del"))]

    @router.get("", response_model=ResponseModel[PageData[log_schemas.LoginLogRead]], summary="로그인 로그 페이지 조회",
                dependencies=list_perm)
    async def read_login_logs(
        params: PageParams = Depends(page_params),
        username: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        ip: Optional[str] = Query(None),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await log_crud.login_log.get_page(
            db, params=params, filters={"status": status}, like_filters={"username": username, "ip": ip},
        )
        items = [log_schemas.LoginLogRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[log_schemas.LoginLogRead], summary="로그인 로그 상세",
                dependencies=list_perm)
    async def read_login_log(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(log_schemas.LoginLogRead.model_validate(await log_crud.login_log.get_or_404(db, pk)))

    @router.delete("/all", response_model=MessageModel, summary="로그인 로그 비우기", dependencies=del_perm)
    async def clear_login_logs(db: AsyncSession = Depends(state.get_session)):
        await log_crud.login_log.clear(db)
        return success_msg("清空成功")

    @router.delete("", response_model=MessageModel, summary="로그인 로그 일괄 삭제", dependencies=del_perm)
    async def delete_login_logs(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await log_crud.login_log.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router


def build_opera_log_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/opera", tags=["Logs - Operation (작업 로그)"])
    list_perm = [Depends(state.auth.require_permission("sys:log:list"))]
    del_perm = [Depends(state.auth.require_permission("sys:log:del"))]

    @router.get("", response_model=ResponseModel[PageData[log_schemas.OperaLogRead]], summary="작업 로그 페이지 조회",
                dependencies=list_perm)
    async def read_opera_logs(
        params: PageParams = Depends(page_params),
        username: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        ip: Optional[str] = Query(None),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await log_crud.opera_log.get_page(
            db, params=params, filters={"status": status}, like_filters={"username": username, "ip": ip},
        )
        items = [log_schemas.OperaLogRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[log_schemas.OperaLogRead], summary="작업 로그 상세",
                dependencies=list_perm)
    async def read_opera_log(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(log_schemas.OperaLogRead.model_validate(await log_crud.opera_log.get_or_404(db, pk)))

    @router.delete("/all", response_model=MessageModel, summary="작업 로그 비우기", dependencies=del_perm)
    async def clear_opera_logs(db: AsyncSession = Depends(state.get_session)):
        await log_crud.opera_log.clear(db)
        return success_msg("清空成功")

    @router.delete("", response_model=MessageModel, summary="작업 로그 일괄 삭제", dependencies=del_perm)
    async def delete_opera_logs(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await log_crud.opera_log.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router


def build_access_log_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/access", tags=["Logs - Access (접근 로그)"])
    list_perm = [Depends(state.auth.require_permission("sys:log:list"))]
    del_perm = [Depends(state.auth.require_permission("sys:log:del"))]

    @router.get("", response_model=ResponseModel[PageData[log_schemas.AccessLogRead]], summary="접근 로그 페이지 조회",
                dependencies=list_perm)
    async def read_access_logs(
        params: PageParams = Depends(page_params),
        user_name: Optional[str] = Query(None),
        is_error: Optional[bool] = Query(None),
        client_ip: Optional[str] = Query(None),
        method: Optional[str] = Query(None),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await log_crud.access_log.get_page(
            db, params=params,
            filters={"is_error": is_error, "method": method.upper() if method else None},
            like_filters={"user_name": user_name, "client_ip": client_ip},
        )
        items = [log_schemas.AccessLogRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[log_schemas.AccessLogRead], summary="접근 로그 상세",
                dependencies=list_perm)
    async def read_access_log(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(log_schemas.AccessLogRead.model_validate(await log_crud.access_log.get_or_404(db, pk)))

    @router.delete("/all", response_model=MessageModel, summary="접근 로그 비우기", dependencies=del_perm)
    async def clear_access_logs(db: AsyncSession = Depends(state.get_session)):
        await log_crud.access_log.clear(db)
        return success_msg("清空成功")

    @router.delete("", response_model=MessageModel, summary="접근 로그 일괄 삭제", dependencies=del_perm)
    async def delete_access_logs(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await log_crud.access_log.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter()
    router.include_router(build_login_log_router(state))
    router.include_router(build_opera_log_router(state))
    router.include_router(build_access_log_router(state))
    return router
