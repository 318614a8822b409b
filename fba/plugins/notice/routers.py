# fba/plugins/notice/routers.py

"""
'notice' 플러그인 (통지 공고) 의 API 엔드포인트입니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.schemas import DeleteBatch
from fba.middleware.opera_log import BusinessType, operation_log

from . import crud as notice_crud
from . import schemas as notice_schemas


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/notices", tags=["System - Notices (통지 공고)"])
    auth = state.auth

    @router.get("/all", response_model=ResponseModel[List[notice_schemas.NoticeRead]], summary="모든 공지 조회",
                dependencies=[Depends(auth.require_permission("sys:notice:list"))])
    async def read_all_notices(db: AsyncSession = Depends(state.get_session)):
        rows = await notice_crud.notice.get_multi(db)
        return success([notice_schemas.NoticeRead.model_validate(row) for row in rows])

    @router.get("/visible", response_model=ResponseModel[List[notice_schemas.NoticeRead]], summary="게시 중인 공지",
                dependencies=[Depends(auth.current_user)])
    async def read_visible_notices(db: AsyncSession = Depends(state.get_session)):
        rows = await notice_crud.notice.get_visible(db)
        return success([notice_schemas.NoticeRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[notice_schemas.NoticeRead]], summary="공지 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:notice:list"))])
    async def read_notices(
        params: PageParams = Depends(page_params),
        title: Optional[str] = Query(None, description="제목 (부분 일치)"),
        type: Optional[int] = Query(None, ge=0, le=1),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await notice_crud.notice.get_page(
            db, params=params, filters={"type": type, "status": status}, like_filters={"title": title},
        )
        items = [notice_schemas.NoticeRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[notice_schemas.NoticeRead], summary="공지 상세 조회",
                dependencies=[Depends(auth.require_permission("sys:notice:list"))])
    async def read_notice(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(notice_schemas.NoticeRead.model_validate(await notice_crud.notice.get_or_404(db, pk)))

    @router.post("", response_model=ResponseModel[notice_schemas.NoticeRead], summary="공지 생성",
                 dependencies=[Depends(auth.require_permission("sys:notice:add")),
                               Depends(operation_log("通知公告", BusinessType.CREATE))])
    async def create_notice(notice_in: notice_schemas.NoticeCreate, db: AsyncSession = Depends(state.get_session)):
        db_notice = await notice_crud.notice.create(db, obj_in=notice_in)
        return success_with("创建成功", notice_schemas.NoticeRead.model_validate(db_notice))

    @router.put("/{pk}", response_model=ResponseModel[notice_schemas.NoticeRead], summary="공지 수정",
                dependencies=[Depends(auth.require_permission("sys:notice:edit")),
                              Depends(operation_log("通知公告", BusinessType.UPDATE))])
    async def update_notice(
        pk: int,
        notice_in: notice_schemas.NoticeUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_notice = await notice_crud.notice.get_or_404(db, pk)
        db_notice = await notice_crud.notice.update(db, db_obj=db_notice, obj_in=notice_in)
        return success_with("更新成功", notice_schemas.NoticeRead.model_validate(db_notice))

    @router.delete("", response_model=MessageModel, summary="공지 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:notice:del")),
                                 Depends(operation_log("通知公告", BusinessType.DELETE))])
    async def delete_notices(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await notice_crud.notice.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router
