# fba/plugins/schedule/routers.py

"""
'schedule' 플러그인 (정기 작업 정의) 의 API 엔드포인트입니다.
작업 정의만 관리하며 실제 실행은 arq worker 배포의 몫입니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.schemas import DeleteBatch
from fba.middleware.opera_log import BusinessType, operation_log

from . import crud as schedule_crud
from . import schemas as schedule_schemas


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/schedule-jobs", tags=["System - Schedule Jobs (정기 작업)"])
    auth = state.auth

    @router.get("/all", response_model=ResponseModel[List[schedule_schemas.ScheduleJobRead]], summary="모든 작업",
                dependencies=[Depends(auth.require_permission("sys:schedule:list"))])
    async def read_all_jobs(db: AsyncSession = Depends(state.get_session)):
        rows = await schedule_crud.schedule_job.get_multi(db)
        return success([schedule_schemas.ScheduleJobRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[schedule_schemas.ScheduleJobRead]],
                summary="작업 페이지 조회", dependencies=[Depends(auth.require_permission("sys:schedule:list"))])
    async def read_jobs(
        params: PageParams = Depends(page_params),
        job_name: Optional[str] = Query(None),
        job_group: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await schedule_crud.schedule_job.get_page(
            db, params=params, filters={"status": status},
            like_filters={"job_name": job_name, "job_group": job_group},
        )
        items = [schedule_schemas.ScheduleJobRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[schedule_schemas.ScheduleJobRead], summary="작업 상세",
                dependencies=[Depends(auth.require_permission("sys:schedule:list"))])
    async def read_job(pk: int, db: AsyncSession = Depends(state.get_session)):
        db_job = await schedule_crud.schedule_job.get_or_404(db, pk)
        return success(schedule_schemas.ScheduleJobRead.model_validate(db_job))

    @router.post("", response_model=ResponseModel[schedule_schemas.ScheduleJobRead], summary="작업 생성",
                 dependencies=[Depends(auth.require_permission("sys:schedule:add")),
                               Depends(operation_log("定时任务", BusinessType.CREATE))])
    async def create_job(job_in: schedule_schemas.ScheduleJobCreate, db: AsyncSession = Depends(state.get_session)):
        db_job = await schedule_crud.schedule_job.create(db, obj_in=job_in)
        return success_with("创建成功", schedule_schemas.ScheduleJobRead.model_validate(db_job))

    @router.put("/{pk}", response_model=ResponseModel[schedule_schemas.ScheduleJobRead], summary="작업 수정",
                dependencies=[Depends(auth.require_permission("sys:schedule:edit")),
                              Depends(operation_log("定时任务", BusinessType.UPDATE))])
    async def update_job(
        pk: int,
        job_in: schedule_schemas.ScheduleJobUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_job = await schedule_crud.schedule_job.get_or_404(db, pk)
        db_job = await schedule_crud.schedule_job.update(db, db_obj=db_job, obj_in=job_in)
        return success_with("更新成功", schedule_schemas.ScheduleJobRead.model_validate(db_job))

    @router.put("/{pk}/status", response_model=ResponseModel[schedule_schemas.ScheduleJobRead],
                summary="작업 상태 변경 (정상/일시 정지)",
                dependencies=[Depends(auth.require_permission("sys:schedule:edit")),
                              Depends(operation_log("定时任务状态", BusinessType.UPDATE))])
    async def update_job_status(
        pk: int,
        status_in: schedule_schemas.ScheduleJobStatusUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_job = await schedule_crud.schedule_job.set_status(db, pk, status_in.status)
        return success_with("状态更新成功", schedule_schemas.ScheduleJobRead.model_validate(db_job))

    @router.delete("", response_model=MessageModel, summary="작업 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:schedule:del")),
                                 Depends(operation_log("定时任务", BusinessType.DELETE))])
    async def delete_jobs(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await schedule_crud.schedule_job.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router
