# fba/plugins/file/routers.py

"""
'file' 플러그인의 API 엔드포인트 (업로드, 조회, 다운로드, 삭제) 입니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import FileResponse
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.schemas import DeleteBatch
from fba.core.security import AuthContext
from fba.middleware.opera_log import BusinessType, operation_log

from . import crud as file_crud
from . import schemas as file_schemas
from . import services as file_services


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/files", tags=["System - Files (파일 관리)"])
    auth = state.auth

    @router.post("/upload", response_model=ResponseModel[file_schemas.FileInfoRead], summary="파일 업로드",
                 dependencies=[Depends(operation_log("文件上传", BusinessType.CREATE))])
    async def upload_file(
        file: UploadFile = File(..., description="업로드할 파일"),
        ctx: AuthContext = Depends(auth.require_permission("sys:file:add")),
        db: AsyncSession = Depends(state.get_session),
    ):
        db_obj = await file_services.upload_file(
            db, upload_dir=state.upload_dir, max_size=state.upload_max_size, upload=file, uploader=ctx,
        )
        return success_with("上传成功", file_services.to_read(db_obj))

    @router.get("", response_model=ResponseModel[PageData[file_schemas.FileInfoRead]], summary="파일 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:file:list"))])
    async def read_files(
        params: PageParams = Depends(page_params),
        original_name: Optional[str] = Query(None),
        content_type: Optional[str] = Query(None),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await file_crud.file_info.get_page(
            db, params=params, filters={"content_type": content_type}, like_filters={"original_name": original_name},
        )
        return success(PageData.build([file_services.to_read(row) for row in rows], total, params))

    @router.get("/{pk}", response_model=ResponseModel[file_schemas.FileInfoRead], summary="파일 정보 조회",
                dependencies=[Depends(auth.require_permission("sys:file:list"))])
    async def read_file(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(file_services.to_read(await file_crud.file_info.get_or_404(db, pk)))

    @router.get("/{pk}/download", summary="파일 다운로드",
                dependencies=[Depends(auth.require_permission("sys:file:list"))])
    async def download_file(pk: int, db: AsyncSession = Depends(state.get_session)):
        db_obj = await file_crud.file_info.get_or_404(db, pk)
        path = file_services.stored_path(state.upload_dir, db_obj)
        db_obj = await file_crud.file_info.increase_download_count(db, pk)
        return FileResponse(
            path,
            media_type=db_obj.content_type or "application/octet-stream",
            filename=db_obj.original_name,
        )

    @router.delete("", response_model=MessageModel, summary="파일 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:file:del")),
                                 Depends(operation_log("文件管理", BusinessType.DELETE))])
    async def delete_files(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        # 메타데이터만 소프트 삭제하고 디스크 파일은 남겨 둡니다.
        await file_crud.file_info.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router
