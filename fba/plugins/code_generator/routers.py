# fba/plugins/code_generator/routers.py

"""
'code_generator' 플러그인의 API 엔드포인트입니다.

    /businesses ...   코드 생성 업무(대상 테이블) 메타데이터
    /codes/tables ... 데이터베이스 테이블/컬럼 반영 조회
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.middleware.opera_log import BusinessType, operation_log

from . import crud as gen_crud
from . import schemas as gen_schemas
from . import services as gen_services


def build_businesses_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/businesses", tags=["CodeGen - Businesses (코드 생성 업무)"])
    auth = state.auth

    @router.get("/all", response_model=ResponseModel[List[gen_schemas.GenBusinessRead]], summary="모든 업무",
                dependencies=[Depends(auth.require_permission("sys:gen:list"))])
    async def read_all_businesses(db: AsyncSession = Depends(state.get_session)):
        rows = await gen_crud.gen_business.get_multi(db)
        return success([gen_schemas.GenBusinessRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[gen_schemas.GenBusinessRead]], summary="업무 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:gen:list"))])
    async def read_businesses(
        params: PageParams = Depends(page_params),
        table_name: Optional[str] = Query(None),
        app_name: Optional[str] = Query(None),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await gen_crud.gen_business.get_page(
            db, params=params, like_filters={"table_name": table_name, "app_name": app_name},
        )
        items = [gen_schemas.GenBusinessRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.post("", response_model=ResponseModel[gen_schemas.GenBusinessRead], summary="업무 생성",
                 dependencies=[Depends(auth.require_permission("sys:gen:add")),
                               Depends(operation_log("代码生成业务", BusinessType.CREATE))])
    async def create_business(
        business_in: gen_schemas.GenBusinessCreate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_obj = await gen_crud.gen_business.create(db, obj_in=business_in)
        return success_with("创建成功", gen_schemas.GenBusinessRead.model_validate(db_obj))

    @router.post("/import", response_model=ResponseModel[gen_schemas.GenBusinessRead], summary="테이블 가져오기",
                 dependencies=[Depends(auth.require_permission("sys:gen:add")),
                               Depends(operation_log("导入数据库表", BusinessType.CREATE))])
    async def import_table(
        import_in: gen_schemas.ImportTableRequest,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_obj = await gen_crud.gen_business.import_table(
            db, app=import_in.app, table_name=import_in.table_name, table_schema=import_in.table_schema,
        )
        return success_with("导入成功", gen_schemas.GenBusinessRead.model_validate(db_obj))

    @router.get("/{pk}", response_model=ResponseModel[gen_schemas.GenBusinessRead], summary="업무 상세",
                dependencies=[Depends(auth.require_permission("sys:gen:list"))])
    async def read_business(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(gen_schemas.GenBusinessRead.model_validate(await gen_crud.gen_business.get_or_404(db, pk)))

    @router.put("/{pk}", response_model=ResponseModel[gen_schemas.GenBusinessRead], summary="업무 수정",
                dependencies=[Depends(auth.require_permission("sys:gen:edit")),
                              Depends(operation_log("代码生成业务", BusinessType.UPDATE))])
    async def update_business(
        pk: int,
        business_in: gen_schemas.GenBusinessUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_obj = await gen_crud.gen_business.get_or_404(db, pk)
        db_obj = await gen_crud.gen_business.update(db, db_obj=db_obj, obj_in=business_in)
        return success_with("更新成功", gen_schemas.GenBusinessRead.model_validate(db_obj))

    @router.delete("/{pk}", response_model=MessageModel, summary="업무 삭제 (컬럼 포함)",
                   dependencies=[Depends(auth.require_permission("sys:gen:del")),
                                 Depends(operation_log("代码生成业务", BusinessType.DELETE))])
    async def delete_business(pk: int, db: AsyncSession = Depends(state.get_session)):
        await gen_crud.gen_business.delete_with_columns(db, pk)
        return success_msg("删除成功")

    @router.get("/{pk}/columns", response_model=ResponseModel[List[gen_schemas.GenColumnRead]], summary="업무 컬럼",
                dependencies=[Depends(auth.require_permission("sys:gen:list"))])
    async def read_business_columns(pk: int, db: AsyncSession = Depends(state.get_session)):
        await gen_crud.gen_business.get_or_404(db, pk)
        rows = await gen_crud.gen_column.for_business(db, pk)
        return success([gen_schemas.GenColumnRead.model_validate(row) for row in rows])

    @router.get("/{pk}/paths", response_model=ResponseModel[gen_schemas.GeneratePaths], summary="생성 대상 경로",
                dependencies=[Depends(auth.require_permission("sys:gen:list"))])
    async def read_business_paths(pk: int, db: AsyncSession = Depends(state.get_session)):
        business = await gen_crud.gen_business.get_or_404(db, pk)
        return success(gen_schemas.GeneratePaths(paths=gen_services.generate_paths(business)))

    return router


def build_codes_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/codes", tags=["CodeGen - Tables (테이블 반영)"])
    auth = state.auth

    @router.get("/tables", response_model=ResponseModel[List[gen_schemas.TableInfo]], summary="테이블 목록",
                dependencies=[Depends(auth.require_permission("sys:gen:list"))])
    async def read_tables(
        table_schema: Optional[str] = Query(None, description="스키마 (기본 스키마면 생략)"),
        db: AsyncSession = Depends(state.get_session),
    ):
        return success(await gen_services.list_tables(db, table_schema))

    @router.get("/tables/{name}/columns", response_model=ResponseModel[List[gen_schemas.ColumnInfo]],
                summary="테이블 컬럼 목록", dependencies=[Depends(auth.require_permission("sys:gen:list"))])
    async def read_table_columns(
        name: str,
        table_schema: Optional[str] = Query(None),
        db: AsyncSession = Depends(state.get_session),
    ):
        return success(await gen_services.list_columns(db, name, table_schema))

    return router


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter()
    router.include_router(build_businesses_router(state))
    router.include_router(build_codes_router(state))
    return router
