# fba/plugins/dict/routers.py

"""
'dict' 플러그인 (데이터 사전 유형/데이터) 의 API 엔드포인트입니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.schemas import DeleteBatch
from fba.middleware.opera_log import BusinessType, operation_log

from . import crud as dict_crud
from . import schemas as dict_schemas


# =============================================================================
# 1. 사전 유형 (/dict-types)
# =============================================================================
def build_dict_types_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/dict-types", tags=["System - Dict Types (사전 유형)"])
    auth = state.auth

    @router.get("/all", response_model=ResponseModel[List[dict_schemas.DictTypeRead]], summary="모든 사전 유형",
                dependencies=[Depends(auth.require_permission("sys:dict:list"))])
    async def read_all_dict_types(db: AsyncSession = Depends(state.get_session)):
        rows = await dict_crud.dict_type.get_multi(db, order_by=["id"])
        return success([dict_schemas.DictTypeRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[dict_schemas.DictTypeRead]], summary="사전 유형 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:dict:list"))])
    async def read_dict_types(
        params: PageParams = Depends(page_params),
        name: Optional[str] = Query(None),
        code: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await dict_crud.dict_type.get_page(
            db, params=params, filters={"status": status}, like_filters={"name": name, "code": code},
            order_by=["id"],
        )
        items = [dict_schemas.DictTypeRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[dict_schemas.DictTypeRead], summary="사전 유형 상세",
                dependencies=[Depends(auth.require_permission("sys:dict:list"))])
    async def read_dict_type(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(dict_schemas.DictTypeRead.model_validate(await dict_crud.dict_type.get_or_404(db, pk)))

    @router.post("", response_model=ResponseModel[dict_schemas.DictTypeRead], summary="사전 유형 생성",
                 dependencies=[Depends(auth.require_permission("sys:dict:add")),
                               Depends(operation_log("字典类型", BusinessType.CREATE))])
    async def create_dict_type(type_in: dict_schemas.DictTypeCreate, db: AsyncSession = Depends(state.get_session)):
        db_type = await dict_crud.dict_type.create(db, obj_in=type_in)
        return success_with("创建成功", dict_schemas.DictTypeRead.model_validate(db_type))

    @router.put("/{pk}", response_model=ResponseModel[dict_schemas.DictTypeRead], summary="사전 유형 수정",
                dependencies=[Depends(auth.require_permission("sys:dict:edit")),
                              Depends(operation_log("字典类型", BusinessType.UPDATE))])
    async def update_dict_type(
        pk: int,
        type_in: dict_schemas.DictTypeUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_type = await dict_crud.dict_type.get_or_404(db, pk)
        db_type = await dict_crud.dict_type.update(db, db_obj=db_type, obj_in=type_in)
        return success_with("更新成功", dict_schemas.DictTypeRead.model_validate(db_type))

    @router.delete("", response_model=MessageModel, summary="사전 유형 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:dict:del")),
                                 Depends(operation_log("字典类型", BusinessType.DELETE))])
    async def delete_dict_types(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await dict_crud.dict_type.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router


# =============================================================================
# 2. 사전 데이터 (/dict-datas)
# =============================================================================
def build_dict_datas_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/dict-datas", tags=["System - Dict Datas (사전 데이터)"])
    auth = state.auth

    @router.get("/all", response_model=ResponseModel[List[dict_schemas.DictDataRead]], summary="모든 사전 데이터",
                dependencies=[Depends(auth.require_permission("sys:dict:list"))])
    async def read_all_dict_datas(db: AsyncSession = Depends(state.get_session)):
        rows = await dict_crud.dict_data.get_multi(db, order_by=dict_crud.DATA_ORDER)
        return success([dict_schemas.DictDataRead.model_validate(row) for row in rows])

    @router.get("/type-codes/{code}", response_model=ResponseModel[List[dict_schemas.DictDataRead]],
                summary="유형 코드별 활성 사전 데이터", dependencies=[Depends(auth.current_user)])
    async def read_dict_datas_by_type_code(code: str, db: AsyncSession = Depends(state.get_session)):
        rows = await dict_crud.dict_data.get_by_type_code(db, code=code)
        return success([dict_schemas.DictDataRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[dict_schemas.DictDataRead]], summary="사전 데이터 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:dict:list"))])
    async def read_dict_datas(
        params: PageParams = Depends(page_params),
        type_id: Optional[int] = Query(None),
        type_code: Optional[str] = Query(None),
        label: Optional[str] = Query(None),
        value: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await dict_crud.dict_data.get_page(
            db, params=params,
            filters={"type_id": type_id, "type_code": type_code, "status": status},
            like_filters={"label": label, "value": value},
            order_by=dict_crud.DATA_ORDER,
        )
        items = [dict_schemas.DictDataRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[dict_schemas.DictDataRead], summary="사전 데이터 상세",
                dependencies=[Depends(auth.require_permission("sys:dict:list"))])
    async def read_dict_data(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(dict_schemas.DictDataRead.model_validate(await dict_crud.dict_data.get_or_404(db, pk)))

    @router.post("", response_model=ResponseModel[dict_schemas.DictDataRead], summary="사전 데이터 생성",
                 dependencies=[Depends(auth.require_permission("sys:dict:add")),
                               Depends(operation_log("字典数据", BusinessType.CREATE))])
    async def create_dict_data(data_in: dict_schemas.DictDataCreate, db: AsyncSession = Depends(state.get_session)):
        db_data = await dict_crud.dict_data.create(db, obj_in=data_in)
        return success_with("创建成功", dict_schemas.DictDataRead.model_validate(db_data))

    @router.put("/{pk}", response_model=ResponseModel[dict_schemas.DictDataRead], summary="사전 데이터 수정",
                dependencies=[Depends(auth.require_permission("sys:dict:edit")),
                              Depends(operation_log("字典数据", BusinessType.UPDATE))])
    async def update_dict_data(
        pk: int,
        data_in: dict_schemas.DictDataUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_data = await dict_crud.dict_data.get_or_404(db, pk)
        db_data = await dict_crud.dict_data.update(db, db_obj=db_data, obj_in=data_in)
        return success_with("更新成功", dict_schemas.DictDataRead.model_validate(db_data))

    @router.delete("", response_model=MessageModel, summary="사전 데이터 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:dict:del")),
                                 Depends(operation_log("字典数据", BusinessType.DELETE))])
    async def delete_dict_datas(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await dict_crud.dict_data.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter()
    router.include_router(build_dict_types_router(state))
    router.include_router(build_dict_datas_router(state))
    return router
