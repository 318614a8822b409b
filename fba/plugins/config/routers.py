# fba/plugins/config/routers.py

"""
'config' 플러그인 (시스템 설정) 의 API 엔드포인트입니다.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.schemas import DeleteBatch
from fba.middleware.opera_log import BusinessType, operation_log

from . import crud as config_crud
from . import schemas as config_schemas


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/configs", tags=["System - Configs (시스템 설정)"])
    auth = state.auth
    cache = state.cache

    @router.get("/all", response_model=ResponseModel[List[config_schemas.ConfigRead]], summary="모든 설정 조회",
                dependencies=[Depends(auth.require_permission("sys:config:list"))])
    async def read_all_configs(
        type: Optional[str] = Query(None, description="설정 분류"),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows = await config_crud.config.get_multi(db, filters={"type": type}, order_by=["id"])
        return success([config_schemas.ConfigRead.model_validate(row) for row in rows])

    @router.get("/key/{key}", response_model=ResponseModel[Dict[str, Any]], summary="키로 설정 조회 (캐시)",
                dependencies=[Depends(auth.current_user)])
    async def read_config_by_key(
        key: str = Path(..., max_length=64),
        db: AsyncSession = Depends(state.get_session),
    ):
        return success(await config_crud.get_cached_by_key(db, cache, key))

    @router.post("/refresh", response_model=MessageModel, summary="설정 캐시 새로고침",
                 dependencies=[Depends(auth.require_permission("sys:config:edit"))])
    async def refresh_config_cache(db: AsyncSession = Depends(state.get_session)):
        await config_crud.refresh_cache(db, cache)
        return success_msg("缓存刷新成功")

    @router.get("", response_model=ResponseModel[PageData[config_schemas.ConfigRead]], summary="설정 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:config:list"))])
    async def read_configs(
        params: PageParams = Depends(page_params),
        name: Optional[str] = Query(None),
        key: Optional[str] = Query(None),
        is_frontend: Optional[bool] = Query(None),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await config_crud.config.get_page(
            db, params=params, filters={"is_frontend": is_frontend}, like_filters={"name": name, "key": key},
        )
        items = [config_schemas.ConfigRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[config_schemas.ConfigRead], summary="설정 상세 조회",
                dependencies=[Depends(auth.require_permission("sys:config:list"))])
    async def read_config(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(config_schemas.ConfigRead.model_validate(await config_crud.config.get_or_404(db, pk)))

    @router.post("", response_model=ResponseModel[config_schemas.ConfigRead], summary="설정 생성",
                 dependencies=[Depends(auth.require_permission("sys:config:add")),
                               Depends(operation_log("参数配置", BusinessType.CREATE))])
    async def create_config(config_in: config_schemas.ConfigCreate, db: AsyncSession = Depends(state.get_session)):
        db_config = await config_crud.config.create(db, obj_in=config_in)
        return success_with("创建成功", config_schemas.ConfigRead.model_validate(db_config))

    @router.put("/{pk}", response_model=ResponseModel[config_schemas.ConfigRead], summary="설정 수정",
                dependencies=[Depends(auth.require_permission("sys:config:edit")),
                              Depends(operation_log("参数配置", BusinessType.UPDATE))])
    async def update_config(
        pk: int,
        config_in: config_schemas.ConfigUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_config = await config_crud.config.get_or_404(db, pk)
        db_config = await config_crud.config.update(db, db_obj=db_config, obj_in=config_in)
        await config_crud.invalidate(cache, [db_config.key])
        return success_with("更新成功", config_schemas.ConfigRead.model_validate(db_config))

    @router.delete("", response_model=MessageModel, summary="설정 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:config:del")),
                                 Depends(operation_log("参数配置", BusinessType.DELETE))])
    async def delete_configs(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        ids = batch.unique_ids()
        keys = await config_crud.config.keys_of(db, ids)
        await config_crud.config.delete_batch(db, ids=ids)
        await config_crud.invalidate(cache, keys)
        return success_msg("删除成功")

    return router
