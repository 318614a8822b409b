# fba/plugins/data_scope/routers.py

"""
'data_scope' 플러그인의 API 엔드포인트입니다.

- /data-rules: 규칙 CRUD 와 필터 대상 모델/컬럼 목록
- /data-scopes: 범위 CRUD 와 범위별 규칙 할당
- /role-data-scopes: 역할별 범위 할당
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.schemas import DeleteBatch
from fba.middleware.opera_log import BusinessType, operation_log
from fba.plugins.system import crud as sys_crud

from . import crud as scope_crud
from . import filters as scope_filters
from . import schemas as scope_schemas


def build_data_rules_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/data-rules", tags=["System - Data Rules (데이터 규칙)"])
    auth = state.auth

    @router.get("/models", response_model=ResponseModel[List[scope_schemas.DataRuleModelRead]],
                summary="필터 대상 모델 목록", dependencies=[Depends(auth.require_permission("sys:data:rule:list"))])
    async def read_rule_models():
        return success([
            scope_schemas.DataRuleModelRead(model=name, table_name=model.__tablename__, description=description)
            for name, (model, description) in scope_filters.FILTERABLE_MODELS.items()
        ])

    @router.get("/models/{model}/columns", response_model=ResponseModel[List[scope_schemas.DataRuleColumnRead]],
                summary="모델 컬럼 목록", dependencies=[Depends(auth.require_permission("sys:data:rule:list"))])
    async def read_model_columns(model: str):
        table = scope_filters.resolve_model(model).__table__
        return success([
            scope_schemas.DataRuleColumnRead(
                name=column.name, type=str(column.type), nullable=bool(column.nullable), comment=column.comment,
            )
            for column in table.columns
            if column.name not in scope_filters.HIDDEN_COLUMNS
        ])

    @router.get("/all", response_model=ResponseModel[List[scope_schemas.DataRuleRead]], summary="모든 규칙 조회",
                dependencies=[Depends(auth.require_permission("sys:data:rule:list"))])
    async def read_all_rules(db: AsyncSession = Depends(state.get_session)):
        rows = await scope_crud.data_rule.get_multi(db, order_by=["id"])
        return success([scope_schemas.DataRuleRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[scope_schemas.DataRuleRead]], summary="규칙 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:data:rule:list"))])
    async def read_rules(
        params: PageParams = Depends(page_params),
        name: Optional[str] = Query(None),
        model: Optional[str] = Query(None),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await scope_crud.data_rule.get_page(
            db, params=params, filters={"model": model}, like_filters={"name": name},
        )
        items = [scope_schemas.DataRuleRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[scope_schemas.DataRuleRead], summary="규칙 상세 조회",
                dependencies=[Depends(auth.require_permission("sys:data:rule:list"))])
    async def read_rule(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(scope_schemas.DataRuleRead.model_validate(await scope_crud.data_rule.get_or_404(db, pk)))

    @router.post("", response_model=ResponseModel[scope_schemas.DataRuleRead], summary="규칙 생성",
                 dependencies=[Depends(auth.require_permission("sys:data:rule:add")),
                               Depends(operation_log("数据规则", BusinessType.CREATE))])
    async def create_rule(rule_in: scope_schemas.DataRuleCreate, db: AsyncSession = Depends(state.get_session)):
        scope_crud.data_rule.check_target(rule_in.model_dump())
        db_rule = await scope_crud.data_rule.create(db, obj_in=rule_in)
        return success_with("创建成功", scope_schemas.DataRuleRead.model_validate(db_rule))

    @router.put("/{pk}", response_model=ResponseModel[scope_schemas.DataRuleRead], summary="규칙 수정",
                dependencies=[Depends(auth.require_permission("sys:data:rule:edit")),
                              Depends(operation_log("数据规则", BusinessType.UPDATE))])
    async def update_rule(
        pk: int,
        rule_in: scope_schemas.DataRuleUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_rule = await scope_crud.data_rule.get_or_404(db, pk)
        scope_crud.data_rule.check_target({
            "model": rule_in.model or db_rule.model,
            "column": rule_in.column or db_rule.column,
        })
        db_rule = await scope_crud.data_rule.update(db, db_obj=db_rule, obj_in=rule_in)
        return success_with("更新成功", scope_schemas.DataRuleRead.model_validate(db_rule))

    @router.delete("", response_model=MessageModel, summary="규칙 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:data:rule:del")),
                                 Depends(operation_log("数据规则", BusinessType.DELETE))])
    async def delete_rules(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await scope_crud.data_rule.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router


def build_data_scopes_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/data-scopes", tags=["System - Data Scopes (데이터 범위)"])
    auth = state.auth

    @router.get("/all", response_model=ResponseModel[List[scope_schemas.DataScopeRead]], summary="모든 범위 조회",
                dependencies=[Depends(auth.require_permission("sys:data:scope:list"))])
    async def read_all_scopes(db: AsyncSession = Depends(state.get_session)):
        rows = await scope_crud.data_scope.get_multi(db, order_by=["id"])
        return success([scope_schemas.DataScopeRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[scope_schemas.DataScopeRead]], summary="범위 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:data:scope:list"))])
    async def read_scopes(
        params: PageParams = Depends(page_params),
        name: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await scope_crud.data_scope.get_page(
            db, params=params, filters={"status": status}, like_filters={"name": name},
        )
        items = [scope_schemas.DataScopeRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[scope_schemas.DataScopeRead], summary="범위 상세 조회",
                dependencies=[Depends(auth.require_permission("sys:data:scope:list"))])
    async def read_scope(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(scope_schemas.DataScopeRead.model_validate(await scope_crud.data_scope.get_or_404(db, pk)))

    @router.post("", response_model=ResponseModel[scope_schemas.DataScopeRead], summary="범위 생성",
                 dependencies=[Depends(auth.require_permission("sys:data:scope:add")),
                               Depends(operation_log("数据范围", BusinessType.CREATE))])
    async def create_scope(scope_in: scope_schemas.DataScopeCreate, db: AsyncSession = Depends(state.get_session)):
        db_scope = await scope_crud.data_scope.create(db, obj_in=scope_in)
        return success_with("创建成功", scope_schemas.DataScopeRead.model_validate(db_scope))

    @router.put("/{pk}", response_model=ResponseModel[scope_schemas.DataScopeRead], summary="범위 수정",
                dependencies=[Depends(auth.require_permission("sys:data:scope:edit")),
                              Depends(operation_log("数据范围", BusinessType.UPDATE))])
    async def update_scope(
        pk: int,
        scope_in: scope_schemas.DataScopeUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_scope = await scope_crud.data_scope.get_or_404(db, pk)
        db_scope = await scope_crud.data_scope.update(db, db_obj=db_scope, obj_in=scope_in)
        return success_with("更新成功", scope_schemas.DataScopeRead.model_validate(db_scope))

    @router.delete("", response_model=MessageModel, summary="범위 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:data:scope:del")),
                                 Depends(operation_log("数据范围", BusinessType.DELETE))])
    async def delete_scopes(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await scope_crud.data_scope.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    @router.get("/{pk}/rules", response_model=ResponseModel[List[int]], summary="범위 규칙 ID 조회",
                dependencies=[Depends(auth.require_permission("sys:data:scope:list"))])
    async def read_scope_rule_ids(pk: int, db: AsyncSession = Depends(state.get_session)):
        await scope_crud.data_scope.get_or_404(db, pk)
        return success(await scope_crud.data_scope.rule_ids(db, pk))

    @router.put("/{pk}/rules", response_model=ResponseModel[List[int]], summary="범위 규칙 교체",
                dependencies=[Depends(auth.require_permission("sys:data:scope:edit")),
                              Depends(operation_log("数据范围规则", BusinessType.UPDATE))])
    async def assign_scope_rules(
        pk: int,
        assign_in: scope_schemas.DataScopeRuleAssign,
        db: AsyncSession = Depends(state.get_session),
    ):
        await scope_crud.data_scope.get_or_404(db, pk)
        rule_ids = await scope_crud.data_scope.replace_rules(db, scope_id=pk, rule_ids=assign_in.rule_ids)
        return success_with("分配成功", rule_ids)

    return router


def build_role_data_scopes_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/role-data-scopes", tags=["System - Role Data Scopes (역할 데이터 범위)"])
    auth = state.auth

    @router.get("/{role_id}", response_model=ResponseModel[List[int]], summary="역할 범위 ID 조회",
                dependencies=[Depends(auth.require_permission("sys:role:list"))])
    async def read_role_scope_ids(role_id: int, db: AsyncSession = Depends(state.get_session)):
        await sys_crud.role.get_or_404(db, role_id)
        return success(await scope_crud.data_scope.role_scope_ids(db, role_id))

    @router.put("/{role_id}", response_model=ResponseModel[List[int]], summary="역할 범위 교체",
                dependencies=[Depends(auth.require_permission("sys:role:edit")),
                              Depends(operation_log("角色数据范围分配", BusinessType.UPDATE))])
    async def assign_role_scopes(
        role_id: int,
        assign_in: scope_schemas.RoleDataScopeAssign,
        db: AsyncSession = Depends(state.get_session),
    ):
        await sys_crud.role.get_or_404(db, role_id)
        scope_ids = await scope_crud.data_scope.replace_role_scopes(
            db, role_id=role_id, scope_ids=assign_in.data_scope_ids,
        )
        return success_with("分配成功", scope_ids)

    return router


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter()
    for factory in (build_data_rules_router, build_data_scopes_router, build_role_data_scopes_router):
        router.include_router(factory(state))
    return router
