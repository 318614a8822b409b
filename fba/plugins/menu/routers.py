# fba/plugins/menu/routers.py

"""
'menu' 플러그인의 API 엔드포인트입니다.

/menus 는 메뉴 트리 관리와 현재 사용자의 사이드바를, /role-menus 는 역할별 메뉴 할당을
담당하며 둘 다 관리자 네임스페이스(/sys) 아래에 붙습니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.schemas import DeleteBatch
from fba.core.security import AuthContext
from fba.middleware.opera_log import BusinessType, operation_log
from fba.plugins.system import crud as sys_crud
from fba.utils.tree import build_tree

from . import crud as menu_crud
from . import schemas as menu_schemas


def build_menus_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/menus", tags=["System - Menus (메뉴 관리)"])
    auth = state.auth

    @router.get("/sidebar", response_model=ResponseModel[List[menu_schemas.MenuTree]], summary="내 사이드바 메뉴")
    async def read_sidebar(
        ctx: AuthContext = Depends(auth.current_user),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows = await menu_crud.menu.sidebar(db, ctx)
        return success(build_tree(rows, menu_schemas.MenuRead))

    @router.get("/tree", response_model=ResponseModel[List[menu_schemas.MenuTree]], summary="메뉴 트리 조회",
                dependencies=[Depends(auth.require_permission("sys:menu:list"))])
    async def read_menu_tree(
        title: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows = await menu_crud.menu.get_multi(
            db, filters={"status": status}, like_filters={"title": title}, order_by=["sort", "id"],
        )
        return success(build_tree(rows, menu_schemas.MenuRead))

    @router.get("/all", response_model=ResponseModel[List[menu_schemas.MenuRead]], summary="모든 메뉴 조회",
                dependencies=[Depends(auth.require_permission("sys:menu:list"))])
    async def read_all_menus(db: AsyncSession = Depends(state.get_session)):
        rows = await menu_crud.menu.get_multi(db, order_by=["sort", "id"])
        return success([menu_schemas.MenuRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[menu_schemas.MenuRead]], summary="메뉴 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:menu:list"))])
    async def read_menus(
        params: PageParams = Depends(page_params),
        title: Optional[str] = Query(None),
        type: Optional[int] = Query(None, ge=0, le=2),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await menu_crud.menu.get_page(
            db, params=params, filters={"type": type, "status": status}, like_filters={"title": title},
            order_by=["sort", "id"],
        )
        items = [menu_schemas.MenuRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[menu_schemas.MenuRead], summary="메뉴 상세 조회",
                dependencies=[Depends(auth.require_permission("sys:menu:list"))])
    async def read_menu(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(menu_schemas.MenuRead.model_validate(await menu_crud.menu.get_or_404(db, pk)))

    @router.post("", response_model=ResponseModel[menu_schemas.MenuRead], summary="메뉴 생성",
                 dependencies=[Depends(auth.require_permission("sys:menu:add")),
                               Depends(operation_log("菜单管理", BusinessType.CREATE))])
    async def create_menu(menu_in: menu_schemas.MenuCreate, db: AsyncSession = Depends(state.get_session)):
        await menu_crud.menu.check_parent(db, menu_in.parent_id)
        db_menu = await menu_crud.menu.create(db, obj_in=menu_in)
        return success_with("创建成功", menu_schemas.MenuRead.model_validate(db_menu))

    @router.put("/{pk}", response_model=ResponseModel[menu_schemas.MenuRead], summary="메뉴 수정",
                dependencies=[Depends(auth.require_permission("sys:menu:edit")),
                              Depends(operation_log("菜单管理", BusinessType.UPDATE))])
    async def update_menu(pk: int, menu_in: menu_schemas.MenuUpdate, db: AsyncSession = Depends(state.get_session)):
        db_menu = await menu_crud.menu.get_or_404(db, pk)
        await menu_crud.menu.check_parent(db, menu_in.parent_id, pk)
        db_menu = await menu_crud.menu.update(db, db_obj=db_menu, obj_in=menu_in)
        return success_with("更新成功", menu_schemas.MenuRead.model_validate(db_menu))

    @router.delete("", response_model=MessageModel, summary="메뉴 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:menu:del")),
                                 Depends(operation_log("菜单管理", BusinessType.DELETE))])
    async def delete_menus(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        ids = batch.unique_ids()
        await menu_crud.menu.ensure_deletable(db, ids)
        await menu_crud.menu.delete_batch(db, ids=ids)
        return success_msg("删除成功")

    return router


def build_role_menus_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/role-menus", tags=["System - Role Menus (역할 메뉴 할당)"])
    auth = state.auth

    @router.get("/{role_id}", response_model=ResponseModel[List[int]], summary="역할 메뉴 ID 조회",
                dependencies=[Depends(auth.require_permission("sys:role:list"))])
    async def read_role_menu_ids(role_id: int, db: AsyncSession = Depends(state.get_session)):
        await sys_crud.role.get_or_404(db, role_id)
        return success(await menu_crud.menu.role_menu_ids(db, role_id))

    @router.put("/{role_id}", response_model=ResponseModel[List[int]], summary="역할 메뉴 교체",
                dependencies=[Depends(auth.require_permission("sys:role:edit")),
                              Depends(operation_log("角色菜单分配", BusinessType.UPDATE))])
    async def assign_role_menus(
        role_id: int,
        assign_in: menu_schemas.RoleMenuAssign,
        db: AsyncSession = Depends(state.get_session),
    ):
        await sys_crud.role.get_or_404(db, role_id)
        menu_ids = await menu_crud.menu.replace_role_menus(db, role_id=role_id, menu_ids=assign_in.menu_ids)
        return success_with("分配成功", menu_ids)

    return router


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter()
    router.include_router(build_menus_router(state))
    router.include_router(build_role_menus_router(state))
    return router
