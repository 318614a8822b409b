# fba/plugins/system/routers.py

"""
'system' 플러그인 (사용자/역할/권한/부서/할당/플러그인 목록)의 API 엔드포인트를 정의하는 모듈입니다.

각 리소스는 자기 leaf 세그먼트(/users, /roles, ...)를 접두사로 가진 라우터로 만들어지고,
호스트가 관리자 네임스페이스(/sys) 아래에 붙입니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.schemas import DeleteBatch
from fba.core.security import AuthContext, verify_password
from fba.middleware.opera_log import BusinessType, operation_log
from fba.utils.tree import build_tree

from . import crud as sys_crud
from . import errors as sys_errors
from . import schemas as sys_schemas


# =============================================================================
# 1. 사용자 (User) 관리 엔드포인트
# =============================================================================
def build_users_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/users", tags=["System - Users (사용자 관리)"])
    auth = state.auth

    @router.get("/me", response_model=ResponseModel[sys_schemas.UserRead], summary="내 정보 조회")
    async def read_user_me(
        ctx: AuthContext = Depends(auth.current_user),
        db: AsyncSession = Depends(state.get_session),
    ):
        db_user = await sys_crud.user.get_or_404(db, ctx.user_id)
        return success(sys_schemas.UserRead.model_validate(db_user))

    @router.put("/me/password", response_model=MessageModel, summary="내 비밀번호 변경",
                dependencies=[Depends(operation_log("修改密码", BusinessType.UPDATE))])
    async def change_my_password(
        password_in: sys_schemas.UserPasswordChange,
        ctx: AuthContext = Depends(auth.current_user),
        db: AsyncSession = Depends(state.get_session),
    ):
        db_user = await sys_crud.user.get_or_404(db, ctx.user_id)
        if not verify_password(password_in.old_password, db_user.password_hash):
            raise sys_errors.PasswordMismatchError()
        await sys_crud.user.set_password(db, db_obj=db_user, password=password_in.new_password)
        return success_msg("密码修改成功")

    @router.get("/all", response_model=ResponseModel[List[sys_schemas.UserRead]], summary="모든 사용자 조회",
                dependencies=[Depends(auth.require_permission("sys:user:list"))])
    async def read_all_users(db: AsyncSession = Depends(state.get_session)):
        rows = await sys_crud.user.get_multi(db)
        return success([sys_schemas.UserRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[sys_schemas.UserRead]], summary="사용자 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:user:list"))])
    async def read_users(
        params: PageParams = Depends(page_params),
        username: Optional[str] = Query(None, description="사용자명 (부분 일치)"),
        nickname: Optional[str] = Query(None, description="닉네임 (부분 일치)"),
        status: Optional[int] = Query(None, ge=0, le=1),
        dept_id: Optional[int] = Query(None),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await sys_crud.user.get_page(
            db, params=params,
            filters={"status": status, "dept_id": dept_id},
            like_filters={"username": username, "nickname": nickname},
        )
        items = [sys_schemas.UserRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[sys_schemas.UserRead], summary="사용자 상세 조회",
                dependencies=[Depends(auth.require_permission("sys:user:list"))])
    async def read_user(pk: int, db: AsyncSession = Depends(state.get_session)):
        db_user = await sys_crud.user.get_or_404(db, pk)
        return success(sys_schemas.UserRead.model_validate(db_user))

    @router.get("/{pk}/roles", response_model=ResponseModel[List[sys_schemas.RoleRead]], summary="사용자 역할 조회",
                dependencies=[Depends(auth.require_permission("sys:user:list"))])
    async def read_user_roles(pk: int, db: AsyncSession = Depends(state.get_session)):
        await sys_crud.user.get_or_404(db, pk)
        role_ids = await sys_crud.user.role_ids(db, pk)
        rows = await sys_crud.role.get_multi(db, filters=None, order_by=["sort", "id"]) if role_ids else []
        return success([sys_schemas.RoleRead.model_validate(row) for row in rows if row.id in role_ids])

    @router.post("", response_model=ResponseModel[sys_schemas.UserRead], summary="새 사용자 생성",
                 dependencies=[Depends(auth.require_permission("sys:user:add")),
                               Depends(operation_log("用户管理", BusinessType.CREATE))])
    async def create_user(user_in: sys_schemas.UserCreate, db: AsyncSession = Depends(state.get_session)):
        db_user = await sys_crud.user.create(db, obj_in=user_in)
        return success_with("创建成功", sys_schemas.UserRead.model_validate(db_user))

    @router.put("/{pk}", response_model=ResponseModel[sys_schemas.UserRead], summary="사용자 정보 수정",
                dependencies=[Depends(auth.require_permission("sys:user:edit")),
                              Depends(operation_log("用户管理", BusinessType.UPDATE))])
    async def update_user(pk: int, user_in: sys_schemas.UserUpdate, db: AsyncSession = Depends(state.get_session)):
        db_user = await sys_crud.user.get_or_404(db, pk)
        db_user = await sys_crud.user.update(db, db_obj=db_user, obj_in=user_in)
        return success_with("更新成功", sys_schemas.UserRead.model_validate(db_user))

    @router.put("/{pk}/status", response_model=MessageModel, summary="사용자 상태 변경",
                dependencies=[Depends(auth.require_permission("sys:user:edit")),
                              Depends(operation_log("用户管理", BusinessType.UPDATE))])
    async def update_user_status(
        pk: int,
        status_in: sys_schemas.UserStatusUpdate,
        ctx: AuthContext = Depends(auth.current_user),
        db: AsyncSession = Depends(state.get_session),
    ):
        if pk == ctx.user_id and status_in.status == 0:
            raise sys_errors.OperationFailedError("不能禁用当前用户")
        db_user = await sys_crud.user.get_or_404(db, pk)
        await sys_crud.user.update(db, db_obj=db_user, obj_in={"status": status_in.status})
        return success_msg("状态更新成功")

    @router.put("/{pk}/password", response_model=MessageModel, summary="사용자 비밀번호 초기화",
                dependencies=[Depends(auth.require_permission("sys:user:edit")),
                              Depends(operation_log("用户管理", BusinessType.UPDATE))])
    async def reset_user_password(
        pk: int,
        password_in: sys_schemas.UserPasswordReset,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_user = await sys_crud.user.get_or_404(db, pk)
        await sys_crud.user.set_password(db, db_obj=db_user, password=password_in.password)
        return success_msg("密码重置成功")

    @router.delete("", response_model=MessageModel, summary="사용자 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:user:del")),
                                 Depends(operation_log("用户管理", BusinessType.DELETE))])
    async def delete_users(
        batch: DeleteBatch,
        ctx: AuthContext = Depends(auth.current_user),
        db: AsyncSession = Depends(state.get_session),
    ):
        ids = batch.unique_ids()
        if ctx.user_id in ids:
            raise sys_errors.OperationFailedError("不能删除当前用户")
        await sys_crud.user.delete_batch(db, ids=ids)
        return success_msg("删除成功")

    return router


# =============================================================================
# 2. 역할 (Role) 관리 엔드포인트
# =============================================================================
def build_roles_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/roles", tags=["System - Roles (역할 관리)"])
    auth = state.auth

    @router.get("/all", response_model=ResponseModel[List[sys_schemas.RoleRead]], summary="모든 역할 조회",
                dependencies=[Depends(auth.require_permission("sys:role:list"))])
    async def read_all_roles(db: AsyncSession = Depends(state.get_session)):
        rows = await sys_crud.role.get_multi(db, order_by=["sort", "id"])
        return success([sys_schemas.RoleRead.model_validate(row) for row in rows])

    @router.get("", response_model=ResponseModel[PageData[sys_schemas.RoleRead]], summary="역할 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:role:list"))])
    async def read_roles(
        params: PageParams = Depends(page_params),
        name: Optional[str] = Query(None),
        code: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await sys_crud.role.get_page(
            db, params=params, filters={"status": status}, like_filters={"name": name, "code": code},
        )
        items = [sys_schemas.RoleRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[sys_schemas.RoleRead], summary="역할 상세 조회",
                dependencies=[Depends(auth.require_permission("sys:role:list"))])
    async def read_role(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(sys_schemas.RoleRead.model_validate(await sys_crud.role.get_or_404(db, pk)))

    @router.get("/{pk}/permissions", response_model=ResponseModel[List[sys_schemas.PermissionRead]],
                summary="역할 권한 조회", dependencies=[Depends(auth.require_permission("sys:role:list"))])
    async def read_role_permissions(pk: int, db: AsyncSession = Depends(state.get_session)):
        await sys_crud.role.get_or_404(db, pk)
        permission_ids = set(await sys_crud.role.permission_ids(db, pk))
        rows = await sys_crud.permission.get_multi(db, order_by=["sort", "id"]) if permission_ids else []
        return success([sys_schemas.PermissionRead.model_validate(r) for r in rows if r.id in permission_ids])

    @router.post("", response_model=ResponseModel[sys_schemas.RoleRead], summary="새 역할 생성",
                 dependencies=[Depends(auth.require_permission("sys:role:add")),
                               Depends(operation_log("角色管理", BusinessType.CREATE))])
    async def create_role(role_in: sys_schemas.RoleCreate, db: AsyncSession = Depends(state.get_session)):
        db_role = await sys_crud.role.create(db, obj_in=role_in)
        return success_with("创建成功", sys_schemas.RoleRead.model_validate(db_role))

    @router.put("/{pk}", response_model=ResponseModel[sys_schemas.RoleRead], summary="역할 수정",
                dependencies=[Depends(auth.require_permission("sys:role:edit")),
                              Depends(operation_log("角色管理", BusinessType.UPDATE))])
    async def update_role(pk: int, role_in: sys_schemas.RoleUpdate, db: AsyncSession = Depends(state.get_session)):
        db_role = await sys_crud.role.get_or_404(db, pk)
        db_role = await sys_crud.role.update(db, db_obj=db_role, obj_in=role_in)
        return success_with("更新成功", sys_schemas.RoleRead.model_validate(db_role))

    @router.delete("", response_model=MessageModel, summary="역할 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:role:del")),
                                 Depends(operation_log("角色管理", BusinessType.DELETE))])
    async def delete_roles(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await sys_crud.role.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router


# =============================================================================
# 3. 권한 (Permission) 관리 엔드포인트
# =============================================================================
def build_permissions_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/permissions", tags=["System - Permissions (권한 관리)"])
    auth = state.auth

    @router.get("/all", response_model=ResponseModel[List[sys_schemas.PermissionRead]], summary="모든 권한 조회",
                dependencies=[Depends(auth.require_permission("sys:permission:list"))])
    async def read_all_permissions(db: AsyncSession = Depends(state.get_session)):
        rows = await sys_crud.permission.get_multi(db, order_by=["sort", "id"])
        return success([sys_schemas.PermissionRead.model_validate(row) for row in rows])

    @router.get("/tree", response_model=ResponseModel[List[sys_schemas.PermissionTree]], summary="권한 트리 조회",
                dependencies=[Depends(auth.require_permission("sys:permission:list"))])
    async def read_permission_tree(db: AsyncSession = Depends(state.get_session)):
        rows = await sys_crud.permission.get_multi(db, order_by=["sort", "id"])
        return success(build_tree(rows, sys_schemas.PermissionRead))

    @router.get("", response_model=ResponseModel[PageData[sys_schemas.PermissionRead]], summary="권한 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:permission:list"))])
    async def read_permissions(
        params: PageParams = Depends(page_params),
        name: Optional[str] = Query(None),
        code: Optional[str] = Query(None),
        type: Optional[int] = Query(None, ge=0, le=2),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await sys_crud.permission.get_page(
            db, params=params,
            filters={"type": type, "status": status},
            like_filters={"name": name, "code": code},
            order_by=["sort", "id"],
        )
        items = [sys_schemas.PermissionRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[sys_schemas.PermissionRead], summary="권한 상세 조회",
                dependencies=[Depends(auth.require_permission("sys:permission:list"))])
    async def read_permission(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(sys_schemas.PermissionRead.model_validate(await sys_crud.permission.get_or_404(db, pk)))

    @router.post("", response_model=ResponseModel[sys_schemas.PermissionRead], summary="새 권한 생성",
                 dependencies=[Depends(auth.require_permission("sys:permission:add")),
                               Depends(operation_log("权限管理", BusinessType.CREATE))])
    async def create_permission(
        permission_in: sys_schemas.PermissionCreate,
        db: AsyncSession = Depends(state.get_session),
    ):
        if permission_in.parent_id is not None:
            await sys_crud.permission.get_or_404(db, permission_in.parent_id)
        db_permission = await sys_crud.permission.create(db, obj_in=permission_in)
        return success_with("创建成功", sys_schemas.PermissionRead.model_validate(db_permission))

    @router.put("/{pk}", response_model=ResponseModel[sys_schemas.PermissionRead], summary="권한 수정",
                dependencies=[Depends(auth.require_permission("sys:permission:edit")),
                              Depends(operation_log("权限管理", BusinessType.UPDATE))])
    async def update_permission(
        pk: int,
        permission_in: sys_schemas.PermissionUpdate,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_permission = await sys_crud.permission.get_or_404(db, pk)
        if permission_in.parent_id is not None:
            if permission_in.parent_id == pk:
                raise sys_errors.OperationFailedError("上级权限不能是自身")
            await sys_crud.permission.get_or_404(db, permission_in.parent_id)
        db_permission = await sys_crud.permission.update(db, db_obj=db_permission, obj_in=permission_in)
        return success_with("更新成功", sys_schemas.PermissionRead.model_validate(db_permission))

    @router.delete("", response_model=MessageModel, summary="권한 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:permission:del")),
                                 Depends(operation_log("权限管理", BusinessType.DELETE))])
    async def delete_permissions(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        await sys_crud.permission.delete_batch(db, ids=batch.unique_ids())
        return success_msg("删除成功")

    return router


# =============================================================================
# 4. 부서 (Dept) 관리 엔드포인트
# =============================================================================
def build_depts_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/depts", tags=["System - Depts (부서 관리)"])
    auth = state.auth

    @router.get("/all", response_model=ResponseModel[List[sys_schemas.DeptRead]], summary="모든 부서 조회",
                dependencies=[Depends(auth.require_permission("sys:dept:list"))])
    async def read_all_depts(db: AsyncSession = Depends(state.get_session)):
        rows = await sys_crud.dept.get_multi(db, order_by=["sort", "id"])
        return success([sys_schemas.DeptRead.model_validate(row) for row in rows])

    @router.get("/tree", response_model=ResponseModel[List[sys_schemas.DeptTree]], summary="부서 트리 조회",
                dependencies=[Depends(auth.require_permission("sys:dept:list"))])
    async def read_dept_tree(
        name: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows = await sys_crud.dept.get_multi(
            db, filters={"status": status}, like_filters={"name": name}, order_by=["sort", "id"],
        )
        return success(build_tree(rows, sys_schemas.DeptRead))

    @router.get("", response_model=ResponseModel[PageData[sys_schemas.DeptRead]], summary="부서 페이지 조회",
                dependencies=[Depends(auth.require_permission("sys:dept:list"))])
    async def read_depts(
        params: PageParams = Depends(page_params),
        name: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=1),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await sys_crud.dept.get_page(
            db, params=params, filters={"status": status}, like_filters={"name": name}, order_by=["sort", "id"],
        )
        items = [sys_schemas.DeptRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/{pk}", response_model=ResponseModel[sys_schemas.DeptRead], summary="부서 상세 조회",
                dependencies=[Depends(auth.require_permission("sys:dept:list"))])
    async def read_dept(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(sys_schemas.DeptRead.model_validate(await sys_crud.dept.get_or_404(db, pk)))

    @router.post("", response_model=ResponseModel[sys_schemas.DeptRead], summary="새 부서 생성",
                 dependencies=[Depends(auth.require_permission("sys:dept:add")),
                               Depends(operation_log("部门管理", BusinessType.CREATE))])
    async def create_dept(dept_in: sys_schemas.DeptCreate, db: AsyncSession = Depends(state.get_session)):
        if dept_in.parent_id is not None:
            await sys_crud.dept.get_or_404(db, dept_in.parent_id)
        db_dept = await sys_crud.dept.create(db, obj_in=dept_in)
        return success_with("创建成功", sys_schemas.DeptRead.model_validate(db_dept))

    @router.put("/{pk}", response_model=ResponseModel[sys_schemas.DeptRead], summary="부서 수정",
                dependencies=[Depends(auth.require_permission("sys:dept:edit")),
                              Depends(operation_log("部门管理", BusinessType.UPDATE))])
    async def update_dept(pk: int, dept_in: sys_schemas.DeptUpdate, db: AsyncSession = Depends(state.get_session)):
        db_dept = await sys_crud.dept.get_or_404(db, pk)
        if dept_in.parent_id is not None:
            if dept_in.parent_id == pk:
                raise sys_errors.OperationFailedError("上级部门不能是自身")
            await sys_crud.dept.get_or_404(db, dept_in.parent_id)
        db_dept = await sys_crud.dept.update(db, db_obj=db_dept, obj_in=dept_in)
        return success_with("更新成功", sys_schemas.DeptRead.model_validate(db_dept))

    @router.delete("", response_model=MessageModel, summary="부서 일괄 삭제",
                   dependencies=[Depends(auth.require_permission("sys:dept:del")),
                                 Depends(operation_log("部门管理", BusinessType.DELETE))])
    async def delete_depts(batch: DeleteBatch, db: AsyncSession = Depends(state.get_session)):
        ids = batch.unique_ids()
        await sys_crud.dept.ensure_deletable(db, ids)
        await sys_crud.dept.delete_batch(db, ids=ids)
        return success_msg("删除成功")

    return router


# =============================================================================
# 5. 역할/권한 할당 엔드포인트
# =============================================================================
def build_user_roles_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/user-roles", tags=["System - User Roles (사용자 역할 할당)"])
    auth = state.auth

    @router.get("/{user_id}", response_model=ResponseModel[List[int]], summary="사용자 역할 ID 조회",
                dependencies=[Depends(auth.require_permission("sys:user:list"))])
    async def read_user_role_ids(user_id: int, db: AsyncSession = Depends(state.get_session)):
        await sys_crud.user.get_or_404(db, user_id)
        return success(await sys_crud.user.role_ids(db, user_id))

    @router.put("/{user_id}", response_model=ResponseModel[List[int]], summary="사용자 역할 교체",
                dependencies=[Depends(auth.require_permission("sys:user:edit")),
                              Depends(operation_log("用户角色分配", BusinessType.UPDATE))])
    async def assign_user_roles(
        user_id: int,
        assign_in: sys_schemas.UserRoleAssign,
        db: AsyncSession = Depends(state.get_session),
    ):
        await sys_crud.user.get_or_404(db, user_id)
        role_ids = await sys_crud.user.replace_roles(db, user_id=user_id, role_ids=assign_in.role_ids)
        return success_with("分配成功", role_ids)

    return router


def build_role_permissions_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/role-permissions", tags=["System - Role Permissions (역할 권한 할당)"])
    auth = state.auth

    @router.get("/{role_id}", response_model=ResponseModel[List[int]], summary="역할 권한 ID 조회",
                dependencies=[Depends(auth.require_permission("sys:role:list"))])
    async def read_role_permission_ids(role_id: int, db: AsyncSession = Depends(state.get_session)):
        await sys_crud.role.get_or_404(db, role_id)
        return success(await sys_crud.role.permission_ids(db, role_id))

    @router.put("/{role_id}", response_model=ResponseModel[List[int]], summary="역할 권한 교체",
                dependencies=[Depends(auth.require_permission("sys:role:edit")),
                              Depends(operation_log("角色权限分配", BusinessType.UPDATE))])
    async def assign_role_permissions(
        role_id: int,
        assign_in: sys_schemas.RolePermissionAssign,
        db: AsyncSession = Depends(state.get_session),
    ):
        await sys_crud.role.get_or_404(db, role_id)
        permission_ids = await sys_crud.role.replace_permissions(
            db, role_id=role_id, permission_ids=assign_in.permission_ids,
        )
        return success_with("分配成功", permission_ids)

    return router


# =============================================================================
# 6. 플러그인 목록
# =============================================================================
def build_plugins_router(state: PluginState) -> APIRouter:
    router = APIRouter(prefix="/plugins", tags=["System - Plugins (플러그인 목록)"])

    @router.get("", response_model=ResponseModel[List[sys_schemas.PluginRead]], summary="조립된 플러그인 목록",
                dependencies=[Depends(state.auth.require_permission("sys:plugin:list"))])
    async def read_plugins():
        return success([
            sys_schemas.PluginRead(
                name=mounted.info.name,
                version=mounted.info.version,
                description=mounted.info.description,
                author=mounted.info.author,
                kind=mounted.kind.value,
                paths=list(mounted.paths),
            )
            for mounted in state.registry
        ])

    return router


def build_router(state: PluginState) -> APIRouter:
    """system 플러그인의 모든 leaf 라우터를 하나로 묶습니다."""
    router = APIRouter()
    for factory in (
        build_users_router,
        build_roles_router,
        build_permissions_router,
        build_depts_router,
        build_user_roles_router,
        build_role_permissions_router,
        build_plugins_router,
    ):
        router.include_router(factory(state))
    return router
