# fba/plugins/system/crud.py

"""
'system' 플러그인의 CRUD 작업을 담당하는 모듈입니다.

역할 할당/권한 할당은 기존 집합을 지우고 새 집합을 넣는 작업을 하나의 트랜잭션으로
수행합니다.
"""

from typing import Any, FrozenSet, List, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError
from fba.core.models import utc_now
from fba.core.security import AuthContext, get_password_hash, verify_password

from . import errors as sys_errors
from . import models as sys_models
from . import schemas as sys_schemas


# =============================================================================
# 1. sys_dept 테이블 CRUD
# =============================================================================
class CRUDDept(CRUDBase[sys_models.Dept, sys_schemas.DeptCreate, sys_schemas.DeptUpdate]):
    def __init__(self):
        super().__init__(model=sys_models.Dept)

    def not_found(self, id: Any) -> AppError:
        return sys_errors.DeptNotFoundError()

    async def ensure_deletable(self, db: AsyncSession, ids: Sequence[int]) -> None:
        """하위 부서나 소속 사용자가 있으면 삭제를 거부합니다."""
        if not ids:
            return
        children = await db.execute(
            select(func.count()).select_from(sys_models.Dept)
            .where(sys_models.Dept.parent_id.in_(ids), sys_models.Dept.del_flag == 0,
                   sys_models.Dept.id.notin_(ids))
        )
        if children.scalar_one():
            raise sys_errors.DeptInUseError("存在子部门，无法删除")
        members = await db.execute(
            select(func.count()).select_from(sys_models.User)
            .where(sys_models.User.dept_id.in_(ids), sys_models.User.del_flag == 0)
        )
        if members.scalar_one():
            raise sys_errors.DeptInUseError("部门下存在用户，无法删除")


# =============================================================================
# 2. sys_user 테이블 CRUD
# =============================================================================
class CRUDUser(CRUDBase[sys_models.User, sys_schemas.UserCreate, sys_schemas.UserUpdate]):
    unique_fields = ("username",)

    def __init__(self):
        super().__init__(model=sys_models.User)

    def not_found(self, id: Any) -> AppError:
        return sys_errors.UserNotFoundError()

    def already_exists(self, field: str, value: Any) -> AppError:
        return sys_errors.UsernameExistsError(value)

    async def find_by_username(self, db: AsyncSession, *, username: str) -> Optional[sys_models.User]:
        return await self.get_by_attribute(db, attribute="username", value=username)

    async def create(self, db: AsyncSession, *, obj_in: sys_schemas.UserCreate, **extra: Any) -> sys_models.User:
        """
        비밀번호를 해싱해 사용자를 만들고, role_ids 가 있으면 같은 트랜잭션에서 역할을 부여합니다.
        """
        await self._check_unique(db, {"username": obj_in.username})
        if obj_in.dept_id is not None:
            await dept.get_or_404(db, obj_in.dept_id)
        role_ids = await role.existing_ids(db, obj_in.role_ids)
        db_obj = sys_models.User(
            **obj_in.model_dump(exclude={"password", "role_ids", "nickname"}),
            nickname=obj_in.nickname or obj_in.username,
            password_hash=get_password_hash(obj_in.password),
            created_time=utc_now(),
        )
        unique_values = {"username": obj_in.username}
        db.add(db_obj)
        await self._flush(db, unique_values)
        db.add_all([sys_models.UserRole(user_id=db_obj.id, role_id=role_id) for role_id in role_ids])
        await self._commit(db, unique_values)
        await db.refresh(db_obj)
        return db_obj

    async def update(self, db: AsyncSession, *, db_obj: sys_models.User, obj_in) -> sys_models.User:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        if data.get("dept_id") is not None:
            await dept.get_or_404(db, data["dept_id"])
        return await super().update(db, db_obj=db_obj, obj_in=data)

    async def set_password(self, db: AsyncSession, *, db_obj: sys_models.User, password: str) -> sys_models.User:
        return await super().update(db, db_obj=db_obj, obj_in={"password_hash": get_password_hash(password)})

    async def authenticate(self, db: AsyncSession, *, username: str, password: str) -> Optional[sys_models.User]:
        """사용자명/비밀번호가 맞으면 사용자를, 아니면 None 을 돌려줍니다. (상태는 호출자가 확인)"""
        user = await self.find_by_username(db, username=username)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    async def record_login(self, db: AsyncSession, *, db_obj: sys_models.User, ip: str) -> None:
        # 로그인 시각 기록은 사용자 정보 변경이 아니므로 updated_time 을 건드리지 않습니다.
        db_obj.last_login_time = utc_now()
        db_obj.last_login_ip = ip
        db.add(db_obj)

    async def role_ids(self, db: AsyncSession, user_id: int) -> List[int]:
        result = await db.execute(
            select(sys_models.UserRole.role_id)
            .where(sys_models.UserRole.user_id == user_id)
            .order_by(sys_models.UserRole.role_id)
        )
        return list(result.scalars().all())

    async def replace_roles(self, db: AsyncSession, *, user_id: int, role_ids: Sequence[int]) -> List[int]:
        """사용자의 역할 집합을 원자적으로 교체합니다."""
        valid_ids = await role.existing_ids(db, role_ids)
        await db.execute(sa_delete(sys_models.UserRole).where(sys_models.UserRole.user_id == user_id))
        db.add_all([sys_models.UserRole(user_id=user_id, role_id=role_id) for role_id in valid_ids])
        await self._commit(db)
        return valid_ids


# =============================================================================
# 3. sys_role 테이블 CRUD
# =============================================================================
class CRUDRole(CRUDBase[sys_models.Role, sys_schemas.RoleCreate, sys_schemas.RoleUpdate]):
    unique_fields = ("code",)

    def __init__(self):
        super().__init__(model=sys_models.Role)

    def not_found(self, id: Any) -> AppError:
        return sys_errors.RoleNotFoundError()

    def already_exists(self, field: str, value: Any) -> AppError:
        return sys_errors.RoleCodeExistsError(value)

    async def find_by_code(self, db: AsyncSession, *, code: str) -> Optional[sys_models.Role]:
        return await self.get_by_attribute(db, attribute="code", value=code)

    async def existing_ids(self, db: AsyncSession, ids: Sequence[int]) -> List[int]:
        """요청한 역할 ID 가 모두 존재하는지 확인하고 중복을 제거한 목록을 돌려줍니다."""
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return []
        result = await db.execute(self._alive(select(self.model.id).where(self.model.id.in_(unique_ids))))
        found = set(result.scalars().all())
        missing = [i for i in unique_ids if i not in found]
        if missing:
            raise sys_errors.RoleNotFoundError(f"角色 {missing[0]} 不存在")
        return unique_ids

    async def permission_ids(self, db: AsyncSession, role_id: int) -> List[int]:
        result = await db.execute(
            select(sys_models.RolePermission.permission_id)
            .where(sys_models.RolePermission.role_id == role_id)
            .order_by(sys_models.RolePermission.permission_id)
        )
        return list(result.scalars().all())

    async def replace_permissions(self, db: AsyncSession, *, role_id: int,
                                  permission_ids: Sequence[int]) -> List[int]:
        """역할의 권한 집합을 원자적으로 교체합니다."""
        valid_ids = await permission.existing_ids(db, permission_ids)
        await db.execute(
            sa_delete(sys_models.RolePermission).where(sys_models.RolePermission.role_id == role_id)
        )
        db.add_all([
            sys_models.RolePermission(role_id=role_id, permission_id=permission_id)
            for permission_id in valid_ids
        ])
        await self._commit(db)
        return valid_ids

    async def delete_batch(self, db: AsyncSession, *, ids: Sequence[int]) -> int:
        # 삭제된 역할의 사용자/권한 연결도 함께 정리합니다.
        unique_ids = list(dict.fromkeys(ids))
        if unique_ids:
            await db.execute(sa_delete(sys_models.UserRole).where(sys_models.UserRole.role_id.in_(unique_ids)))
            await db.execute(
                sa_delete(sys_models.RolePermission).where(sys_models.RolePermission.role_id.in_(unique_ids))
            )
        return await super().delete_batch(db, ids=unique_ids)


# =============================================================================
# 4. sys_permission 테이블 CRUD
# =============================================================================
class CRUDPermission(CRUDBase[sys_models.Permission, sys_schemas.PermissionCreate, sys_schemas.PermissionUpdate]):
    unique_fields = ("code",)

    def __init__(self):
        super().__init__(model=sys_models.Permission)

    def not_found(self, id: Any) -> AppError:
        return sys_errors.PermissionNotFoundError()

    def already_exists(self, field: str, value: Any) -> AppError:
        return sys_errors.PermissionCodeExistsError(value)

    async def find_by_code(self, db: AsyncSession, *, code: str) -> Optional[sys_models.Permission]:
        return await self.get_by_attribute(db, attribute="code", value=code)

    async def existing_ids(self, db: AsyncSession, ids: Sequence[int]) -> List[int]:
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return []
        result = await db.execute(self._alive(select(self.model.id).where(self.model.id.in_(unique_ids))))
        found = set(result.scalars().all())
        missing = [i for i in unique_ids if i not in found]
        if missing:
            raise sys_errors.PermissionNotFoundError(f"权限 {missing[0]} 不存在")
        return unique_ids

    async def codes_for_user(self, db: AsyncSession, user_id: int) -> FrozenSet[str]:
        """사용자의 (활성) 역할 → (활성) 권한 코드 집합."""
        statement = (
            select(sys_models.Permission.code)
            .join(sys_models.RolePermission, sys_models.RolePermission.permission_id == sys_models.Permission.id)
            .join(sys_models.Role, sys_models.Role.id == sys_models.RolePermission.role_id)
            .join(sys_models.UserRole, sys_models.UserRole.role_id == sys_models.Role.id)
            .where(
                sys_models.UserRole.user_id == user_id,
                sys_models.Role.status == sys_models.Status.ENABLED,
                sys_models.Role.del_flag == 0,
                sys_models.Permission.status == sys_models.Status.ENABLED,
                sys_models.Permission.del_flag == 0,
            )
            .distinct()
        )
        result = await db.execute(statement)
        return frozenset(result.scalars().all())

    async def delete_batch(self, db: AsyncSession, *, ids: Sequence[int]) -> int:
        unique_ids = list(dict.fromkeys(ids))
        if unique_ids:
            await db.execute(
                sa_delete(sys_models.RolePermission)
                .where(sys_models.RolePermission.permission_id.in_(unique_ids))
            )
        return await super().delete_batch(db, ids=unique_ids)


dept = CRUDDept()
user = CRUDUser()
role = CRUDRole()
permission = CRUDPermission()


# =============================================================================
# 5. 인증 자격 증명 저장소 (Authenticator 가 사용)
# =============================================================================
class SystemCredentialsSource:
    """sys_user / sys_dept / 역할-권한 테이블에서 호출자 정보를 읽습니다."""

    async def load_context(self, session: AsyncSession, user_id: int) -> Optional[AuthContext]:
        db_user = await user.get(session, user_id)
        if db_user is None or db_user.status != sys_models.Status.ENABLED:
            return None
        return await self.context_for(session, db_user)

    async def context_for(self, session: AsyncSession, db_user: sys_models.User) -> AuthContext:
        dept_name = None
        if db_user.dept_id is not None:
            db_dept = await dept.get(session, db_user.dept_id)
            dept_name = db_dept.name if db_dept else None
        return AuthContext(
            user_id=db_user.id,
            username=db_user.username,
            dept_id=db_user.dept_id,
            dept_name=dept_name,
            is_super=bool(db_user.is_super),
        )

    async def load_permission_codes(self, session: AsyncSession, user_id: int) -> FrozenSet[str]:
        return await permission.codes_for_user(session, user_id)

