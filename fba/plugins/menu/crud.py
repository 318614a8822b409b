# fba/plugins/menu/crud.py

"""
'menu' 플러그인의 CRUD 작업입니다.

역할 메뉴 할당은 system 플러그인의 역할 권한 할당과 같은 방식으로,
기존 연결을 지우고 새 연결을 넣는 작업을 하나의 트랜잭션으로 수행합니다.
"""

from typing import Any, List, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError
from fba.core.security import AuthContext
from fba.plugins.system import models as sys_models

from . import errors as menu_errors
from . import models as menu_models
from . import schemas as menu_schemas

SIDEBAR_TYPES = (menu_models.MenuType.DIRECTORY, menu_models.MenuType.MENU)


class CRUDMenu(CRUDBase[menu_models.Menu, menu_schemas.MenuCreate, menu_schemas.MenuUpdate]):
    def __init__(self):
        super().__init__(model=menu_models.Menu)

    def not_found(self, id: Any) -> AppError:
        return menu_errors.MenuNotFoundError()

    async def existing_ids(self, db: AsyncSession, ids: Sequence[int]) -> List[int]:
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return []
        result = await db.execute(select(self.model.id).where(self.model.id.in_(unique_ids)))
        found = set(result.scalars().all())
        missing = [i for i in unique_ids if i not in found]
        if missing:
            raise menu_errors.MenuNotFoundError(f"菜单 {missing[0]} 不存在")
        return unique_ids

    async def ensure_deletable(self, db: AsyncSession, ids: Sequence[int]) -> None:
        if not ids:
            return
        children = await db.execute(
            select(func.count()).select_from(self.model)
            .where(self.model.parent_id.in_(ids), self.model.id.notin_(ids))
        )
        if children.scalar_one():
            raise menu_errors.MenuInUseError()

    async def sidebar(self, db: AsyncSession, ctx: AuthContext) -> List[menu_models.Menu]:
        """
        사이드바에 그릴 활성/표시 상태의 디렉토리와 메뉴.
        슈퍼유저는 전체, 그 외에는 (활성) 역할에 할당된 메뉴만 돌려줍니다.
        """
        statement = select(self.model).where(
            self.model.status == 1,
            self.model.display.is_(True),
            self.model.type.in_([int(t) for t in SIDEBAR_TYPES]),
        )
        if not ctx.is_super:
            role_ids = (
                select(sys_models.UserRole.role_id)
                .join(sys_models.Role, sys_models.Role.id == sys_models.UserRole.role_id)
                .where(
                    sys_models.UserRole.user_id == ctx.user_id,
                    sys_models.Role.status == sys_models.Status.ENABLED,
                    sys_models.Role.del_flag == 0,
                )
            )
            menu_ids = select(menu_models.RoleMenu.menu_id).where(menu_models.RoleMenu.role_id.in_(role_ids))
            statement = statement.where(self.model.id.in_(menu_ids))
        result = await db.execute(self._order(statement, ["sort", "id"]))
        return list(result.scalars().all())

    async def role_menu_ids(self, db: AsyncSession, role_id: int) -> List[int]:
        result = await db.execute(
            select(menu_models.RoleMenu.menu_id)
            .where(menu_models.RoleMenu.role_id == role_id)
            .order_by(menu_models.RoleMenu.menu_id)
        )
        return list(result.scalars().all())

    async def replace_role_menus(self, db: AsyncSession, *, role_id: int, menu_ids: Sequence[int]) -> List[int]:
        """역할의 메뉴 집합을 원자적으로 교체합니다."""
        valid_ids = await self.existing_ids(db, menu_ids)
        await db.execute(sa_delete(menu_models.RoleMenu).where(menu_models.RoleMenu.role_id == role_id))
        db.add_all([menu_models.RoleMenu(role_id=role_id, menu_id=menu_id) for menu_id in valid_ids])
        await self._commit(db)
        return valid_ids

    async def delete_batch(self, db: AsyncSession, *, ids: Sequence[int]) -> int:
        unique_ids = list(dict.fromkeys(ids))
        if unique_ids:
            await db.execute(sa_delete(menu_models.RoleMenu).where(menu_models.RoleMenu.menu_id.in_(unique_ids)))
        return await super().delete_batch(db, ids=unique_ids)

    async def check_parent(self, db: AsyncSession, parent_id: Optional[int], pk: Optional[int] = None) -> None:
        if parent_id is None:
            return
        if parent_id == pk:
            raise menu_errors.OperationFailedError("上级菜单不能是自身")
        await self.get_or_404(db, parent_id)


menu = CRUDMenu()
