# fba/plugins/data_scope/crud.py

"""
'data_scope' 플러그인의 CRUD 작업입니다.

범위 ↔ 규칙, 역할 ↔ 범위 할당은 기존 연결을 지우고 새 연결을 넣는 작업을
하나의 트랜잭션으로 수행합니다.
"""

from typing import Any, Dict, List, Sequence

from sqlalchemy import delete as sa_delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError
from fba.plugins.system import models as sys_models

from . import errors as scope_errors
from . import filters as scope_filters
from . import models as scope_models
from . import schemas as scope_schemas


def _missing_ids(ids: Sequence[int], found: Sequence[int]) -> List[int]:
    found_set = set(found)
    return [i for i in dict.fromkeys(ids) if i not in found_set]


class CRUDDataRule(CRUDBase[scope_models.DataRule, scope_schemas.DataRuleCreate, scope_schemas.DataRuleUpdate]):
    unique_fields = ("name",)

    def __init__(self):
        super().__init__(model=scope_models.DataRule)

    def not_found(self, id: Any) -> AppError:
        return scope_errors.DataRuleNotFoundError()

    def already_exists(self, field: str, value: Any) -> AppError:
        return scope_errors.DataRuleNameExistsError(value)

    @staticmethod
    def check_target(values: Dict[str, Any]) -> None:
        """model/column 이 필터 대상에 있는지 확인합니다."""
        model = scope_filters.resolve_model(values["model"])
        scope_filters.resolve_column(model, values["column"])

    async def existing_ids(self, db: AsyncSession, ids: Sequence[int]) -> List[int]:
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return []
        result = await db.execute(select(self.model.id).where(self.model.id.in_(unique_ids)))
        missing = _missing_ids(unique_ids, result.scalars().all())
        if missing:
            raise scope_errors.DataRuleNotFoundError(f"数据规则 {missing[0]} 不存在")
        return unique_ids

    async def delete_batch(self, db: AsyncSession, *, ids: Sequence[int]) -> int:
        unique_ids = list(dict.fromkeys(ids))
        if unique_ids:
            await db.execute(
                sa_delete(scope_models.DataScopeRule).where(scope_models.DataScopeRule.data_rule_id.in_(unique_ids))
            )
        return await super().delete_batch(db, ids=unique_ids)


class CRUDDataScope(CRUDBase[scope_models.DataScope, scope_schemas.DataScopeCreate, scope_schemas.DataScopeUpdate]):
    unique_fields = ("name",)

    def __init__(self):
        super().__init__(model=scope_models.DataScope)

    def not_found(self, id: Any) -> AppError:
        return scope_errors.DataScopeNotFoundError()

    def already_exists(self, field: str, value: Any) -> AppError:
        return scope_errors.DataScopeNameExistsError(value)

    async def existing_ids(self, db: AsyncSession, ids: Sequence[int]) -> List[int]:
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return []
        result = await db.execute(select(self.model.id).where(self.model.id.in_(unique_ids)))
        missing = _missing_ids(unique_ids, result.scalars().all())
        if missing:
            raise scope_errors.DataScopeNotFoundError(f"数据范围 {missing[0]} 不存在")
        return unique_ids

    async def rule_ids(self, db: AsyncSession, scope_id: int) -> List[int]:
        result = await db.execute(
            select(scope_models.DataScopeRule.data_rule_id)
            .where(scope_models.DataScopeRule.data_scope_id == scope_id)
            .order_by(scope_models.DataScopeRule.data_rule_id)
        )
        return list(result.scalars().all())

    async def replace_rules(self, db: AsyncSession, *, scope_id: int, rule_ids: Sequence[int]) -> List[int]:
        valid_ids = await data_rule.existing_ids(db, rule_ids)
        await db.execute(
            sa_delete(scope_models.DataScopeRule).where(scope_models.DataScopeRule.data_scope_id == scope_id)
        )
        db.add_all([scope_models.DataScopeRule(data_scope_id=scope_id, data_rule_id=rule_id) for rule_id in valid_ids])
        await self._commit(db)
        return valid_ids

    async def role_scope_ids(self, db: AsyncSession, role_id: int) -> List[int]:
        result = await db.execute(
            select(scope_models.RoleDataScope.data_scope_id)
            .where(scope_models.RoleDataScope.role_id == role_id)
            .order_by(scope_models.RoleDataScope.data_scope_id)
        )
        return list(result.scalars().all())

    async def replace_role_scopes(self, db: AsyncSession, *, role_id: int, scope_ids: Sequence[int]) -> List[int]:
        valid_ids = await self.existing_ids(db, scope_ids)
        await db.execute(sa_delete(scope_models.RoleDataScope).where(scope_models.RoleDataScope.role_id == role_id))
        db.add_all([scope_models.RoleDataScope(role_id=role_id, data_scope_id=scope_id) for scope_id in valid_ids])
        await self._commit(db)
        return valid_ids

    async def rules_for_user(self, db: AsyncSession, user_id: int) -> List[scope_models.DataRule]:
        """사용자의 (활성) 역할 → (활성) 범위 → 규칙 목록. 중복 없이 id 순서."""
        statement = (
            select(scope_models.DataRule)
            .join(scope_models.DataScopeRule, scope_models.DataScopeRule.data_rule_id == scope_models.DataRule.id)
            .join(scope_models.DataScope, scope_models.DataScope.id == scope_models.DataScopeRule.data_scope_id)
            .join(scope_models.RoleDataScope, scope_models.RoleDataScope.data_scope_id == scope_models.DataScope.id)
            .join(sys_models.Role, sys_models.Role.id == scope_models.RoleDataScope.role_id)
            .join(sys_models.UserRole, sys_models.UserRole.role_id == sys_models.Role.id)
            .where(
                sys_models.UserRole.user_id == user_id,
                sys_models.Role.status == sys_models.Status.ENABLED,
                sys_models.Role.del_flag == 0,
                scope_models.DataScope.status == 1,
            )
            .distinct()
            .order_by(scope_models.DataRule.id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def delete_batch(self, db: AsyncSession, *, ids: Sequence[int]) -> int:
        unique_ids = list(dict.fromkeys(ids))
        if unique_ids:
            await db.execute(
                sa_delete(scope_models.DataScopeRule).where(scope_models.DataScopeRule.data_scope_id.in_(unique_ids))
            )
            await db.execute(
                sa_delete(scope_models.RoleDataScope).where(scope_models.RoleDataScope.data_scope_id.in_(unique_ids))
            )
        return await super().delete_batch(db, ids=unique_ids)


data_rule = CRUDDataRule()
data_scope = CRUDDataScope()
