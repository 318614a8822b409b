# fba/plugins/dict/crud.py

from typing import Any, List, Sequence

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError

from . import errors as dict_errors
from . import models as dict_models
from . import schemas as dict_schemas

DATA_ORDER = ("type_id", "sort")


class CRUDDictType(CRUDBase[dict_models.DictType, dict_schemas.DictTypeCreate, dict_schemas.DictTypeUpdate]):
    unique_fields = ("code",)

    def __init__(self):
        super().__init__(model=dict_models.DictType)

    def not_found(self, id: Any) -> AppError:
        return dict_errors.DictTypeNotFoundError()

    def already_exists(self, field: str, value: Any) -> AppError:
        return dict_errors.DictCodeExistsError(value)

    async def delete_batch(self, db: AsyncSession, *, ids: Sequence[int]) -> int:
        """데이터가 딸린 유형이 하나라도 있으면 아무것도 지우지 않고 거부합니다."""
        unique_ids = list(dict.fromkeys(ids))
        if unique_ids:
            result = await db.execute(
                select(func.count()).select_from(dict_models.DictData)
                .where(dict_models.DictData.type_id.in_(unique_ids))
            )
            if result.scalar_one() > 0:
                raise dict_errors.DictTypeInUseError()
        return await super().delete_batch(db, ids=unique_ids)


class CRUDDictData(CRUDBase[dict_models.DictData, dict_schemas.DictDataCreate, dict_schemas.DictDataUpdate]):
    def __init__(self):
        super().__init__(model=dict_models.DictData)

    def not_found(self, id: Any) -> AppError:
        return dict_errors.DictDataNotFoundError()

    async def create(self, db: AsyncSession, *, obj_in: dict_schemas.DictDataCreate, **extra: Any):
        await dict_type.get_or_404(db, obj_in.type_id)
        return await super().create(db, obj_in=obj_in, **extra)

    async def update(self, db: AsyncSession, *, db_obj: dict_models.DictData, obj_in):
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        if data.get("type_id") is not None:
            await dict_type.get_or_404(db, data["type_id"])
        return await super().update(db, db_obj=db_obj, obj_in=data)

    async def get_by_type_code(self, db: AsyncSession, *, code: str) -> List[dict_models.DictData]:
        """활성 상태의 사전 데이터를 정렬 순서대로."""
        return await self.get_multi(db, filters={"type_code": code, "status": 1}, order_by=["sort", "id"])


dict_type = CRUDDictType()
dict_data = CRUDDictData()
