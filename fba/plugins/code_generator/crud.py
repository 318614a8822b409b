# fba/plugins/code_generator/crud.py

from typing import Any, List, Optional

from sqlalchemy import delete as sa_delete
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError

from . import errors as gen_errors
from . import models as gen_models
from . import schemas as gen_schemas
from . import services as gen_services


class CRUDGenBusiness(CRUDBase[gen_models.GenBusiness, gen_schemas.GenBusinessCreate, gen_schemas.GenBusinessUpdate]):
    unique_fields = ("table_name",)

    def __init__(self):
        super().__init__(model=gen_models.GenBusiness)

    def not_found(self, id: Any) -> AppError:
        return gen_errors.BusinessNotFoundError()

    def already_exists(self, field: str, value: Any) -> AppError:
        return gen_errors.BusinessExistsError()

    async def import_table(self, db: AsyncSession, *, app: str, table_name: str,
                           table_schema: Optional[str] = None) -> gen_models.GenBusiness:
        """
        실제 테이블을 반영해 업무(business)와 컬럼 메타데이터를 한 트랜잭션으로 만듭니다.
        """
        table = await gen_services.get_table(db, table_name, table_schema)
        await self._check_unique(db, {"table_name": table_name})
        columns = await gen_services.list_columns(db, table_name, table_schema)

        class_name = gen_services.pascal_case(table_name)
        business = gen_models.GenBusiness(
            app_name=app,
            table_name=table_name,
            doc_comment=table.table_comment or table_name.split("_")[-1],
            table_comment=table.table_comment,
            class_name=class_name,
            schema_name=class_name,
            filename=table_name,
            default_datetime_column=True,
            api_version="v1",
        )
        db.add(business)
        await self._flush(db, {"table_name": table_name})
        db.add_all(gen_services.build_gen_columns(business.id, columns))
        await self._commit(db, {"table_name": table_name})
        await db.refresh(business)
        return business

    async def delete_with_columns(self, db: AsyncSession, id: int) -> None:
        await self.get_or_404(db, id)
        await db.execute(sa_delete(gen_models.GenColumn).where(gen_models.GenColumn.business_id == id))
        await db.execute(sa_delete(gen_models.GenBusiness).where(gen_models.GenBusiness.id == id))
        await db.commit()


class CRUDGenColumn(CRUDBase):
    def __init__(self):
        super().__init__(model=gen_models.GenColumn)

    async def for_business(self, db: AsyncSession, business_id: int) -> List[gen_models.GenColumn]:
        return await self.get_multi(db, filters={"business_id": business_id}, order_by=["sort", "id"])


gen_business = CRUDGenBusiness()
gen_column = CRUDGenColumn()
