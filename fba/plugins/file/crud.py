# fba/plugins/file/crud.py

from typing import Any

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError

from . import errors as file_errors
from . import models as file_models
from . import schemas as file_schemas


class CRUDFileInfo(CRUDBase[file_models.FileInfo, file_schemas.FileInfoCreate, file_schemas.FileInfoCreate]):
    def __init__(self):
        super().__init__(model=file_models.FileInfo)

    def not_found(self, id: Any) -> AppError:
        return file_errors.FileNotFoundInStoreError()

    async def increase_download_count(self, db: AsyncSession, id: int) -> file_models.FileInfo:
        """
        행 잠금(SELECT ... FOR UPDATE) 후 다운로드 횟수를 1 올립니다.
        다운로드 기록은 파일 정보 변경이 아니므로 updated_time 은 그대로 둡니다.
        """
        result = await db.execute(
            select(self.model)
            .where(self.model.id == id, self.model.del_flag == 0)
            .with_for_update()
        )
        db_obj = result.scalars().first()
        if db_obj is None:
            raise self.not_found(id)
        db_obj.download_count += 1
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj


file_info = CRUDFileInfo()
