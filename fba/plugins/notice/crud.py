# fba/plugins/notice/crud.py

from typing import Any, List

from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError

from . import errors as notice_errors
from . import models as notice_models
from . import schemas as notice_schemas


class CRUDNotice(CRUDBase[notice_models.Notice, notice_schemas.NoticeCreate, notice_schemas.NoticeUpdate]):
    def __init__(self):
        super().__init__(model=notice_models.Notice)

    def not_found(self, id: Any) -> AppError:
        return notice_errors.NoticeNotFoundError()

    async def get_visible(self, db: AsyncSession) -> List[notice_models.Notice]:
        """게시 상태(status=1)의 공지를 최신순으로."""
        return await self.get_multi(db, filters={"status": 1}, order_by=["-id"])


notice = CRUDNotice()
