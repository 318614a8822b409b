# fba/plugins/email/crud.py

from datetime import datetime
from typing import Any, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError

from . import errors as email_errors
from . import models as email_models

STATUS_PENDING = 0
STATUS_SENT = 1
STATUS_FAILED = 2


class CRUDEmailRecord(CRUDBase):
    def __init__(self):
        super().__init__(model=email_models.EmailRecord)

    def not_found(self, id: Any) -> AppError:
        return email_errors.EmailRecordNotFoundError()

    async def add_pending(self, db: AsyncSession, *, to: str, subject: str, content: str,
                          is_html: bool) -> email_models.EmailRecord:
        db_obj = email_models.EmailRecord(
            to_email=to, subject=subject, content=content, is_html=int(is_html), status=STATUS_PENDING,
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def mark_result(self, db: AsyncSession, *, id: int, error: Optional[str], sent_at: datetime) -> None:
        """발송 결과를 기록합니다. (발송 기록은 추가 전용이지만 상태 칸만은 결과로 채웁니다)"""
        db_obj = await self.get_or_404(db, id)
        if error is None:
            db_obj.status = STATUS_SENT
            db_obj.send_time = sent_at
        else:
            db_obj.status = STATUS_FAILED
            db_obj.error_msg = error
        db.add(db_obj)
        await db.commit()


email_record = CRUDEmailRecord()
