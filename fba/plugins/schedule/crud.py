# fba/plugins/schedule/crud.py

from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError

from . import errors as schedule_errors
from . import models as schedule_models
from . import schemas as schedule_schemas


class CRUDScheduleJob(CRUDBase[schedule_models.ScheduleJob, schedule_schemas.ScheduleJobCreate,
                               schedule_schemas.ScheduleJobUpdate]):
    def __init__(self):
        super().__init__(model=schedule_models.ScheduleJob)

    def not_found(self, id: Any) -> AppError:
        return schedule_errors.ScheduleJobNotFoundError()

    async def set_status(self, db: AsyncSession, id: int, status: int) -> schedule_models.ScheduleJob:
        db_obj = await self.get_or_404(db, id)
        return await self.update(db, db_obj=db_obj, obj_in={"status": status})


schedule_job = CRUDScheduleJob()
