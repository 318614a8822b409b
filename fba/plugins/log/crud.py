# fba/plugins/log/crud.py

from datetime import datetime
from typing import Any, Dict, Iterable, List, Tuple

from sqlalchemy import delete as sa_delete
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError

from . import errors as log_errors
from . import models as log_models

# 접근 로그 기록기가 넘겨주는 레코드 종류 → 모델
RECORD_MODELS = {
    "access": log_models.AccessLog,
    "opera": log_models.OperaLog,
    "login": log_models.LoginLog,
}


class CRUDLog(CRUDBase):
    """로그 테이블 공통: 조회/일괄 삭제/전체 비우기만 지원합니다."""

    def __init__(self, model, label: str):
        super().__init__(model=model)
        self.label = label

    def not_found(self, id: Any) -> AppError:
        return log_errors.LogNotFoundError(f"{self.label} {id} 不存在")

    async def clear(self, db: AsyncSession) -> int:
        result = await db.execute(sa_delete(self.model))
        await db.commit()
        return result.rowcount or 0

    async def purge_before(self, db: AsyncSession, before: datetime) -> int:
        """보존 기간이 지난 로그를 지웁니다. (arq 워커의 정리 작업)"""
        result = await db.execute(sa_delete(self.model).where(self.model.created_time < before))
        await db.commit()
        return result.rowcount or 0


login_log = CRUDLog(log_models.LoginLog, "登录日志")
opera_log = CRUDLog(log_models.OperaLog, "操作日志")
access_log = CRUDLog(log_models.AccessLog, "访问日志")


async def save_records(db: AsyncSession, records: Iterable[Tuple[str, Dict[str, Any]]]) -> int:
    """(종류, 값) 레코드 묶음을 한 트랜잭션으로 저장합니다."""
    rows: List[SQLModel] = [RECORD_MODELS[kind](**values) for kind, values in records]
    if not rows:
        return 0
    db.add_all(rows)
    await db.commit()
    return len(rows)
