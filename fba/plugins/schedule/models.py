# fba/plugins/schedule/models.py

from typing import Optional

from sqlalchemy import Text
from sqlmodel import Field

from fba.core.models import MutableModel


class ScheduleJob(MutableModel, table=True):
    __tablename__ = "sys_schedule_job"

    job_name: str = Field(max_length=64, index=True, description="작업 이름")
    job_group: str = Field(default="DEFAULT", max_length=64, description="작업 그룹")
    invoke_target: str = Field(max_length=500, description="호출 대상 (worker 함수 이름)")
    cron_expression: str = Field(max_length=128, description="cron 표현식 (5 또는 6 필드)")
    misfire_policy: int = Field(default=0, description="0 기본 / 1 즉시 실행 / 2 한 번 실행 / 3 실행 안 함")
    concurrent: int = Field(default=0, description="0 금지 / 1 허용")
    status: int = Field(default=0, description="0 정상 / 1 일시 정지")
    remark: Optional[str] = Field(default=None, sa_type=Text)
