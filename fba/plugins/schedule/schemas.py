# fba/plugins/schedule/schemas.py

from typing import Annotated, Optional

from sqlmodel import SQLModel

from fba.core.schemas import MutableRead
from fba.core.validators import cron, length, value_range

JobName = Annotated[str, length(1, 64, "任务名称长度必须在1-64之间")]
JobGroup = Annotated[str, length(1, 64, "任务组名长度必须在1-64之间")]
InvokeTarget = Annotated[str, length(1, 500, "调用目标长度必须在1-500之间")]
CronExpression = Annotated[str, length(1, 128, "cron表达式长度必须在1-128之间"), cron("cron表达式格式不正确")]
MisfirePolicy = Annotated[int, value_range(0, 3, "执行策略必须在0-3之间")]
Concurrent = Annotated[int, value_range(0, 1, "并发执行必须是0或1")]
JobStatus = Annotated[int, value_range(0, 1, "状态必须是0或1")]


class ScheduleJobCreate(SQLModel):
    job_name: JobName
    job_group: JobGroup = "DEFAULT"
    invoke_target: InvokeTarget
    cron_expression: CronExpression
    misfire_policy: MisfirePolicy = 0
    concurrent: Concurrent = 0
    status: JobStatus = 0
    remark: Optional[str] = None


class ScheduleJobUpdate(SQLModel):
    job_name: Optional[JobName] = None
    job_group: Optional[JobGroup] = None
    invoke_target: Optional[InvokeTarget] = None
    cron_expression: Optional[CronExpression] = None
    misfire_policy: Optional[MisfirePolicy] = None
    concurrent: Optional[Concurrent] = None
    status: Optional[JobStatus] = None
    remark: Optional[str] = None


class ScheduleJobStatusUpdate(SQLModel):
    status: JobStatus


class ScheduleJobRead(MutableRead):
    job_name: str
    job_group: str
    invoke_target: str
    cron_expression: str
    misfire_policy: int
    concurrent: int
    status: int
    remark: Optional[str] = None
