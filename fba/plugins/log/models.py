# fba/plugins/log/models.py

"""
로그 테이블 (sys_login_log, sys_opera_log, sys_access_log) 의 ORM 모델입니다.
모두 추가 전용(append-only) 엔티티이며 삭제는 물리 삭제입니다.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Text
from sqlmodel import Field

from fba.core.models import AppendOnlyModel, TimestampType, utc_now


class LoginLog(AppendOnlyModel, table=True):
    __tablename__ = "sys_login_log"

    user_id: Optional[int] = Field(default=None, sa_type=BigInteger, index=True)
    username: str = Field(max_length=64, index=True)
    status: int = Field(default=0, description="로그인 결과 (1 성공 / 0 실패)")
    ip: str = Field(max_length=64)
    os: Optional[str] = Field(default=None, max_length=64)
    browser: Optional[str] = Field(default=None, max_length=64)
    device: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    msg: str = Field(max_length=255)
    login_time: datetime = Field(default_factory=utc_now, sa_type=TimestampType)


class OperaLog(AppendOnlyModel, table=True):
    __tablename__ = "sys_opera_log"

    trace_id: str = Field(max_length=64, index=True)
    username: Optional[str] = Field(default=None, max_length=64, index=True)
    method: str = Field(max_length=16)
    title: str = Field(max_length=128)
    business_type: str = Field(max_length=16)
    path: str = Field(max_length=512)
    ip: str = Field(max_length=64)
    os: Optional[str] = Field(default=None, max_length=64)
    browser: Optional[str] = Field(default=None, max_length=64)
    device: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    args: Optional[str] = Field(default=None, sa_type=Text)
    status: int = Field(default=1, description="작업 결과 (1 성공 / 0 실패)")
    code: str = Field(max_length=16)
    msg: Optional[str] = Field(default=None, sa_type=Text)
    cost_time: float = Field(default=0.0, description="처리 시간 (ms)")
    opera_time: datetime = Field(default_factory=utc_now, sa_type=TimestampType)


class AccessLog(AppendOnlyModel, table=True):
    __tablename__ = "sys_access_log"

    trace_id: str = Field(max_length=64, index=True)
    user_id: Optional[int] = Field(default=None, sa_type=BigInteger)
    user_name: Optional[str] = Field(default=None, max_length=64, index=True)
    dept_id: Optional[int] = Field(default=None, sa_type=BigInteger)
    dept_name: Optional[str] = Field(default=None, max_length=64)
    method: str = Field(max_length=16)
    url: str = Field(max_length=2048)
    query_params: Optional[str] = Field(default=None, sa_type=Text)
    request_body: Optional[str] = Field(default=None, sa_type=Text)
    status_code: int
    response_body: Optional[str] = Field(default=None, sa_type=Text)
    client_ip: str = Field(max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    os: Optional[str] = Field(default=None, max_length=64)
    browser: Optional[str] = Field(default=None, max_length=64)
    device_type: Optional[str] = Field(default=None, max_length=64)
    referer: Optional[str] = Field(default=None, max_length=1024)
    cost_time: int = Field(default=0, description="처리 시간 (ms)")
    is_error: bool = Field(default=False, index=True)
    error_msg: Optional[str] = Field(default=None, sa_type=Text)
    access_time: datetime = Field(default_factory=utc_now, sa_type=TimestampType)
