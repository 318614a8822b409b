# fba/plugins/log/schemas.py

from datetime import datetime
from typing import Optional

from fba.core.schemas import AppendOnlyRead


class LoginLogRead(AppendOnlyRead):
    user_id: Optional[int] = None
    username: str
    status: int
    ip: str
    os: Optional[str] = None
    browser: Optional[str] = None
    device: Optional[str] = None
    user_agent: Optional[str] = None
    msg: str
    login_time: datetime


class OperaLogRead(AppendOnlyRead):
    trace_id: str
    username: Optional[str] = None
    method: str
    title: str
    business_type: str
    path: str
    ip: str
    os: Optional[str] = None
    browser: Optional[str] = None
    device: Optional[str] = None
    user_agent: Optional[str] = None
    args: Optional[str] = None
    status: int
    code: str
    msg: Optional[str] = None
    cost_time: float
    opera_time: datetime


class AccessLogRead(AppendOnlyRead):
    trace_id: str
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    dept_id: Optional[int] = None
    dept_name: Optional[str] = None
    method: str
    url: str
    query_params: Optional[str] = None
    request_body: Optional[str] = None
    status_code: int
    response_body: Optional[str] = None
    client_ip: str
    user_agent: Optional[str] = None
    os: Optional[str] = None
    browser: Optional[str] = None
    device_type: Optional[str] = None
    referer: Optional[str] = None
    cost_time: int
    is_error: bool
    error_msg: Optional[str] = None
    access_time: datetime
