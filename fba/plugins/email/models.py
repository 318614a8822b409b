# fba/plugins/email/models.py

from datetime import datetime
from typing import Optional

from sqlalchemy import Text
from sqlmodel import Field

from fba.core.models import AppendOnlyModel, TimestampType


class EmailRecord(AppendOnlyModel, table=True):
    """발송 기록. status: 0 대기 / 1 성공 / 2 실패"""
    __tablename__ = "sys_email_record"

    to_email: str = Field(max_length=255, index=True)
    subject: str = Field(max_length=255)
    content: str = Field(sa_type=Text)
    is_html: int = Field(default=0)
    status: int = Field(default=0, index=True)
    error_msg: Optional[str] = Field(default=None, sa_type=Text)
    send_time: Optional[datetime] = Field(default=None, sa_type=TimestampType)
