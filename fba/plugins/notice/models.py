# fba/plugins/notice/models.py

from sqlalchemy import Text
from sqlmodel import Field

from fba.core.models import MutableModel


class Notice(MutableModel, table=True):
    __tablename__ = "sys_notice"

    title: str = Field(max_length=64, index=True, description="제목")
    type: int = Field(default=0, description="0 통지 / 1 공고")
    status: int = Field(default=1, description="0 숨김 / 1 게시")
    content: str = Field(sa_type=Text, description="본문")
