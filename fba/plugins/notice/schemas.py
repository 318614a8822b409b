# fba/plugins/notice/schemas.py

"""
'notice' 플러그인의 DTO 입니다. 검증 실패 메시지는 필드 선언 순서대로 모입니다.
"""

from typing import Annotated, Optional

from sqlmodel import SQLModel

from fba.core.schemas import MutableRead
from fba.core.validators import length, value_range

NoticeTitle = Annotated[str, length(1, 64, "标题长度必须在1-64之间")]
NoticeType = Annotated[int, value_range(0, 1, "类型必须是0或1")]
NoticeStatus = Annotated[int, value_range(0, 1, "状态必须是0或1")]
NoticeContent = Annotated[str, length(1, 50000, "内容长度必须在1-50000之间")]


class NoticeCreate(SQLModel):
    title: NoticeTitle
    type: NoticeType = 0
    status: NoticeStatus = 1
    content: NoticeContent


class NoticeUpdate(SQLModel):
    title: Optional[NoticeTitle] = None
    type: Optional[NoticeType] = None
    status: Optional[NoticeStatus] = None
    content: Optional[NoticeContent] = None


class NoticeRead(MutableRead):
    title: str
    type: int
    status: int
    content: str
