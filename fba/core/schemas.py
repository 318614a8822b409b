# fba/core/schemas.py

"""플러그인 공통 요청/응답 스키마."""

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, SQLModel


class DeleteBatch(SQLModel):
    """일괄 삭제 요청 본문. 빈 목록은 아무것도 하지 않는 성공입니다."""
    ids: List[int] = Field(default_factory=list, description="삭제할 기본키 목록")

    def unique_ids(self) -> List[int]:
        # 입력 순서를 유지하며 중복을 제거합니다.
        return list(dict.fromkeys(self.ids))


class AppendOnlyRead(SQLModel):
    id: int
    created_time: datetime


class MutableRead(SQLModel):
    id: int
    created_time: datetime
    updated_time: Optional[datetime] = None
