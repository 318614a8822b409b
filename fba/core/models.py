# fba/core/models.py

"""
모든 엔티티가 공유하는 기본키/타임스탬프/소프트 삭제 믹스인입니다.

- 기본키: 64비트 정수, 저장소가 단조 증가로 부여합니다. (SQLite 에서는 INTEGER 로 변형)
- 타임스탬프 정책은 두 가지뿐입니다.
    * AppendOnlyModel: created_time 만 가집니다. (로그, 발송 기록 등)
    * MutableModel: created_time + nullable updated_time. updated_time 은
      모든 변경 시점에 갱신되고, created_time 은 삽입 시 한 번만 설정됩니다.
- SoftDeleteMixin: del_flag 컬럼이 있는 엔티티는 기본 조회에서 제외됩니다.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, Integer
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel

# SQLite 는 INTEGER PRIMARY KEY 에서만 자동 증가하므로 방언별 타입을 둡니다.
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")
TimestampType = TIMESTAMP(timezone=True)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def id_field() -> Optional[int]:
    return Field(default=None, primary_key=True, sa_type=BigIntPK, description="기본키")


class AppendOnlyModel(SQLModel):
    """created_time 만 가지는 추가 전용 엔티티."""
    id: Optional[int] = id_field()
    created_time: datetime = Field(
        default_factory=utc_now,
        sa_type=TimestampType,
        nullable=False,
        description="레코드 생성 일시",
    )


class MutableModel(SQLModel):
    """created_time + updated_time 을 가지는 변경 가능 엔티티."""
    id: Optional[int] = id_field()
    created_time: datetime = Field(
        default_factory=utc_now,
        sa_type=TimestampType,
        nullable=False,
        description="레코드 생성 일시",
    )
    updated_time: Optional[datetime] = Field(
        default=None,
        sa_type=TimestampType,
        nullable=True,
        description="레코드 마지막 변경 일시",
    )


class SoftDeleteMixin(SQLModel):
    """del_flag: 0 정상, 1 삭제."""
    del_flag: int = Field(default=0, nullable=False, description="삭제 플래그 (0 정상 / 1 삭제)")
