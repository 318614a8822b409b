# fba/plugins/dict/models.py

"""
데이터 사전 (sys_dict_type, sys_dict_data) ORM 모델입니다.
"""

from typing import Optional

from sqlalchemy import BigInteger, Text
from sqlmodel import Field

from fba.core.models import MutableModel


class DictType(MutableModel, table=True):
    __tablename__ = "sys_dict_type"

    name: str = Field(max_length=32, description="사전 이름")
    code: str = Field(max_length=32, sa_column_kwargs={"unique": True}, description="사전 코드")
    status: int = Field(default=1)
    remark: Optional[str] = Field(default=None, sa_type=Text)


class DictData(MutableModel, table=True):
    __tablename__ = "sys_dict_data"

    label: str = Field(max_length=64, description="표시 라벨")
    value: str = Field(max_length=64, description="데이터 값")
    sort: int = Field(default=0)
    type_id: int = Field(sa_type=BigInteger, index=True)
    type_code: str = Field(max_length=32, index=True)
    is_default: str = Field(default="N", max_length=1, description="Y / N")
    status: int = Field(default=1)
    remark: Optional[str] = Field(default=None, sa_type=Text)
