# fba/plugins/config/models.py

from typing import Optional

from sqlalchemy import Text
from sqlmodel import Field

from fba.core.models import MutableModel


class Config(MutableModel, table=True):
    __tablename__ = "sys_config"

    name: str = Field(max_length=64, description="설정 이름")
    type: str = Field(default="text", max_length=32, index=True, description="설정 분류")
    key: str = Field(max_length=64, sa_column_kwargs={"unique": True}, description="설정 키")
    value: str = Field(default="", sa_type=Text)
    is_frontend: bool = Field(default=False, description="프론트엔드 노출 여부")
    remark: Optional[str] = Field(default=None, max_length=255)
