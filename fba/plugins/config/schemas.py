# fba/plugins/config/schemas.py

from typing import Annotated, Optional

from sqlmodel import SQLModel

from fba.core.schemas import MutableRead
from fba.core.validators import length, max_length, pattern

ConfigName = Annotated[str, length(1, 64, "配置名称长度必须在1-64之间")]
ConfigKey = Annotated[str, length(1, 64, "配置键长度必须在1-64之间"),
                      pattern(r"^[a-zA-Z0-9._]+$", "配置键只能包含字母、数字、点和下划线")]
ConfigValue = Annotated[str, max_length(10000, "配置值长度不能超过10000")]
ConfigType = Annotated[str, length(1, 32, "配置类型长度必须在1-32之间")]
Remark = Annotated[str, max_length(255, "备注长度不能超过255")]


class ConfigCreate(SQLModel):
    name: ConfigName
    type: ConfigType = "text"
    key: ConfigKey
    value: ConfigValue = ""
    is_frontend: bool = False
    remark: Optional[Remark] = None


class ConfigUpdate(SQLModel):
    """key 는 생성 후 바꿀 수 없습니다."""
    name: Optional[ConfigName] = None
    type: Optional[ConfigType] = None
    value: Optional[ConfigValue] = None
    is_frontend: Optional[bool] = None
    remark: Optional[Remark] = None


class ConfigRead(MutableRead):
    name: str
    type: str
    key: str
    value: str
    is_frontend: bool
    remark: Optional[str] = None
