# fba/plugins/dict/schemas.py

from typing import Annotated, Optional

from sqlmodel import SQLModel

from fba.core.schemas import MutableRead
from fba.core.validators import length, pattern, value_range

DictName = Annotated[str, length(1, 32, "字典名称长度必须在1-32之间")]
DictCode = Annotated[str, length(1, 32, "字典编码长度必须在1-32之间"),
                     pattern(r"^[a-zA-Z0-9_]+$", "字典编码只能包含字母、数字和下划线")]
StatusCode = Annotated[int, value_range(0, 1, "状态必须是0或1")]

DictLabel = Annotated[str, length(1, 64, "标签长度必须在1-64之间")]
DictValue = Annotated[str, length(1, 64, "数据值长度必须在1-64之间")]
TypeCode = Annotated[str, length(1, 32, "类型编码长度必须在1-32之间")]
IsDefault = Annotated[str, length(1, 1, "is_default长度必须为1"), pattern(r"^[YN]$", "is_default只能是Y或N")]


# =============================================================================
# 1. 사전 유형
# =============================================================================
class DictTypeCreate(SQLModel):
    name: DictName
    code: DictCode
    status: StatusCode = 1
    remark: Optional[str] = None


class DictTypeUpdate(SQLModel):
    name: Optional[DictName] = None
    code: Optional[DictCode] = None
    status: Optional[StatusCode] = None
    remark: Optional[str] = None


class DictTypeRead(MutableRead):
    name: str
    code: str
    status: int
    remark: Optional[str] = None


# =============================================================================
# 2. 사전 데이터
# =============================================================================
class DictDataCreate(SQLModel):
    label: DictLabel
    value: DictValue
    sort: int = 0
    type_id: int
    type_code: TypeCode
    is_default: IsDefault = "N"
    status: StatusCode = 1
    remark: Optional[str] = None


class DictDataUpdate(SQLModel):
    label: Optional[DictLabel] = None
    value: Optional[DictValue] = None
    sort: Optional[int] = None
    type_id: Optional[int] = None
    type_code: Optional[TypeCode] = None
    is_default: Optional[IsDefault] = None
    status: Optional[StatusCode] = None
    remark: Optional[str] = None


class DictDataRead(MutableRead):
    label: str
    value: str
    sort: int
    type_id: int
    type_code: str
    is_default: str
    status: int
    remark: Optional[str] = None
