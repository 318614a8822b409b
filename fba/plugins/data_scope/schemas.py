# fba/plugins/data_scope/schemas.py

from typing import Annotated, List, Optional

from sqlmodel import Field, SQLModel

from fba.core.schemas import MutableRead
from fba.core.validators import length, value_range

RuleName = Annotated[str, length(1, 512, "规则名称长度必须在1-512个字符之间")]
RuleModel = Annotated[str, length(1, 64, "模型名称长度必须在1-64个字符之间")]
RuleColumn = Annotated[str, length(1, 32, "字段名称长度必须在1-32个字符之间")]
RuleOperatorCode = Annotated[int, value_range(0, 1, "运算符必须是0或1")]
RuleExpressionCode = Annotated[int, value_range(0, 7, "表达式必须在0-7之间")]
RuleValue = Annotated[str, length(1, 256, "规则值长度必须在1-256个字符之间")]
ScopeName = Annotated[str, length(1, 64, "名称长度必须在1-64个字符之间")]
StatusCode = Annotated[int, value_range(0, 1, "状态必须是0或1")]


class DataRuleCreate(SQLModel):
    name: RuleName
    model: RuleModel
    column: RuleColumn
    operator: RuleOperatorCode = 0
    expression: RuleExpressionCode = 0
    value: RuleValue


class DataRuleUpdate(SQLModel):
    name: Optional[RuleName] = None
    model: Optional[RuleModel] = None
    column: Optional[RuleColumn] = None
    operator: Optional[RuleOperatorCode] = None
    expression: Optional[RuleExpressionCode] = None
    value: Optional[RuleValue] = None


class DataRuleRead(MutableRead):
    name: str
    model: str
    column: str
    operator: int
    expression: int
    value: str


class DataScopeCreate(SQLModel):
    name: ScopeName
    status: StatusCode = 1


class DataScopeUpdate(SQLModel):
    name: Optional[ScopeName] = None
    status: Optional[StatusCode] = None


class DataScopeRead(MutableRead):
    name: str
    status: int


class DataRuleModelRead(SQLModel):
    model: str
    table_name: str
    description: str


class DataRuleColumnRead(SQLModel):
    name: str
    type: str
    nullable: bool
    comment: Optional[str] = None


class DataScopeRuleAssign(SQLModel):
    rule_ids: List[int] = Field(default_factory=list)


class RoleDataScopeAssign(SQLModel):
    data_scope_ids: List[int] = Field(default_factory=list)
