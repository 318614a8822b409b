# fba/plugins/data_scope/models.py

"""
- sys_data_rule: 모델 컬럼에 대한 조건 하나 (column <expression> value)
- sys_data_scope: 규칙 묶음
- sys_data_scope_rule / sys_role_data_scope: 범위 ↔ 규칙, 역할 ↔ 범위 연결 테이블
"""

from enum import IntEnum

from sqlalchemy import BigInteger, UniqueConstraint
from sqlmodel import Field

from fba.core.models import AppendOnlyModel, MutableModel


class RuleOperator(IntEnum):
    AND = 0
    OR = 1


class RuleExpression(IntEnum):
    EQ = 0
    NE = 1
    GT = 2
    GE = 3
    LT = 4
    LE = 5
    IN = 6
    NOT_IN = 7


class DataRule(MutableModel, table=True):
    __tablename__ = "sys_data_rule"

    name: str = Field(max_length=512, unique=True, description="규칙 이름")
    model: str = Field(max_length=64, description="대상 모델 이름")
    column: str = Field(max_length=32, description="대상 컬럼 이름")
    operator: int = Field(default=RuleOperator.AND, description="0 and / 1 or")
    expression: int = Field(default=RuleExpression.EQ, description="0 == / 1 != / 2 > / 3 >= / 4 < / 5 <= / 6 in / 7 not_in")
    value: str = Field(max_length=256, description="규칙 값 (in / not_in 은 쉼표 구분)")


class DataScope(MutableModel, table=True):
    __tablename__ = "sys_data_scope"

    name: str = Field(max_length=64, unique=True)
    status: int = Field(default=1, description="0 비활성 / 1 활성")


class DataScopeRule(AppendOnlyModel, table=True):
    __tablename__ = "sys_data_scope_rule"
    __table_args__ = (UniqueConstraint("data_scope_id", "data_rule_id", name="uk_data_scope_rule"),)

    data_scope_id: int = Field(sa_type=BigInteger, index=True)
    data_rule_id: int = Field(sa_type=BigInteger, index=True)


class RoleDataScope(AppendOnlyModel, table=True):
    __tablename__ = "sys_role_data_scope"
    __table_args__ = (UniqueConstraint("role_id", "data_scope_id", name="uk_role_data_scope"),)

    role_id: int = Field(sa_type=BigInteger, index=True)
    data_scope_id: int = Field(sa_type=BigInteger, index=True)
