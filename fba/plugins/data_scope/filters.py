# fba/plugins/data_scope/filters.py

"""
데이터 규칙 목록을 SQLAlchemy WHERE 조건으로 바꿉니다.

operator 가 and 인 규칙끼리는 AND 로, or 인 규칙끼리는 OR 로 묶은 뒤
두 묶음을 OR 로 합칩니다. 규칙이 없으면 항상 참인 조건을 돌려줍니다.
"""

from typing import Any, Callable, Dict, List, Sequence, Type

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import SQLModel

from fba.plugins.menu.models import Menu
from fba.plugins.system.models import Dept, Role, User

from . import errors as scope_errors
from .models import DataRule, RuleExpression, RuleOperator

# 규칙이 대상으로 삼을 수 있는 모델: 이름 → (모델, 설명)
FILTERABLE_MODELS: Dict[str, Any] = {
    "User": (User, "用户管理模型"),
    "Role": (Role, "角色管理模型"),
    "Dept": (Dept, "部门管理模型"),
    "Menu": (Menu, "菜单管理模型"),
}

# 규칙 대상에서 제외하는 컬럼
HIDDEN_COLUMNS = frozenset({"password_hash", "del_flag"})

_COMPARATORS: Dict[int, Callable[[Any, Any], ColumnElement]] = {
    RuleExpression.EQ: lambda column, value: column == value,
    RuleExpression.NE: lambda column, value: column != value,
    RuleExpression.GT: lambda column, value: column > value,
    RuleExpression.GE: lambda column, value: column >= value,
    RuleExpression.LT: lambda column, value: column < value,
    RuleExpression.LE: lambda column, value: column <= value,
    RuleExpression.IN: lambda column, value: column.in_(value),
    RuleExpression.NOT_IN: lambda column, value: column.notin_(value),
}


def resolve_model(name: str) -> Type[SQLModel]:
    entry = FILTERABLE_MODELS.get(name)
    if entry is None:
        raise scope_errors.DataRuleTargetError(f"数据规则模型 {name} 不存在")
    return entry[0]


def resolve_column(model: Type[SQLModel], name: str):
    column = model.__table__.columns.get(name)
    if column is None or name in HIDDEN_COLUMNS:
        raise scope_errors.DataRuleTargetError(f"模型 {model.__name__} 不存在字段 {name}")
    return column


def _coerce(column, raw: str) -> Any:
    raw = raw.strip()
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return raw
    if python_type is bool:
        return raw.lower() in ("1", "true")
    if python_type in (int, float):
        try:
            return python_type(raw)
        except ValueError:
            raise scope_errors.DataRuleTargetError(f"字段 {column.name} 的规则值 {raw} 类型不正确") from None
    return raw


def rule_condition(model: Type[SQLModel], rule: DataRule) -> ColumnElement:
    column = resolve_column(model, rule.column)
    if rule.expression in (RuleExpression.IN, RuleExpression.NOT_IN):
        value: Any = [_coerce(column, part) for part in rule.value.split(",") if part.strip()]
    else:
        value = _coerce(column, rule.value)
    comparator = _COMPARATORS.get(rule.expression)
    if comparator is None:
        raise scope_errors.DataRuleTargetError(f"不支持的表达式 {rule.expression}")
    return comparator(getattr(model, rule.column), value)


def build_filter(model: Type[SQLModel], rules: Sequence[DataRule]) -> ColumnElement:
    """model 을 대상으로 하는 규칙만 골라 하나의 조건으로 합칩니다."""
    and_list: List[ColumnElement] = []
    or_list: List[ColumnElement] = []
    for rule in rules:
        if FILTERABLE_MODELS.get(rule.model, (None,))[0] is not model:
            continue
        condition = rule_condition(model, rule)
        (or_list if rule.operator == RuleOperator.OR else and_list).append(condition)

    groups: List[ColumnElement] = []
    if and_list:
        groups.append(and_(*and_list))
    if or_list:
        groups.append(or_(*or_list))
    if not groups:
        return true()
    return or_(*groups)
