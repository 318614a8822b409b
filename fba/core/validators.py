# fba/core/validators.py

"""
DTO 필드에 선언적으로 붙이는 검증 규칙 모음입니다.

규칙은 Annotated 메타데이터(데이터)로 선언하고, pydantic 이 모델 필드 순서대로
실행합니다. 실패한 규칙은 지정된 메시지를 그대로 담은 오류를 만들고,
예외 처리기(fba.core.exceptions)가 이를 ", " 로 이어 하나의 ValidationError 로
응답합니다.

    title: Annotated[str, length(1, 64, "标题长度必须在1-64之间")]
    type: Annotated[int, value_range(0, 1, "类型必须是0或1")] = 0
"""

import re
from typing import Any, Callable, Optional

from croniter import croniter
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator
from pydantic_core import PydanticCustomError

from fba.core.exceptions import RULE_ERROR_TYPE

# 분 시 일 월 요일, 또는 맨 앞에 초가 붙는 6 필드 형식
CRON_FIELD_COUNTS = (5, 6)


def _fail(message: str) -> PydanticCustomError:
    # 메시지에 중괄호가 있으면 pydantic 이 템플릿으로 해석하므로 context 로 넘깁니다.
    return PydanticCustomError(RULE_ERROR_TYPE, "{message}", {"message": message})


def _rule(check: Callable[[Any], bool], message: str) -> AfterValidator:
    def _validate(value: Any) -> Any:
        # None 은 Optional 필드의 '값 없음'이므로 규칙을 적용하지 않습니다.
        if value is not None and not check(value):
            raise _fail(message)
        return value
    return AfterValidator(_validate)


def length(min_length: int, max_length: int, message: str) -> AfterValidator:
    """문자열 길이 범위 규칙 (양 끝 포함)."""
    return _rule(lambda v: min_length <= len(v) <= max_length, message)


def max_length(limit: int, message: str) -> AfterValidator:
    return _rule(lambda v: len(v) <= limit, message)


def value_range(minimum: Optional[float], maximum: Optional[float], message: str) -> AfterValidator:
    """숫자 범위 규칙. 0..=1 같은 정수 코드 열거에도 사용합니다."""
    def _check(v: Any) -> bool:
        if minimum is not None and v < minimum:
            return False
        if maximum is not None and v > maximum:
            return False
        return True
    return _rule(_check, message)


def pattern(regex: str, message: str) -> AfterValidator:
    """정규식 전체 일치 규칙."""
    compiled = re.compile(regex)
    return _rule(lambda v: compiled.fullmatch(v) is not None, message)


def _is_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def email(message: str) -> AfterValidator:
    """주소 형식만 확인하고 값은 바꾸지 않습니다. (DNS 조회 없음)"""
    return _rule(_is_email, message)


def _is_cron(value: str) -> bool:
    fields = value.split()
    if len(fields) not in CRON_FIELD_COUNTS:
        return False
    return croniter.is_valid(value, second_at_beginning=len(fields) == 6)


def cron(message: str) -> AfterValidator:
    return _rule(_is_cron, message)
