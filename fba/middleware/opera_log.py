# fba/middleware/opera_log.py

"""
작업 로그(operation log) 표시 의존성입니다.

    @router.post("", dependencies=[Depends(operation_log("通知公告", BusinessType.CREATE))])

표시된 요청이 끝나면 접근 로그 미들웨어가 sys_opera_log 레코드를 하나 더 남깁니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from fastapi import Request


class BusinessType(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    QUERY = "query"
    OTHER = "other"


@dataclass(frozen=True)
class OperaMark:
    title: str
    business_type: BusinessType


def operation_log(title: str, business_type: BusinessType = BusinessType.OTHER) -> Callable:
    mark = OperaMark(title=title, business_type=business_type)

    async def mark_operation(request: Request) -> None:
        request.state.opera = mark

    return mark_operation
