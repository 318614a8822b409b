# fba/core/pagination.py

"""
페이지 조회 파라미터와 페이지 응답(PageData) 모델입니다.

- page >= 1 (기본 1), size 는 1..100 (기본 10), offset = (page - 1) * size
- pages = ceil(total / size), total 이 0 이면 pages 도 0
"""

import math
from typing import Generic, List, Sequence, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field

DEFAULT_PAGE = 1
DEFAULT_SIZE = 10
MAX_SIZE = 100

T = TypeVar("T")


class PageParams(BaseModel):
    page: int = Field(DEFAULT_PAGE, ge=1)
    size: int = Field(DEFAULT_SIZE, ge=1, le=MAX_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size


def page_params(
    page: int = Query(DEFAULT_PAGE, ge=1, description="페이지 번호 (1부터)"),
    size: int = Query(DEFAULT_SIZE, ge=1, le=MAX_SIZE, description="페이지 크기 (1-100)"),
) -> PageParams:
    """FastAPI 의존성: 쿼리 문자열의 page/size 를 검증해 PageParams 로 돌려줍니다."""
    return PageParams(page=page, size=size)


def total_pages(total: int, size: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / size)


class PageData(BaseModel, Generic[T]):
    total: int
    items: List[T]
    page: int
    size: int
    pages: int

    @classmethod
    def build(cls, items: Sequence[T], total: int, params: PageParams) -> "PageData[T]":
        return cls(
            total=total,
            items=list(items),
            page=params.page,
            size=params.size,
            pages=total_pages(total, params.size),
        )
