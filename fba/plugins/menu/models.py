# fba/plugins/menu/models.py

"""
- sys_menu: 디렉토리/메뉴/버튼 트리 (parent_id 로 연결)
- sys_role_menu: 역할 ↔ 메뉴 연결 테이블 (추가 전용, 물리 삭제)
"""

from enum import IntEnum
from typing import Optional

from sqlalchemy import BigInteger, Text, UniqueConstraint
from sqlmodel import Field

from fba.core.models import AppendOnlyModel, MutableModel


class MenuType(IntEnum):
    DIRECTORY = 0
    MENU = 1
    BUTTON = 2


class Menu(MutableModel, table=True):
    __tablename__ = "sys_menu"

    title: str = Field(max_length=100, description="메뉴 제목 (다국어 key)")
    name: str = Field(max_length=50, description="라우트 이름")
    parent_id: Optional[int] = Field(default=None, sa_type=BigInteger, index=True, description="상위 메뉴 ID")
    sort: int = Field(default=0)
    path: Optional[str] = Field(default=None, max_length=200)
    component: Optional[str] = Field(default=None, max_length=255)
    type: int = Field(default=MenuType.MENU, description="0 디렉토리 / 1 메뉴 / 2 버튼")
    perms: Optional[str] = Field(default=None, max_length=100, description="권한 코드")
    icon: Optional[str] = Field(default=None, max_length=100)
    status: int = Field(default=1, description="0 비활성 / 1 활성")
    display: bool = Field(default=True, description="사이드바 표시 여부")
    cache: bool = Field(default=False, description="페이지 캐시 여부")
    link: Optional[str] = Field(default=None, sa_type=Text, description="외부 링크")
    remark: Optional[str] = Field(default=None, sa_type=Text)


class RoleMenu(AppendOnlyModel, table=True):
    __tablename__ = "sys_role_menu"
    __table_args__ = (UniqueConstraint("role_id", "menu_id", name="uk_role_menu"),)

    role_id: int = Field(sa_type=BigInteger, index=True)
    menu_id: int = Field(sa_type=BigInteger, index=True)
