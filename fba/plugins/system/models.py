# fba/plugins/system/models.py

"""
'system' 플러그인 (사용자/역할/권한/부서)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- sys_dept, sys_user, sys_role, sys_permission: 변경 가능 + 소프트 삭제 엔티티
- sys_user_role, sys_role_permission: 연결 테이블 (추가 전용, 물리 삭제)
"""

from datetime import datetime
from enum import IntEnum
from typing import Optional

from sqlalchemy import BigInteger, UniqueConstraint
from sqlmodel import Field

from fba.core.models import AppendOnlyModel, MutableModel, SoftDeleteMixin, TimestampType


class Status(IntEnum):
    DISABLED = 0
    ENABLED = 1


class PermissionType(IntEnum):
    DIRECTORY = 0   # 디렉토리
    MENU = 1        # 메뉴
    BUTTON = 2      # 버튼(동작)


# =============================================================================
# 1. sys_dept 테이블 모델
# =============================================================================
class Dept(MutableModel, SoftDeleteMixin, table=True):
    __tablename__ = "sys_dept"

    name: str = Field(max_length=64, description="부서명")
    parent_id: Optional[int] = Field(default=None, sa_type=BigInteger, index=True, description="상위 부서 ID")
    sort: int = Field(default=0, description="정렬 순서")
    leader: Optional[str] = Field(default=None, max_length=32)
    phone: Optional[str] = Field(default=None, max_length=32)
    email: Optional[str] = Field(default=None, max_length=64)
    status: int = Field(default=Status.ENABLED)


# =============================================================================
# 2. sys_user 테이블 모델
# =============================================================================
class User(MutableModel, SoftDeleteMixin, table=True):
    __tablename__ = "sys_user"

    username: str = Field(max_length=32, sa_column_kwargs={"unique": True}, description="로그인 ID")
    password_hash: str = Field(max_length=255)
    nickname: str = Field(max_length=32)
    email: Optional[str] = Field(default=None, max_length=64)
    phone: Optional[str] = Field(default=None, max_length=32)
    avatar: Optional[str] = Field(default=None, max_length=255)
    dept_id: Optional[int] = Field(default=None, sa_type=BigInteger, index=True)
    status: int = Field(default=Status.ENABLED, description="1 활성 / 0 비활성")
    gender: int = Field(default=0, description="0 미상 / 1 남 / 2 여")
    is_super: bool = Field(default=False, description="슈퍼유저 여부 (권한 검사 우회)")
    last_login_time: Optional[datetime] = Field(default=None, sa_type=TimestampType)
    last_login_ip: Optional[str] = Field(default=None, max_length=64)


# =============================================================================
# 3. sys_role / sys_permission 테이블 모델
# =============================================================================
class Role(MutableModel, SoftDeleteMixin, table=True):
    __tablename__ = "sys_role"

    name: str = Field(max_length=32)
    code: str = Field(max_length=64, sa_column_kwargs={"unique": True})
    description: Optional[str] = Field(default=None, max_length=255)
    sort: int = Field(default=0)
    status: int = Field(default=Status.ENABLED)
    is_system: bool = Field(default=False, description="시스템 내장 역할")


class Permission(MutableModel, SoftDeleteMixin, table=True):
    __tablename__ = "sys_permission"

    parent_id: Optional[int] = Field(default=None, sa_type=BigInteger, index=True)
    name: str = Field(max_length=64)
    code: str = Field(max_length=128, sa_column_kwargs={"unique": True}, description="권한 코드 (예: sys:notice:add)")
    type: int = Field(default=PermissionType.BUTTON)
    path: Optional[str] = Field(default=None, max_length=255)
    component: Optional[str] = Field(default=None, max_length=255)
    icon: Optional[str] = Field(default=None, max_length=64)
    sort: int = Field(default=0)
    status: int = Field(default=Status.ENABLED)


# =============================================================================
# 4. 연결 테이블
# =============================================================================
class UserRole(AppendOnlyModel, table=True):
    __tablename__ = "sys_user_role"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uk_user_role"),)

    user_id: int = Field(sa_type=BigInteger, index=True)
    role_id: int = Field(sa_type=BigInteger, index=True)


class RolePermission(AppendOnlyModel, table=True):
    __tablename__ = "sys_role_permission"
    __table_args__ = (UniqueConstraint("role_id", "permission_id", name="uk_role_permission"),)

    role_id: int = Field(sa_type=BigInteger, index=True)
    permission_id: int = Field(sa_type=BigInteger, index=True)
