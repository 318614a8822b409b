# fba/plugins/system/schemas.py

"""
'system' 플러그인 (사용자/역할/권한/부서)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import EmailStr
from sqlmodel import Field, SQLModel

from fba.core.schemas import MutableRead
from fba.core.validators import length, max_length, pattern, value_range

Username = Annotated[str, length(1, 32, "用户名长度必须在1-32之间"),
                     pattern(r"^[a-zA-Z0-9_]+$", "用户名只能包含字母、数字和下划线")]
Password = Annotated[str, length(6, 64, "密码长度必须在6-64之间")]
Nickname = Annotated[str, length(1, 32, "昵称长度必须在1-32之间")]
StatusCode = Annotated[int, value_range(0, 1, "状态必须是0或1")]
Gender = Annotated[int, value_range(0, 2, "性别必须是0、1或2")]


# =============================================================================
# 1. 사용자 (User) 스키마
# =============================================================================
class UserCreate(SQLModel):
    username: Username
    password: Password
    nickname: Optional[Nickname] = None
    email: Optional[EmailStr] = None
    phone: Optional[Annotated[str, max_length(32, "手机号长度不能超过32")]] = None
    avatar: Optional[str] = None
    dept_id: Optional[int] = None
    status: StatusCode = 1
    gender: Gender = 0
    is_super: bool = False
    role_ids: List[int] = Field(default_factory=list, description="생성과 동시에 부여할 역할 ID")


class UserUpdate(SQLModel):
    nickname: Optional[Nickname] = None
    email: Optional[EmailStr] = None
    phone: Optional[Annotated[str, max_length(32, "手机号长度不能超过32")]] = None
    avatar: Optional[str] = None
    dept_id: Optional[int] = None
    status: Optional[StatusCode] = None
    gender: Optional[Gender] = None


class UserRead(MutableRead):
    username: str
    nickname: str
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
    dept_id: Optional[int] = None
    status: int
    gender: int
    is_super: bool
    last_login_time: Optional[datetime] = None
    last_login_ip: Optional[str] = None


class UserStatusUpdate(SQLModel):
    status: StatusCode


class UserPasswordReset(SQLModel):
    password: Password


class UserPasswordChange(SQLModel):
    old_password: Annotated[str, length(1, 64, "旧密码不能为空")]
    new_password: Password


# =============================================================================
# 2. 역할 (Role) / 권한 (Permission) 스키마
# =============================================================================
RoleCode = Annotated[str, length(1, 64, "角色编码长度必须在1-64之间"),
                     pattern(r"^[a-zA-Z0-9_:]+$", "角色编码只能包含字母、数字、下划线和冒号")]


class RoleCreate(SQLModel):
    name: Annotated[str, length(1, 32, "角色名称长度必须在1-32之间")]
    code: RoleCode
    description: Optional[Annotated[str, max_length(255, "描述长度不能超过255")]] = None
    sort: int = 0
    status: StatusCode = 1


class RoleUpdate(SQLModel):
    name: Optional[Annotated[str, length(1, 32, "角色名称长度必须在1-32之间")]] = None
    code: Optional[RoleCode] = None
    description: Optional[Annotated[str, max_length(255, "描述长度不能超过255")]] = None
    sort: Optional[int] = None
    status: Optional[StatusCode] = None


class RoleRead(MutableRead):
    name: str
    code: str
    description: Optional[str] = None
    sort: int
    status: int
    is_system: bool


PermissionCode = Annotated[str, length(1, 128, "权限编码长度必须在1-128之间")]
PermissionTypeCode = Annotated[int, value_range(0, 2, "权限类型必须是0、1或2")]


class PermissionCreate(SQLModel):
    parent_id: Optional[int] = None
    name: Annotated[str, length(1, 64, "权限名称长度必须在1-64之间")]
    code: PermissionCode
    type: PermissionTypeCode = 2
    path: Optional[str] = None
    component: Optional[str] = None
    icon: Optional[str] = None
    sort: int = 0
    status: StatusCode = 1


class PermissionUpdate(SQLModel):
    parent_id: Optional[int] = None
    name: Optional[Annotated[str, length(1, 64, "权限名称长度必须在1-64之间")]] = None
    code: Optional[PermissionCode] = None
    type: Optional[PermissionTypeCode] = None
    path: Optional[str] = None
    component: Optional[str] = None
    icon: Optional[str] = None
    sort: Optional[int] = None
    status: Optional[StatusCode] = None


class PermissionRead(MutableRead):
    parent_id: Optional[int] = None
    name: str
    code: str
    type: int
    path: Optional[str] = None
    component: Optional[str] = None
    icon: Optional[str] = None
    sort: int
    status: int


class PermissionTree(PermissionRead):
    children: List["PermissionTree"] = Field(default_factory=list)


# =============================================================================
# 3. 부서 (Dept) 스키마
# =============================================================================
class DeptCreate(SQLModel):
    name: Annotated[str, length(1, 64, "部门名称长度必须在1-64之间")]
    parent_id: Optional[int] = None
    sort: int = 0
    leader: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    status: StatusCode = 1


class DeptUpdate(SQLModel):
    name: Optional[Annotated[str, length(1, 64, "部门名称长度必须在1-64之间")]] = None
    parent_id: Optional[int] = None
    sort: Optional[int] = None
    leader: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    status: Optional[StatusCode] = None


class DeptRead(MutableRead):
    name: str
    parent_id: Optional[int] = None
    sort: int
    leader: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    status: int


class DeptTree(DeptRead):
    children: List["DeptTree"] = Field(default_factory=list)


# =============================================================================
# 4. 역할/권한 할당 스키마
# =============================================================================
class UserRoleAssign(SQLModel):
    role_ids: List[int] = Field(default_factory=list)


class RolePermissionAssign(SQLModel):
    permission_ids: List[int] = Field(default_factory=list)


class PluginRead(SQLModel):
    name: str
    version: str
    description: str
    author: str
    kind: str
    paths: List[str]


PermissionTree.model_rebuild()
DeptTree.model_rebuild()
