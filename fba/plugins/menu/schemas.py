# fba/plugins/menu/schemas.py

from typing import Annotated, List, Optional

from sqlmodel import Field, SQLModel

from fba.core.schemas import MutableRead
from fba.core.validators import length, max_length, value_range

MenuTitle = Annotated[str, length(1, 100, "菜单标题长度必须在1-100之间")]
MenuName = Annotated[str, length(1, 50, "菜单名称长度必须在1-50之间")]
MenuPath = Annotated[str, max_length(200, "路由路径长度不能超过200")]
MenuTypeCode = Annotated[int, value_range(0, 2, "菜单类型必须在0-2之间")]
MenuPerms = Annotated[str, max_length(100, "权限标识长度不能超过100")]
StatusCode = Annotated[int, value_range(0, 1, "状态必须是0或1")]


class MenuCreate(SQLModel):
    title: MenuTitle
    name: MenuName
    parent_id: Optional[int] = None
    sort: int = 0
    path: Optional[MenuPath] = None
    component: Optional[str] = None
    type: MenuTypeCode = 1
    perms: Optional[MenuPerms] = None
    icon: Optional[str] = None
    status: StatusCode = 1
    display: bool = True
    cache: bool = False
    link: Optional[str] = None
    remark: Optional[str] = None


class MenuUpdate(SQLModel):
    title: Optional[MenuTitle] = None
    name: Optional[MenuName] = None
    parent_id: Optional[int] = None
    sort: Optional[int] = None
    path: Optional[MenuPath] = None
    component: Optional[str] = None
    type: Optional[MenuTypeCode] = None
    perms: Optional[MenuPerms] = None
    icon: Optional[str] = None
    status: Optional[StatusCode] = None
    display: Optional[bool] = None
    cache: Optional[bool] = None
    link: Optional[str] = None
    remark: Optional[str] = None


class MenuRead(MutableRead):
    title: str
    name: str
    parent_id: Optional[int] = None
    sort: int
    path: Optional[str] = None
    component: Optional[str] = None
    type: int
    perms: Optional[str] = None
    icon: Optional[str] = None
    status: int
    display: bool
    cache: bool
    link: Optional[str] = None
    remark: Optional[str] = None


class MenuTree(MenuRead):
    children: List["MenuTree"] = Field(default_factory=list)


class RoleMenuAssign(SQLModel):
    menu_ids: List[int] = Field(default_factory=list)


MenuTree.model_rebuild()
