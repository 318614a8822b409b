# fba/plugins/oauth2/schemas.py

from datetime import datetime
from typing import Annotated, Optional

from sqlmodel import SQLModel

from fba.core.validators import length


class OAuthUserInfo(SQLModel):
    provider: str
    provider_user_id: str
    username: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None


class AuthorizeRead(SQLModel):
    authorize_url: str
    state: str


class OAuthCallbackRead(SQLModel):
    access_token: str
    user_info: OAuthUserInfo


class BindRequest(SQLModel):
    provider: Annotated[str, length(1, 50, "提供商不能为空")]
    code: Annotated[str, length(1, 512, "授权码不能为空")]
    redirect_uri: Optional[str] = None


class UnbindRequest(SQLModel):
    provider: Annotated[str, length(1, 50, "提供商不能为空")]


class OAuthBindRead(SQLModel):
    id: int
    user_id: int
    provider: str
    provider_user_id: str
    created_time: datetime
    updated_time: Optional[datetime] = None
