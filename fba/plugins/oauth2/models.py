# fba/plugins/oauth2/models.py

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Text, UniqueConstraint
from sqlmodel import Field

from fba.core.models import MutableModel, TimestampType


class OAuthUserBind(MutableModel, table=True):
    """시스템 사용자 ↔ 외부 계정 연결. 사용자당 공급자 하나, 외부 계정당 사용자 하나."""
    __tablename__ = "sys_oauth_user_bind"
    __table_args__ = (
        UniqueConstraint("user_id", "provider", name="uk_oauth_user_provider"),
        UniqueConstraint("provider", "provider_user_id", name="uk_oauth_provider_user"),
    )

    user_id: int = Field(sa_type=BigInteger, index=True)
    provider: str = Field(max_length=50)
    provider_user_id: str = Field(max_length=255)
    access_token: Optional[str] = Field(default=None, max_length=500)
    refresh_token: Optional[str] = Field(default=None, max_length=500)
    expires_at: Optional[datetime] = Field(default=None, sa_type=TimestampType)
    user_info: Optional[str] = Field(default=None, sa_type=Text, description="공급자 사용자 정보 (JSON)")
