# fba/plugins/oauth2/crud.py

import json
from datetime import timedelta
from typing import Any, Dict, List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.crud_base import CRUDBase
from fba.core.models import utc_now

from . import errors as oauth_errors
from . import models as oauth_models
from .schemas import OAuthUserInfo


class CRUDOAuthBind(CRUDBase):
    def __init__(self):
        super().__init__(model=oauth_models.OAuthUserBind)

    async def find(self, db: AsyncSession, *, user_id: int, provider: str) -> Optional[oauth_models.OAuthUserBind]:
        result = await db.execute(
            select(self.model).where(self.model.user_id == user_id, self.model.provider == provider)
        )
        return result.scalars().first()

    async def find_by_provider_user(self, db: AsyncSession, *, provider: str,
                                    provider_user_id: str) -> Optional[oauth_models.OAuthUserBind]:
        result = await db.execute(
            select(self.model).where(
                self.model.provider == provider, self.model.provider_user_id == provider_user_id,
            )
        )
        return result.scalars().first()

    async def list_for_user(self, db: AsyncSession, user_id: int) -> List[oauth_models.OAuthUserBind]:
        return await self.get_multi(db, filters={"user_id": user_id}, order_by=["id"])

    async def upsert(self, db: AsyncSession, *, user_id: int, user_info: OAuthUserInfo,
                     token: Dict[str, Any], raw_user: Dict[str, Any]) -> oauth_models.OAuthUserBind:
        """(user_id, provider) 연결을 새로 만들거나 토큰/사용자 정보를 갱신합니다."""
        other = await self.find_by_provider_user(
            db, provider=user_info.provider, provider_user_id=user_info.provider_user_id,
        )
        if other is not None and other.user_id != user_id:
            raise oauth_errors.AccountBoundElsewhereError()

        expires_in = token.get("expires_in")
        values = {
            "provider_user_id": user_info.provider_user_id,
            "access_token": token.get("access_token"),
            "refresh_token": token.get("refresh_token"),
            "expires_at": utc_now() + timedelta(seconds=int(expires_in)) if expires_in else None,
            "user_info": json.dumps(raw_user, ensure_ascii=False),
        }
        db_obj = await self.find(db, user_id=user_id, provider=user_info.provider)
        if db_obj is None:
            db_obj = oauth_models.OAuthUserBind(user_id=user_id, provider=user_info.provider, **values)
            db.add(db_obj)
        else:
            for key, value in values.items():
                setattr(db_obj, key, value)
            db_obj.updated_time = utc_now()
            db.add(db_obj)
        await self._commit(db)
        await db.refresh(db_obj)
        return db_obj

    async def unbind(self, db: AsyncSession, *, user_id: int, provider: str) -> None:
        db_obj = await self.find(db, user_id=user_id, provider=provider)
        if db_obj is None:
            raise oauth_errors.BindingNotFoundError()
        await db.delete(db_obj)
        await db.commit()


oauth_bind = CRUDOAuthBind()
