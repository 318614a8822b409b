# fba/plugins/config/crud.py

"""
sys_config CRUD 와 키 단위 캐시 (config:{key}, TTL 3600초) 입니다.
캐시 항목은 수정/삭제 시 무효화되고, refresh 로 전체를 다시 채웁니다.
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.cache import cache_delete, cache_get_json, cache_set_json
from fba.core.crud_base import CRUDBase
from fba.core.exceptions import AppError

from . import errors as config_errors
from . import models as config_models
from . import schemas as config_schemas

CACHE_PREFIX = "config:"
CACHE_TTL = 3600


def cache_key(key: str) -> str:
    return f"{CACHE_PREFIX}{key}"


class CRUDConfig(CRUDBase[config_models.Config, config_schemas.ConfigCreate, config_schemas.ConfigUpdate]):
    unique_fields = ("key",)

    def __init__(self):
        super().__init__(model=config_models.Config)

    def not_found(self, id: Any) -> AppError:
        return config_errors.ConfigNotFoundError()

    def already_exists(self, field: str, value: Any) -> AppError:
        return config_errors.ConfigKeyExistsError(value)

    async def find_by_key(self, db: AsyncSession, *, key: str) -> Optional[config_models.Config]:
        return await self.get_by_attribute(db, attribute="key", value=key)

    async def keys_of(self, db: AsyncSession, ids: Sequence[int]) -> List[str]:
        if not ids:
            return []
        result = await db.execute(select(self.model.key).where(self.model.id.in_(list(ids))))
        return list(result.scalars().all())


config = CRUDConfig()


# =============================================================================
# 캐시 연동
# =============================================================================
def _cached_value(db_obj: config_models.Config) -> Dict[str, Any]:
    return config_schemas.ConfigRead.model_validate(db_obj).model_dump(mode="json")


async def get_cached_by_key(db: AsyncSession, cache: Any, key: str) -> Dict[str, Any]:
    cached = await cache_get_json(cache, cache_key(key))
    if cached is not None:
        return cached
    db_obj = await config.find_by_key(db, key=key)
    if db_obj is None:
        raise config_errors.ConfigKeyNotFoundError(key)
    value = _cached_value(db_obj)
    await cache_set_json(cache, cache_key(key), value, CACHE_TTL)
    return value


async def invalidate(cache: Any, keys: Sequence[str]) -> None:
    await cache_delete(cache, *(cache_key(key) for key in keys))


async def refresh_cache(db: AsyncSession, cache: Any) -> int:
    """모든 설정을 캐시에 다시 씁니다. 쓴 항목 수를 돌려줍니다."""
    rows = await config.get_multi(db, order_by=["id"])
    for row in rows:
        await cache_set_json(cache, cache_key(row.key), _cached_value(row), CACHE_TTL)
    return len(rows)
