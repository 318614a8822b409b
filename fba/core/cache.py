# fba/core/cache.py

"""
캐시 핸들 (arq 의 ArqRedis, 즉 asyncio Redis 클라이언트) 생성과 JSON 헬퍼입니다.

클라이언트는 앱 조립 시점에 만들어지고 첫 명령에서 연결됩니다.
lifespan 이 기동 시 ping 으로 연결을 확인하고 종료 시 닫습니다.
캐시 읽기/쓰기 실패는 경고만 남기고 저장소 조회로 대체됩니다.
"""

import json
import logging
from typing import Any, Optional

from arq.connections import ArqRedis, RedisSettings
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


def build_cache(redis_url: str) -> ArqRedis:
    """REDIS_URL 로부터 캐시 클라이언트를 만듭니다. (연결은 지연됩니다)"""
    return ArqRedis.from_url(redis_url, decode_responses=True)


def redis_settings(redis_url: Optional[str]) -> RedisSettings:
    """arq 워커용 Redis 설정."""
    if not redis_url:
        return RedisSettings()
    return RedisSettings.from_dsn(redis_url)


async def cache_get_json(cache: Any, key: str) -> Optional[Any]:
    try:
        raw = await cache.get(key)
    except RedisError as e:
        logger.warning("Cache read failed for %s: %s", key, e)
        return None
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Discarding malformed cache entry %s", key)
        return None


async def cache_set_json(cache: Any, key: str, value: Any, ttl: int) -> None:
    try:
        await cache.set(key, json.dumps(value, ensure_ascii=False, default=str), ex=ttl)
    except RedisError as e:
        logger.warning("Cache write failed for %s: %s", key, e)


async def cache_delete(cache: Any, *keys: str) -> None:
    if not keys:
        return
    try:
        await cache.delete(*keys)
    except RedisError as e:
        logger.warning("Cache delete failed for %s: %s", ", ".join(keys), e)
