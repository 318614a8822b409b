# fba/plugins/monitor/services.py

"""
psutil 과 캐시 INFO 로 모니터링 값을 모읍니다.

크기는 '12.34 GB' 처럼, 경과 시간은 '1 天 2 小时 3 分钟 4 秒' 처럼 사람이 읽는 문자열로 돌려줍니다.
"""

import logging
import os
import platform
import socket
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List

import psutil
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from . import schemas as monitor_schemas

logger = logging.getLogger(__name__)

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")
GIB = 1024 ** 3


def format_bytes(size: float) -> str:
    unit = 0
    while size >= 1024 and unit < len(SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    return f"{size:.2f} {SIZE_UNITS[unit]}"


def format_duration(seconds: int) -> str:
    days, rest = divmod(int(seconds), 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    parts = []
    if days:
        parts.append(f"{days} 天")
    if hours:
        parts.append(f"{hours} 小时")
    if minutes:
        parts.append(f"{minutes} 分钟")
    if secs or not parts:
        parts.append(f"{secs} 秒")
    return " ".join(parts)


def _local_ip() -> str:
    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError:
        return "127.0.0.1"


def _cpu() -> monitor_schemas.CpuInfo:
    freq = psutil.cpu_freq()
    return monitor_schemas.CpuInfo(
        usage=psutil.cpu_percent(interval=None),
        logical_num=psutil.cpu_count() or 0,
        physical_num=psutil.cpu_count(logical=False) or 0,
        max_freq=freq.max if freq else 0.0,
        min_freq=freq.min if freq else 0.0,
        current_freq=freq.current if freq else 0.0,
    )


def _memory() -> monitor_schemas.MemoryInfo:
    memory = psutil.virtual_memory()
    return monitor_schemas.MemoryInfo(
        total=round(memory.total / GIB, 2),
        used=round(memory.used / GIB, 2),
        free=round(memory.available / GIB, 2),
        usage=memory.percent,
    )


def _disks() -> List[monitor_schemas.DiskInfo]:
    disks = []
    for partition in psutil.disk_partitions():
        try:
            usage = psutil.disk_usage(partition.mountpoint)
        except OSError as exc:
            # 접근할 수 없는 마운트 지점 (빈 광학 드라이브 등)
            logger.debug("Skip disk %s: %s", partition.mountpoint, exc)
            continue
        disks.append(monitor_schemas.DiskInfo(
            dir=partition.mountpoint,
            type=partition.fstype,
            device=partition.device,
            total=format_bytes(usage.total),
            free=format_bytes(usage.free),
            used=format_bytes(usage.used),
            usage=f"{usage.percent:.2f} %",
        ))
    return disks


def _service() -> monitor_schemas.ServiceInfo:
    process = psutil.Process(os.getpid())
    memory = process.memory_info()
    started = datetime.fromtimestamp(process.create_time(), tz=timezone.utc)
    elapsed = int((datetime.now(timezone.utc) - started).total_seconds())
    return monitor_schemas.ServiceInfo(
        name=platform.python_implementation(),
        version=platform.python_version(),
        home=sys.executable,
        cpu_usage=f"{process.cpu_percent(interval=None):.2f} %",
        mem_vms=format_bytes(memory.vms),
        mem_rss=format_bytes(memory.rss),
        mem_free=format_bytes(psutil.virtual_memory().available),
        startup=started,
        elapsed=format_duration(elapsed),
    )


def server_metrics() -> monitor_schemas.ServerMetrics:
    return monitor_schemas.ServerMetrics(
        cpu=_cpu(),
        mem=_memory(),
        sys=monitor_schemas.SystemInfo(
            name=socket.gethostname(), ip=_local_ip(), os=platform.system(), arch=platform.machine(),
        ),
        disk=_disks(),
        service=_service(),
    )


async def redis_metrics(cache: Any) -> monitor_schemas.RedisMetrics:
    """INFO 전체와 키 개수, 명령별 호출 횟수."""
    info: Dict[str, Any] = dict(await cache.info())
    info["keys_num"] = await cache.dbsize()
    uptime = info.get("uptime_in_seconds")
    if isinstance(uptime, int):
        info["uptime_in_seconds"] = format_duration(uptime)

    stats = []
    for key, value in (await cache.info("commandstats")).items():
        name = key[len("cmdstat_"):] if key.startswith("cmdstat_") else key
        calls = value.get("calls", 0) if isinstance(value, dict) else 0
        stats.append(monitor_schemas.RedisCommandStat(name=name, value=str(calls)))
    return monitor_schemas.RedisMetrics(info=info, stats=stats)


async def database_status(db: AsyncSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database health check failed: %s", exc)
        return "disconnected"
    return "connected"


async def cache_status(cache: Any) -> str:
    try:
        await cache.ping()
    except (RedisError, OSError) as exc:
        logger.error("Cache health check failed: %s", exc)
        return "disconnected"
    return "connected"


def process_uptime() -> int:
    started = psutil.Process(os.getpid()).create_time()
    return max(0, int(datetime.now(timezone.utc).timestamp() - started))
