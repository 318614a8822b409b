# fba/plugins/monitor/schemas.py

from datetime import datetime
from typing import Any, Dict, List

from sqlmodel import SQLModel


class CpuInfo(SQLModel):
    usage: float
    logical_num: int
    physical_num: int
    max_freq: float
    min_freq: float
    current_freq: float


class MemoryInfo(SQLModel):
    total: float
    used: float
    free: float
    usage: float


class SystemInfo(SQLModel):
    name: str
    ip: str
    os: str
    arch: str


class DiskInfo(SQLModel):
    dir: str
    type: str
    device: str
    total: str
    free: str
    used: str
    usage: str


class ServiceInfo(SQLModel):
    name: str
    version: str
    home: str
    cpu_usage: str
    mem_vms: str
    mem_rss: str
    mem_free: str
    startup: datetime
    elapsed: str


class ServerMetrics(SQLModel):
    cpu: CpuInfo
    mem: MemoryInfo
    sys: SystemInfo
    disk: List[DiskInfo]
    service: ServiceInfo


class RedisCommandStat(SQLModel):
    name: str
    value: str


class RedisMetrics(SQLModel):
    info: Dict[str, Any]
    stats: List[RedisCommandStat]


class SystemStatus(SQLModel):
    status: str
    uptime_seconds: int
    timestamp: datetime


class HealthStatus(SQLModel):
    status: str
    database: str
    redis: str
    timestamp: datetime
