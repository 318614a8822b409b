# fba/core/database.py

"""
관계형 데이터베이스 연결과 세션 관리를 담당하는 모듈입니다.

- 비동기 엔진과 세션 팩토리를 만듭니다. 엔진은 프로세스 전체에서 공유되고,
  플러그인은 세션 팩토리(가벼운 핸들)만 복사해서 받습니다.
- 요청 단위 세션 제너레이터와 트랜잭션 컨텍스트 관리자를 제공합니다.
- 개발/테스트용 테이블 일괄 생성 함수를 포함합니다. 운영 스키마는 alembic 이 관리합니다.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.config import Settings

logger = logging.getLogger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]


def build_engine(settings: Settings) -> AsyncEngine:
    """설정으로부터 비동기 엔진을 생성합니다. 연결은 첫 사용 시점에 맺어집니다."""
    url = make_url(settings.DATABASE_URL.get_secret_value())
    options = {"echo": settings.DEBUG_MODE, "pool_pre_ping": True}
    if url.get_backend_name() != "sqlite":
        options.update(
            pool_recycle=3600,      # 1시간마다 연결 재활용
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
        )
    return create_async_engine(url, **options)


def build_session_factory(engine: AsyncEngine) -> SessionFactory:
    """비동기 세션을 생성하는 '세션 공장'을 정의합니다."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


async def create_db_and_tables(engine: AsyncEngine) -> None:
    """
    등록된 모든 SQLModel 테이블을 생성합니다.
    개발/테스트 환경 전용이며 기존 테이블을 삭제하지 않습니다.
    """
    from fba.plugins import models  # noqa: F401  모든 모델을 metadata 에 등록

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables created (or already present).")


@asynccontextmanager
async def session_scope(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession, None]:
    """
    백그라운드 작업(로그 기록기, arq 태스크 등)에서 사용하는 독립 세션입니다.
    정상 종료 시 커밋하고, 예외가 나면 롤백한 뒤 다시 던집니다.
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise


# 마이그레이션 스크립트 위치 (fba/migrations)
MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def alembic_config(settings: Settings) -> AlembicConfig:
    """alembic.ini 없이 코드로 구성한 alembic 설정."""
    config = AlembicConfig()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # configparser 보간을 피하기 위해 '%' 를 이스케이프합니다.
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL.get_secret_value().replace("%", "%%"))
    return config


def run_migrations(settings: Settings, revision: str = "head") -> None:
    """
    대기 중인 마이그레이션을 적용합니다. 동기 함수이며 env.py 가 자체 이벤트 루프를 돌리므로
    실행 중인 루프 안에서는 스레드로 넘겨 호출해야 합니다.
    """
    logger.info("Applying database migrations up to '%s'", revision)
    command.upgrade(alembic_config(settings), revision)
