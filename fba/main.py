# fba/main.py

"""
FastAPI 애플리케이션 조립 모듈입니다.

create_app() 은 설정으로부터 호스트 핸들(데이터베이스, 인증, 캐시, SMTP, OAuth2,
HTTP 클라이언트, 업로드 저장소)을 만들고, 등록된 플러그인을 조립한 뒤 공통
미들웨어(CORS, 접근 로그)와 예외 처리기를 설치합니다.
테스트는 engine / cache / http_client / plugins 를 주입해 외부 의존성을 바꿉니다.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional, Sequence

import httpx
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba import ADMIN_NAMESPACE
from fba.core.cache import build_cache
from fba.core.composer import HostHandles, compose_plugins
from fba.core.config import Settings, get_settings
from fba.core.database import build_engine, build_session_factory, run_migrations
from fba.core.exceptions import DatabaseError, register_exception_handlers
from fba.core.log import setup_logging
from fba.core.plugin import OAuth2Client, OAuth2Config, Plugin, SmtpConfig
from fba.core.response import success
from fba.core.security import Authenticator
from fba.middleware.access_log import AccessLogMiddleware, AccessLogWriter
from fba.plugins.log import LOG_SEGMENT
from fba.plugins.registry import default_plugins
from fba.plugins.system.crud import SystemCredentialsSource

logger = logging.getLogger(__name__)

OAUTH2_PROVIDERS = (("github", "GITHUB"), ("google", "GOOGLE"), ("linux-do", "LINUX_DO"))


# =============================================================================
# 설정 → 제3자 설정 레코드
# =============================================================================
def smtp_config(settings: Settings) -> Optional[SmtpConfig]:
    if not settings.SMTP_HOST:
        return None
    return SmtpConfig(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME,
        password=settings.SMTP_PASSWORD.get_secret_value() if settings.SMTP_PASSWORD else None,
        sender=settings.SMTP_FROM or settings.SMTP_USERNAME or f"noreply@{settings.SMTP_HOST}",
        use_tls=settings.SMTP_USE_TLS,
    )


def oauth2_config(settings: Settings) -> Optional[OAuth2Config]:
    """client id 가 설정된 공급자만 모읍니다. 하나도 없으면 None 입니다."""
    clients = []
    for provider, env in OAUTH2_PROVIDERS:
        client_id = getattr(settings, f"OAUTH2_{env}_CLIENT_ID")
        if not client_id:
            continue
        secret = getattr(settings, f"OAUTH2_{env}_CLIENT_SECRET")
        clients.append((provider, OAuth2Client(
            client_id=client_id,
            client_secret=secret.get_secret_value() if secret else "",
            redirect_uri=getattr(settings, f"OAUTH2_{env}_REDIRECT_URI") or "",
        )))
    return OAuth2Config(clients=tuple(clients)) if clients else None


# =============================================================================
# 애플리케이션 팩토리
# =============================================================================
def create_app(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[AsyncEngine] = None,
    cache: Optional[Any] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    plugins: Optional[Sequence[Plugin]] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)
    settings.ensure_directories()

    owns_engine = engine is None
    engine = engine or build_engine(settings)
    session_factory = build_session_factory(engine)
    if cache is None and settings.REDIS_URL:
        cache = build_cache(settings.REDIS_URL)
    owns_http = http_client is None
    http_client = http_client or httpx.AsyncClient(timeout=10.0)

    authenticator = Authenticator(
        secret_key=settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
        access_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        refresh_expire_minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES,
        session_factory=session_factory,
        source=SystemCredentialsSource(),
        token_url=f"{settings.API_PREFIX}/auth/token",
    )
    handles = HostHandles(
        db=session_factory,
        auth=authenticator,
        cache=cache,
        smtp=smtp_config(settings),
        oauth2=oauth2_config(settings),
        http=http_client,
        upload_dir=settings.upload_dir,
        upload_max_size=settings.UPLOAD_MAX_SIZE,
    )
    if plugins is None:
        plugins = default_plugins(settings.ENABLED_PLUGINS)
    api_router, registry = compose_plugins(
        plugins, handles, prefix=settings.API_PREFIX, admin_namespace=ADMIN_NAMESPACE,
    )

    writer = AccessLogWriter(session_factory) if settings.ACCESS_LOG_ENABLED else None

    # -- 애플리케이션 수명 주기 --
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("%s v%s starting (%s)", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)
        if settings.MIGRATE_ON_STARTUP:
            # env.py 가 자체 이벤트 루프를 돌리므로 별도 스레드에서 실행합니다.
            await asyncio.to_thread(run_migrations, settings)
        if cache is not None:
            try:
                await cache.ping()
                logger.info("Cache connection established")
            except RedisError as e:
                logger.warning("Cache ping failed, continuing without a warm connection: %s", e)
        logger.info("%d plugin(s) mounted", len(registry))

        yield

        logger.info("%s shutting down", settings.APP_NAME)
        if writer is not None:
            await writer.stop()
        if cache is not None and hasattr(cache, "aclose"):
            await cache.aclose()
        if owns_http:
            await http_client.aclose()
        if owns_engine:
            await engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Plugin-organized administrative back-office API.",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.authenticator = authenticator
    app.state.session_factory = session_factory
    app.state.cache = cache
    app.state.access_log_writer = writer
    app.state.plugins = registry

    register_exception_handlers(app)

    # 미들웨어는 나중에 추가한 것이 바깥쪽입니다. (CORS → 접근 로그 → 라우터)
    app.add_middleware(
        AccessLogMiddleware,
        writer=writer,
        trace_header=settings.TRACE_ID_HEADER,
        body_limit=settings.ACCESS_LOG_BODY_LIMIT,
        skip_prefixes=(f"{settings.API_PREFIX}/{LOG_SEGMENT}",),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.TRACE_ID_HEADER],
    )

    app.mount("/static", StaticFiles(directory=settings.FBA_BASE_PATH / "static"), name="static")
    app.include_router(api_router)

    async def get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    # -- 루트 / 헬스 체크 --
    @app.get("/", summary="API Root", include_in_schema=False)
    async def read_root():
        return success({
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "plugins": [mounted.info.name for mounted in registry],
        })

    @app.get("/health", summary="Health Check")
    async def health_check(session: AsyncSession = Depends(get_session)):
        """데이터베이스에 select 1 을 보내 연결 상태를 확인합니다."""
        result = await session.exec(select(1))
        if result.first() != 1:
            raise DatabaseError("Database health check failed: no result from test query")
        return success({"status": "ok", "database_connection": "successful"})

    return app