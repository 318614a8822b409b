# fba/core/config.py

from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from fba import API_PREFIX, APP_NAME, APP_VERSION

# 프로젝트의 루트 디렉토리 경로를 계산합니다. (FBA_BASE_PATH 기본값)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# 설치 루트 아래에 기동 시 생성되는 하위 디렉토리들
LOG_DIR_NAME = "logs"
UPLOAD_DIR_NAME = "static/upload"
PLUGIN_DIR_NAME = "plugin"
LOCALE_DIR_NAME = "locale"
CONFIG_DIR_NAME = "config"


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / '.env',         # 프로젝트 루트의 .env 파일
        env_file_encoding='utf-8',
        extra='ignore',                     # 모델에 없는 변수는 무시
        case_sensitive=True                 # 환경 변수 이름 대소문자 구분
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = APP_NAME
    APP_VERSION: str = APP_VERSION
    APP_ENV: str = Field("development", description="Application environment (development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for SQL echo and verbose logging")
    FBA_BASE_PATH: Path = Field(BASE_DIR, description="Installation root. logs/, static/upload/ ... live under it")
    API_PREFIX: str = Field(API_PREFIX, description="Versioned API prefix")
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    # --- 데이터베이스 / 캐시 ---
    DATABASE_URL: SecretStr = Field(..., description="SQLAlchemy async database URL (postgresql+asyncpg, mysql+aiomysql)")
    DATABASE_POOL_SIZE: int = Field(10, description="Connection pool size")
    DATABASE_MAX_OVERFLOW: int = Field(20, description="Connection pool overflow")
    REDIS_URL: Optional[str] = Field(None, description="Redis DSN for the cache handle and the arq worker")
    MIGRATE_ON_STARTUP: bool = Field(True, description="Apply pending alembic migrations in the lifespan")

    # --- JWT (JSON Web Token) 설정 ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for JWT token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24, description="Access token expiration in minutes")
    REFRESH_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24 * 7, description="Refresh token expiration in minutes")

    # --- 접근 로그 ---
    TRACE_ID_HEADER: str = Field("X-Request-ID", description="Header carrying the trace id")
    ACCESS_LOG_ENABLED: bool = Field(True, description="Persist access/operation logs")
    ACCESS_LOG_BODY_LIMIT: int = Field(10 * 1024, description="Max captured request/response body bytes")
    ACCESS_LOG_RETENTION_DAYS: int = Field(30, description="Days kept by the purge task")

    # --- 플러그인 ---
    # None 이면 등록된 모든 플러그인을 조립합니다.
    ENABLED_PLUGINS: Optional[List[str]] = Field(None, description="Plugin names to compose, in order")

    # --- 파일 업로드 ---
    UPLOAD_MAX_SIZE: int = Field(10 * 1024 * 1024, description="Max upload size in bytes")

    # --- SMTP ---
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[SecretStr] = None
    SMTP_FROM: Optional[str] = None
    SMTP_USE_TLS: bool = True

    # --- OAuth2 ---
    OAUTH2_GITHUB_CLIENT_ID: Optional[str] = None
    OAUTH2_GITHUB_CLIENT_SECRET: Optional[SecretStr] = None
    OAUTH2_GITHUB_REDIRECT_URI: Optional[str] = None
    OAUTH2_GOOGLE_CLIENT_ID: Optional[str] = None
    OAUTH2_GOOGLE_CLIENT_SECRET: Optional[SecretStr] = None
    OAUTH2_GOOGLE_REDIRECT_URI: Optional[str] = None
    OAUTH2_LINUX_DO_CLIENT_ID: Optional[str] = None
    OAUTH2_LINUX_DO_CLIENT_SECRET: Optional[SecretStr] = None
    OAUTH2_LINUX_DO_REDIRECT_URI: Optional[str] = None

    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        # 상대 경로로 지정된 경우 현재 작업 디렉토리 기준 절대 경로로 바꿉니다.
        self.FBA_BASE_PATH = Path(self.FBA_BASE_PATH).expanduser().resolve()

    # --- 파생 경로 ---
    @property
    def log_dir(self) -> Path:
        return self.FBA_BASE_PATH / LOG_DIR_NAME

    @property
    def upload_dir(self) -> Path:
        return self.FBA_BASE_PATH / UPLOAD_DIR_NAME

    @property
    def plugin_dir(self) -> Path:
        return self.FBA_BASE_PATH / PLUGIN_DIR_NAME

    @property
    def locale_dir(self) -> Path:
        return self.FBA_BASE_PATH / LOCALE_DIR_NAME

    @property
    def config_dir(self) -> Path:
        return self.FBA_BASE_PATH / CONFIG_DIR_NAME

    def ensure_directories(self) -> List[Path]:
        """설치 루트 아래의 표준 디렉토리를 (없으면) 생성하고 목록을 반환합니다."""
        directories = [self.log_dir, self.upload_dir, self.plugin_dir, self.locale_dir, self.config_dir]
        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)
        return directories


@lru_cache
def get_settings() -> Settings:
    """프로세스 단위로 한 번만 로드되는 설정 객체를 반환합니다."""
    return Settings()
