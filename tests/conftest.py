# tests/conftest.py

"""
공통 테스트 픽스처입니다.

- 테스트마다 새 SQLite 파일 데이터베이스 (aiosqlite) 와 새 FastAPI 앱을 만듭니다.
- 캐시는 메모리 더블, SMTP 발송은 monkeypatch, OAuth2 공급자 호출은 httpx.MockTransport 로 대체합니다.
- 클라이언트는 httpx.AsyncClient + ASGITransport 를 사용합니다.
"""

import os

# Settings 는 DATABASE_URL / SECRET_KEY 가 필수이므로 fba 임포트 전에 기본값을 둡니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./fba-test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import json  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional, Tuple  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from fba.core.config import Settings  # noqa: E402
from fba.core.database import build_engine, build_session_factory, create_db_and_tables  # noqa: E402
from fba.main import create_app  # noqa: E402
from fba.plugins.email import services as email_services  # noqa: E402
from fba.plugins.system import crud as sys_crud  # noqa: E402
from fba.plugins.system import models as sys_models  # noqa: E402
from fba.plugins.system import schemas as sys_schemas  # noqa: E402

API = "/api/v1"
ADMIN_PASSWORD = "admin123"


# =============================================================================
# 외부 의존성 더블
# =============================================================================
class InMemoryCache:
    """테스트용 캐시 더블. ArqRedis 에서 사용하는 명령만 흉내 냅니다."""

    def __init__(self):
        self.store: Dict[str, str] = {}
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.store[key] = value
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    async def ping(self) -> bool:
        return True

    async def info(self, section: Optional[str] = None) -> Dict[str, Any]:
        if section == "commandstats":
            return {"cmdstat_get": {"calls": 3, "usec": 12}, "cmdstat_set": {"calls": 1, "usec": 4}}
        return {"redis_version": "7.2.4", "uptime_in_seconds": 3725, "connected_clients": 1}

    async def dbsize(self) -> int:
        return len(self.store)

    async def aclose(self) -> None:
        self.closed = True


class UpstreamStub:
    """
    httpx.MockTransport 핸들러. (메서드, 쿼리 없는 URL) 로 등록된 응답을 돌려주고
    호출 기록을 남깁니다. 등록되지 않은 요청은 404 입니다.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.calls: List[httpx.Request] = []

    def add(self, method: str, url: str, status_code: int = 200, payload: Any = None) -> None:
        self.routes[(method, url)] = lambda request: httpx.Response(status_code, json=payload)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        key = (request.method, str(request.url.copy_with(query=None)))
        handler = self.routes.get(key)
        if handler is None:
            return httpx.Response(404, json={"message": "not found"})
        return handler(request)


# =============================================================================
# 설정 / 데이터베이스
# =============================================================================
@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        APP_ENV="testing",
        FBA_BASE_PATH=tmp_path,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'fba.db'}",
        SECRET_KEY="test-secret-key",
        REDIS_URL=None,
        MIGRATE_ON_STARTUP=False,
        SMTP_HOST="smtp.test.local",
        SMTP_PORT=25,
        SMTP_FROM="noreply@test.local",
        SMTP_USE_TLS=False,
        OAUTH2_GITHUB_CLIENT_ID="gh-client",
        OAUTH2_GITHUB_CLIENT_SECRET="gh-secret",
        OAUTH2_GITHUB_REDIRECT_URI="http://test/oauth2/github/callback",
        UPLOAD_MAX_SIZE=1024,
    )


@pytest_asyncio.fixture
async def engine(settings: Settings):
    engine = build_engine(settings)
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# =============================================================================
# 앱 / 클라이언트
# =============================================================================
@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def sent_emails(monkeypatch) -> List[Dict[str, Any]]:
    """smtp_send 를 가로채 발송 내용을 목록에 쌓습니다."""
    sent: List[Dict[str, Any]] = []

    def fake_smtp_send(config, to, subject, content, is_html=False):
        sent.append({"to": to, "subject": subject, "content": content, "is_html": is_html})

    monkeypatch.setattr(email_services, "smtp_send", fake_smtp_send)
    return sent


@pytest_asyncio.fixture
async def app(settings, engine, cache, upstream, sent_emails):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    app = create_app(settings, engine=engine, cache=cache, http_client=http_client)
    yield app
    if app.state.access_log_writer is not None:
        await app.state.access_log_writer.stop()
    await http_client.aclose()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# =============================================================================
# 사용자 / 인증
# =============================================================================
@pytest.fixture
def user_factory(db_session: AsyncSession) -> Callable:
    async def _create_user(username: str, password: str = "secret123", **kwargs) -> sys_models.User:
        user_in = sys_schemas.UserCreate(username=username, password=password, **kwargs)
        return await sys_crud.user.create(db_session, obj_in=user_in)
    return _create_user


@pytest_asyncio.fixture
async def admin_user(user_factory) -> sys_models.User:
    """권한 검사를 우회하는 슈퍼유저."""
    return await user_factory("admin", ADMIN_PASSWORD, nickname="관리자", is_super=True)


async def login(client: AsyncClient, username: str, password: str) -> Dict[str, Any]:
    response = await client.post(f"{API}/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["data"]


@pytest.fixture
def authorized_client_factory(app) -> Callable:
    """특정 사용자로 로그인된 AsyncClient 를 만드는 컨텍스트 매니저 팩토리."""
    @asynccontextmanager
    async def _create_client(username: str, password: str) -> AsyncGenerator[AsyncClient, None]:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            tokens = await login(client, username, password)
            client.headers["Authorization"] = f"Bearer {tokens['access_token']}"
            yield client
    return _create_client


@pytest_asyncio.fixture
async def admin_client(authorized_client_factory, admin_user) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(admin_user.username, ADMIN_PASSWORD) as client:
        yield client


@pytest.fixture
def grant_permissions(db_session: AsyncSession) -> Callable:
    """
    역할 하나를 만들어 주어진 권한 코드를 붙이고 사용자에게 부여합니다.
    """
    async def _grant(user: sys_models.User, *codes: str) -> None:
        role = sys_models.Role(name=f"role-{user.username}", code=f"role_{user.username}")
        db_session.add(role)
        await db_session.flush()
        for code in codes:
            permission = sys_models.Permission(name=code, code=code)
            db_session.add(permission)
            await db_session.flush()
            db_session.add(sys_models.RolePermission(role_id=role.id, permission_id=permission.id))
        db_session.add(sys_models.UserRole(user_id=user.id, role_id=role.id))
        await db_session.commit()
    return _grant


def body(response: httpx.Response) -> Dict[str, Any]:
    """봉투 JSON. 디버깅을 쉽게 하려고 실패 시 본문을 보여 줍니다."""
    try:
        return response.json()
    except json.JSONDecodeError:
        pytest.fail(f"non-JSON response ({response.status_code}): {response.text[:200]}")
