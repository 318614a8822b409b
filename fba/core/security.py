# fba/core/security.py

"""
애플리케이션의 보안 관련 유틸리티와 인증/인가 기능(capability)을 정의하는 모듈입니다.

- 비밀번호 해싱 및 검증 (passlib bcrypt).
- JWT(JSON Web Token) 생성 및 검증 (python-jose).
- Authenticator: Bearer 토큰을 검증해 AuthContext 를 만들고, 권한 코드를 검사하는
  FastAPI 의존성들을 플러그인에 제공합니다. 플러그인은 PluginState.auth 로만 접근합니다.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, FrozenSet, Optional, Protocol

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.database import SessionFactory
from fba.core.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# --- 비밀번호 해싱 설정 ---
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """일반 텍스트 비밀번호와 해싱된 비밀번호가 일치하는지 확인합니다."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """주어진 비밀번호를 해싱합니다."""
    return pwd_context.hash(password)


@dataclass(frozen=True)
class AuthContext:
    """인증된 요청의 호출자 정보."""
    user_id: int
    username: str
    dept_id: Optional[int] = None
    dept_name: Optional[str] = None
    is_super: bool = False


class CredentialsSource(Protocol):
    """토큰의 주체(sub)를 실제 사용자/권한 정보로 바꿔 주는 저장소."""

    async def load_context(self, session: AsyncSession, user_id: int) -> Optional[AuthContext]:
        ...

    async def load_permission_codes(self, session: AsyncSession, user_id: int) -> FrozenSet[str]:
        ...


class Authenticator:
    """
    Bearer JWT 인증과 권한 코드 인가를 담당합니다.

    - optional_user: 토큰이 있으면 AuthContext, 없거나 유효하지 않으면 None
    - current_user: 인증 필수. 실패 시 PermissionDenied
    - require_permission(code): 역할 → 권한 코드 집합 검사. 슈퍼유저는 통과
    """

    def __init__(
        self,
        *,
        secret_key: str,
        algorithm: str,
        access_expire_minutes: int,
        refresh_expire_minutes: int,
        session_factory: SessionFactory,
        source: CredentialsSource,
        token_url: str,
    ):
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.access_expire_minutes = access_expire_minutes
        self.refresh_expire_minutes = refresh_expire_minutes
        self._session_factory = session_factory
        self._source = source
        # Swagger UI 의 Authorize 버튼을 위한 스키마 (토큰이 없어도 오류를 내지 않음)
        self.scheme = OAuth2PasswordBearer(tokenUrl=token_url, auto_error=False)
        self.optional_user = self._build_optional_user()
        self.current_user = self._build_current_user()

    # -------------------------------------------------------------------------
    # 토큰 생성 / 검증
    # -------------------------------------------------------------------------
    def _encode(self, claims: Dict[str, Any], token_type: str, expires: timedelta) -> str:
        to_encode = dict(claims)
        now = datetime.now(timezone.utc)
        to_encode.update({
            "type": token_type,
            "iat": now,
            "exp": now + expires,
            "jti": uuid.uuid4().hex,
        })
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def create_access_token(self, ctx: AuthContext) -> str:
        return self._encode(
            {"sub": str(ctx.user_id), "username": ctx.username},
            ACCESS_TOKEN_TYPE,
            timedelta(minutes=self.access_expire_minutes),
        )

    def create_refresh_token(self, ctx: AuthContext) -> str:
        return self._encode(
            {"sub": str(ctx.user_id)},
            REFRESH_TOKEN_TYPE,
            timedelta(minutes=self.refresh_expire_minutes),
        )

    def create_token_pair(self, ctx: AuthContext) -> Dict[str, Any]:
        return {
            "access_token": self.create_access_token(ctx),
            "refresh_token": self.create_refresh_token(ctx),
            "token_type": "bearer",
            "expires_in": self.access_expire_minutes * 60,
        }

    def decode_subject(self, token: str, token_type: str = ACCESS_TOKEN_TYPE) -> int:
        """토큰을 검증하고 사용자 ID(sub)를 돌려줍니다."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise PermissionDeniedError(f"invalid token: {e}")
        if payload.get("type") != token_type:
            raise PermissionDeniedError("unexpected token type")
        subject = payload.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise PermissionDeniedError("token without subject")

    async def resolve_token(self, session: AsyncSession, token: str,
                            token_type: str = ACCESS_TOKEN_TYPE) -> AuthContext:
        """토큰 → AuthContext. 사용자가 없거나 비활성/삭제 상태면 거부합니다."""
        user_id = self.decode_subject(token, token_type)
        ctx = await self._source.load_context(session, user_id)
        if ctx is None:
            raise PermissionDeniedError(f"user {user_id} unavailable")
        return ctx

    # -------------------------------------------------------------------------
    # FastAPI 의존성
    # -------------------------------------------------------------------------
    async def _authenticate(self, request: Request, token: Optional[str]) -> Optional[AuthContext]:
        cached = getattr(request.state, "auth", None)
        if cached is not None:
            return cached
        if not token:
            return None
        async with self._session_factory() as session:
            ctx = await self.resolve_token(session, token)
        # 접근 로그 미들웨어가 사용자/부서 정보를 읽을 수 있도록 저장합니다.
        request.state.auth = ctx
        return ctx

    def _build_optional_user(self) -> Callable:
        async def optional_user(request: Request, token: Optional[str] = Depends(self.scheme)) -> Optional[AuthContext]:
            try:
                return await self._authenticate(request, token)
            except PermissionDeniedError:
                return None
        return optional_user

    def _build_current_user(self) -> Callable:
        async def current_user(request: Request, token: Optional[str] = Depends(self.scheme)) -> AuthContext:
            ctx = await self._authenticate(request, token)
            if ctx is None:
                raise PermissionDeniedError("authentication required")
            return ctx
        return current_user

    async def permission_codes(self, request: Request, ctx: AuthContext) -> FrozenSet[str]:
        """호출자의 권한 코드 집합. 요청 안에서는 한 번만 조회합니다."""
        cached = getattr(request.state, "permission_codes", None)
        if cached is not None:
            return cached
        async with self._session_factory() as session:
            codes = await self._source.load_permission_codes(session, ctx.user_id)
        request.state.permission_codes = codes
        return codes

    def require_permission(self, code: str) -> Callable:
        """권한 코드를 요구하는 의존성을 만듭니다."""
        async def permission_checker(request: Request, ctx: AuthContext = Depends(self.current_user)) -> AuthContext:
            if ctx.is_super:
                return ctx
            if code not in await self.permission_codes(request, ctx):
                raise PermissionDeniedError(f"user {ctx.username} lacks {code}")
            return ctx
        return permission_checker
