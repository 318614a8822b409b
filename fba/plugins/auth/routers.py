# fba/plugins/auth/routers.py

"""
'auth' 플러그인의 API 엔드포인트를 정의하는 모듈입니다.

로그인 시도는 성공/실패와 관계없이 sys_login_log 에 기록됩니다.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.security import REFRESH_TOKEN_TYPE, AuthContext
from fba.plugins.log import models as log_models
from fba.plugins.system import crud as sys_crud
from fba.plugins.system import models as sys_models
from fba.plugins.system.schemas import UserRead
from fba.utils.request import client_ip, parse_user_agent

from . import errors as auth_errors
from . import schemas as auth_schemas

logger = logging.getLogger(__name__)

LOGIN_SUCCESS_MSG = "登录成功"

credentials_source = sys_crud.SystemCredentialsSource()


def _login_log(request: Request, *, username: str, user_id, status: int, msg: str) -> log_models.LoginLog:
    ua = parse_user_agent(request.headers.get("user-agent"))
    return log_models.LoginLog(
        user_id=user_id,
        username=username,
        status=status,
        ip=client_ip(request),
        os=ua.os,
        browser=ua.browser,
        device=ua.device,
        user_agent=ua.user_agent,
        msg=msg,
    )


async def login_user(db: AsyncSession, request: Request, username: str, password: str) -> sys_models.User:
    """
    사용자명/비밀번호를 검증하고 로그인 기록을 남깁니다.
    실패도 기록한 뒤 오류를 던집니다.
    """
    db_user = await sys_crud.user.authenticate(db, username=username, password=password)
    failure = None
    if db_user is None:
        failure = auth_errors.InvalidCredentialsError()
    elif db_user.status != sys_models.Status.ENABLED:
        failure = auth_errors.UserDisabledError()

    if failure is not None:
        db.add(_login_log(
            request, username=username, user_id=db_user.id if db_user else None, status=0, msg=failure.message,
        ))
        await db.commit()
        logger.info("Login failed for '%s': %s", username, failure.message)
        raise failure

    await sys_crud.user.record_login(db, db_obj=db_user, ip=client_ip(request))
    db.add(_login_log(request, username=username, user_id=db_user.id, status=1, msg=LOGIN_SUCCESS_MSG))
    await db.commit()
    await db.refresh(db_user)
    return db_user


async def _role_codes(db: AsyncSession, user_id: int) -> List[str]:
    result = await db.execute(
        select(sys_models.Role.code)
        .join(sys_models.UserRole, sys_models.UserRole.role_id == sys_models.Role.id)
        .where(
            sys_models.UserRole.user_id == user_id,
            sys_models.Role.del_flag == 0,
            sys_models.Role.status == sys_models.Status.ENABLED,
        )
        .order_by(sys_models.Role.sort, sys_models.Role.id)
    )
    return list(result.scalars().all())


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter(tags=["Auth (인증)"])
    auth = state.auth

    @router.post("/login", response_model=ResponseModel[auth_schemas.LoginResult], summary="로그인")
    async def login(
        request: Request,
        login_in: auth_schemas.LoginRequest,
        db: AsyncSession = Depends(state.get_session),
    ):
        db_user = await login_user(db, request, login_in.username, login_in.password)
        ctx = await credentials_source.context_for(db, db_user)
        return success_with(LOGIN_SUCCESS_MSG, {
            **auth.create_token_pair(ctx),
            "user": UserRead.model_validate(db_user),
        })

    @router.post("/token", response_model=ResponseModel[auth_schemas.AccessToken], summary="OAuth2 토큰 발급 (Swagger)")
    async def login_for_access_token(
        request: Request,
        form_data: OAuth2PasswordRequestForm = Depends(),
        db: AsyncSession = Depends(state.get_session),
    ):
        db_user = await login_user(db, request, form_data.username, form_data.password)
        ctx = await credentials_source.context_for(db, db_user)
        return success(auth_schemas.AccessToken(access_token=auth.create_access_token(ctx)))

    @router.post("/refresh", response_model=ResponseModel[auth_schemas.TokenPair], summary="토큰 갱신")
    async def refresh_token(
        refresh_in: auth_schemas.RefreshRequest,
        db: AsyncSession = Depends(state.get_session),
    ):
        ctx = await auth.resolve_token(db, refresh_in.refresh_token, REFRESH_TOKEN_TYPE)
        return success(auth.create_token_pair(ctx))

    @router.post("/logout", response_model=MessageModel, summary="로그아웃")
    async def logout(ctx: AuthContext = Depends(auth.current_user)):
        # 토큰은 상태를 저장하지 않으므로 클라이언트가 폐기합니다.
        logger.info("User '%s' logged out", ctx.username)
        return success_msg("登出成功")

    @router.get("/me", response_model=ResponseModel[auth_schemas.CurrentUserInfo], summary="현재 사용자 정보")
    async def read_me(
        request: Request,
        ctx: AuthContext = Depends(auth.current_user),
        db: AsyncSession = Depends(state.get_session),
    ):
        db_user = await sys_crud.user.get_or_404(db, ctx.user_id)
        codes = await auth.permission_codes(request, ctx)
        return success(auth_schemas.CurrentUserInfo(
            user=UserRead.model_validate(db_user),
            roles=await _role_codes(db, ctx.user_id),
            codes=sorted(codes),
        ))

    @router.get("/codes", response_model=ResponseModel[List[str]], summary="현재 사용자 권한 코드")
    async def read_codes(request: Request, ctx: AuthContext = Depends(auth.current_user)):
        return success(sorted(await auth.permission_codes(request, ctx)))

    return router
