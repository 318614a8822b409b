# fba/plugins/oauth2/routers.py

"""
'oauth2' 플러그인의 API 엔드포인트입니다.

    GET    /{provider}/authorize   인가 URL 과 state
    GET    /{provider}/callback    코드 교환 + 사용자 정보
    POST   /bind                   현재 사용자에 외부 계정 연결
    DELETE /unbind                 연결 해제
    GET    /bindings               현재 사용자의 연결 목록
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.plugin import PluginState
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.core.security import AuthContext
from fba.middleware.opera_log import BusinessType, operation_log

from . import crud as oauth_crud
from . import schemas as oauth_schemas
from . import services as oauth_services


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter(tags=["OAuth2 (외부 계정 로그인)"])
    auth = state.auth
    config = state.oauth2

    @router.get("/bindings", response_model=ResponseModel[List[oauth_schemas.OAuthBindRead]],
                summary="내 외부 계정 연결 목록")
    async def read_bindings(
        ctx: AuthContext = Depends(auth.current_user),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows = await oauth_crud.oauth_bind.list_for_user(db, ctx.user_id)
        return success([oauth_schemas.OAuthBindRead.model_validate(row) for row in rows])

    @router.post("/bind", response_model=ResponseModel[oauth_schemas.OAuthBindRead], summary="외부 계정 연결",
                 dependencies=[Depends(operation_log("绑定第三方账号", BusinessType.CREATE))])
    async def bind_account(
        bind_in: oauth_schemas.BindRequest,
        ctx: AuthContext = Depends(auth.current_user),
        db: AsyncSession = Depends(state.get_session),
    ):
        endpoints, client = oauth_services.resolve_provider(config, bind_in.provider)
        token = await oauth_services.exchange_code(state.http, endpoints, client, bind_in.code, bind_in.redirect_uri)
        user_info, raw_user = await oauth_services.fetch_user(state.http, endpoints, token["access_token"])
        db_obj = await oauth_crud.oauth_bind.upsert(
            db, user_id=ctx.user_id, user_info=user_info, token=token, raw_user=raw_user,
        )
        return success_with("绑定成功", oauth_schemas.OAuthBindRead.model_validate(db_obj))

    @router.delete("/unbind", response_model=MessageModel, summary="외부 계정 연결 해제",
                   dependencies=[Depends(operation_log("解绑第三方账号", BusinessType.DELETE))])
    async def unbind_account(
        unbind_in: oauth_schemas.UnbindRequest,
        ctx: AuthContext = Depends(auth.current_user),
        db: AsyncSession = Depends(state.get_session),
    ):
        await oauth_crud.oauth_bind.unbind(db, user_id=ctx.user_id, provider=unbind_in.provider)
        return success_msg("解绑成功")

    @router.get("/{provider}/authorize", response_model=ResponseModel[oauth_schemas.AuthorizeRead],
                summary="인가 URL 생성")
    async def authorize(provider: str):
        endpoints, client = oauth_services.resolve_provider(config, provider)
        url, oauth_state = oauth_services.build_authorize_url(endpoints, client)
        return success(oauth_schemas.AuthorizeRead(authorize_url=url, state=oauth_state))

    @router.get("/{provider}/callback", response_model=ResponseModel[oauth_schemas.OAuthCallbackRead],
                summary="인가 코드 콜백")
    async def callback(provider: str, code: str = Query(..., min_length=1, description="인가 코드")):
        endpoints, client = oauth_services.resolve_provider(config, provider)
        token = await oauth_services.exchange_code(state.http, endpoints, client, code)
        user_info, _ = await oauth_services.fetch_user(state.http, endpoints, token["access_token"])
        return success(oauth_schemas.OAuthCallbackRead(access_token=token["access_token"], user_info=user_info))

    return router
