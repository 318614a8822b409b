# fba/plugins/email/routers.py

"""
'email' 플러그인의 API 엔드포인트입니다.

발송 요청은 대기(0) 상태의 기록을 먼저 남기고 바로 응답하며,
실제 SMTP 전송은 응답 후 백그라운드 작업으로 수행됩니다.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.pagination import PageData, PageParams, page_params
from fba.core.plugin import PluginState, SmtpConfig
from fba.core.response import MessageModel, ResponseModel, success, success_msg, success_with
from fba.middleware.opera_log import BusinessType, operation_log

from . import crud as email_crud
from . import schemas as email_schemas
from . import services as email_services


def build_router(state: PluginState) -> APIRouter:
    router = APIRouter(tags=["Email (메일)"])
    auth = state.auth

    async def _queue(db: AsyncSession, background_tasks: BackgroundTasks,
                     to: str, subject: str, content: str, is_html: bool):
        db_record = await email_crud.email_record.add_pending(
            db, to=to, subject=subject, content=content, is_html=is_html,
        )
        background_tasks.add_task(
            email_services.deliver, state.db, state.smtp, db_record.id, to, subject, content, is_html,
        )
        return email_schemas.EmailRecordRead.model_validate(db_record)

    @router.post("/send", response_model=ResponseModel[email_schemas.EmailRecordRead], summary="메일 발송",
                 dependencies=[Depends(auth.require_permission("sys:email:send")),
                               Depends(operation_log("发送邮件", BusinessType.CREATE))])
    async def send_email(
        send_in: email_schemas.SendEmailRequest,
        background_tasks: BackgroundTasks,
        db: AsyncSession = Depends(state.get_session),
    ):
        record = await _queue(db, background_tasks, send_in.to, send_in.subject, send_in.content, send_in.is_html)
        return success_with("邮件已加入发送队列", record)

    @router.post("/send-template", response_model=ResponseModel[email_schemas.EmailRecordRead],
                 summary="템플릿 메일 발송",
                 dependencies=[Depends(auth.require_permission("sys:email:send")),
                               Depends(operation_log("发送模板邮件", BusinessType.CREATE))])
    async def send_template_email(
        send_in: email_schemas.SendTemplateEmailRequest,
        background_tasks: BackgroundTasks,
        db: AsyncSession = Depends(state.get_session),
    ):
        content = email_services.render_template(send_in.template, send_in.data)
        subject = email_services.template_subject(send_in.template)
        record = await _queue(db, background_tasks, send_in.to, subject, content, True)
        return success_with("邮件已加入发送队列", record)

    @router.post("/test-smtp", response_model=MessageModel, summary="SMTP 연결 테스트",
                 dependencies=[Depends(auth.require_permission("sys:email:send"))])
    async def test_smtp(test_in: email_schemas.TestSmtpRequest):
        config = SmtpConfig(
            host=test_in.host,
            port=test_in.port,
            username=test_in.username,
            password=test_in.password,
            sender=test_in.username,
            use_tls=test_in.use_tls,
        )
        await email_services.test_connection(config, test_in.test_to)
        return success_msg("SMTP配置测试成功")

    @router.get("/records", response_model=ResponseModel[PageData[email_schemas.EmailRecordRead]],
                summary="발송 기록 페이지 조회", dependencies=[Depends(auth.require_permission("sys:email:list"))])
    async def read_email_records(
        params: PageParams = Depends(page_params),
        to_email: Optional[str] = Query(None),
        status: Optional[int] = Query(None, ge=0, le=2),
        db: AsyncSession = Depends(state.get_session),
    ):
        rows, total = await email_crud.email_record.get_page(
            db, params=params, filters={"status": status}, like_filters={"to_email": to_email},
            order_by=["-created_time", "-id"],
        )
        items = [email_schemas.EmailRecordRead.model_validate(row) for row in rows]
        return success(PageData.build(items, total, params))

    @router.get("/records/{pk}", response_model=ResponseModel[email_schemas.EmailRecordRead],
                summary="발송 기록 상세", dependencies=[Depends(auth.require_permission("sys:email:list"))])
    async def read_email_record(pk: int, db: AsyncSession = Depends(state.get_session)):
        return success(email_schemas.EmailRecordRead.model_validate(
            await email_crud.email_record.get_or_404(db, pk)
        ))

    return router
