# fba/plugins/email/services.py

"""
메일 발송 서비스입니다.

- smtp_send: smtplib 로 한 통을 보내는 동기 함수 (스레드 풀에서 실행)
- deliver: 발송 후 sys_email_record 의 상태를 1(성공) / 2(실패)로 갱신하는 백그라운드 작업
- render_template: templates/ 아래의 이름 있는 템플릿을 샌드박스 jinja2 로 렌더링
"""

import logging
import smtplib
from email.message import EmailMessage
from pathlib import Path
from typing import Dict, Optional

from jinja2 import FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound, select_autoescape
from jinja2.sandbox import SandboxedEnvironment
from starlette.concurrency import run_in_threadpool

from fba.core.database import SessionFactory, session_scope
from fba.core.models import utc_now
from fba.core.plugin import SmtpConfig

from . import crud as email_crud
from . import errors as email_errors

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
SMTP_TIMEOUT = 10
TEST_SUBJECT = "SMTP配置测试"
TEST_CONTENT = "这是一封SMTP配置测试邮件，如果您收到此邮件，说明配置正确。"

template_env = SandboxedEnvironment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
)


def smtp_send(config: SmtpConfig, to: str, subject: str, content: str, is_html: bool = False) -> None:
    """SMTP 로 메일 한 통을 보냅니다. 실패하면 smtplib.SMTPException / OSError 를 그대로 던집니다."""
    message = EmailMessage()
    message["From"] = config.sender
    message["To"] = to
    message["Subject"] = subject
    message.set_content(content, subtype="html" if is_html else "plain")

    if config.port == 465:
        client = smtplib.SMTP_SSL(config.host, config.port, timeout=SMTP_TIMEOUT)
    else:
        client = smtplib.SMTP(config.host, config.port, timeout=SMTP_TIMEOUT)
    with client:
        if config.use_tls and config.port != 465:
            client.starttls()
        if config.username:
            client.login(config.username, config.password or "")
        client.send_message(message)


async def deliver(session_factory: SessionFactory, config: SmtpConfig, record_id: int,
                  to: str, subject: str, content: str, is_html: bool) -> None:
    error: Optional[str] = None
    try:
        await run_in_threadpool(smtp_send, config, to, subject, content, is_html)
    except (smtplib.SMTPException, OSError) as e:
        error = str(e) or e.__class__.__name__
        logger.warning("Email %s to %s failed: %s", record_id, to, error)
    async with session_scope(session_factory) as db:
        await email_crud.email_record.mark_result(db, id=record_id, error=error, sent_at=utc_now())


def render_template(name: str, data: Dict[str, str]) -> str:
    try:
        template = template_env.get_template(f"{name}.html")
    except TemplateNotFound:
        raise email_errors.EmailTemplateError(f"模板 {name} 不存在")
    try:
        return template.render(**data)
    except TemplateError as e:
        raise email_errors.EmailTemplateError(str(e))


def template_subject(name: str) -> str:
    return f"[{name}] 通知"


async def test_connection(config: SmtpConfig, to: str) -> None:
    try:
        await run_in_threadpool(smtp_send, config, to, TEST_SUBJECT, TEST_CONTENT, False)
    except (smtplib.SMTPException, OSError) as e:
        raise email_errors.SmtpError(str(e) or e.__class__.__name__)
