# fba/plugins/email/schemas.py

from datetime import datetime
from typing import Annotated, Dict, Optional

from sqlmodel import Field, SQLModel

from fba.core.schemas import AppendOnlyRead
from fba.core.validators import email, length, value_range


class SendEmailRequest(SQLModel):
    to: Annotated[str, email("收件人邮箱格式不正确")]
    subject: Annotated[str, length(1, 255, "主题长度必须在1-255之间")]
    content: Annotated[str, length(1, 100000, "内容长度必须在1-100000之间")]
    is_html: bool = False


class SendTemplateEmailRequest(SQLModel):
    to: Annotated[str, email("收件人邮箱格式不正确")]
    template: Annotated[str, length(1, 50, "模板名称长度必须在1-50之间")]
    data: Dict[str, str] = Field(default_factory=dict)


class TestSmtpRequest(SQLModel):
    host: Annotated[str, length(1, 255, "SMTP服务器不能为空")]
    port: Annotated[int, value_range(1, 65535, "端口必须在1-65535之间")]
    username: Annotated[str, length(1, 255, "用户名不能为空")]
    password: Annotated[str, length(1, 255, "密码不能为空")]
    test_to: Annotated[str, email("测试收件人邮箱格式不正确")]
    use_tls: bool = True


class EmailRecordRead(AppendOnlyRead):
    to_email: str
    subject: str
    content: str
    is_html: int
    status: int
    error_msg: Optional[str] = None
    send_time: Optional[datetime] = None
