# fba/plugins/email/errors.py

from fba.core.exceptions import DatabaseError, NotFoundError, OperationFailedError, UpstreamApiError


class EmailRecordNotFoundError(NotFoundError):
    default_message = "记录不存在"


class EmailTemplateError(OperationFailedError):
    def __init__(self, detail: str):
        super().__init__(f"模板错误: {detail}")


class SmtpError(UpstreamApiError):
    def __init__(self, detail: str):
        super().__init__(f"SMTP错误: {detail}")


__all__ = ["DatabaseError", "EmailRecordNotFoundError", "EmailTemplateError", "SmtpError"]
