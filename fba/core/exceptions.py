# fba/core/exceptions.py

"""
애플리케이션 공통 오류 분류(Error Envelope)와 예외 처리기를 정의하는 모듈입니다.

- ErrorKind: 오류 종류 → (HTTP 상태, 애플리케이션 코드) 매핑을 함께 가지는 Enum.
- AppError: 모든 플러그인 오류의 기반 클래스. 플러그인은 errors.py 에서
  자신만의 닫힌 하위 클래스 집합을 선언합니다.
- register_exception_handlers: FastAPI 앱에 오류 → 응답 봉투 변환기를 등록합니다.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from fba.core.response import EnvelopeResponse, error

logger = logging.getLogger(__name__)

PERMISSION_DENIED_MSG = "permission denied"
INTERNAL_ERROR_MSG = "服务器内部错误"

# 사용자 정의 검증 규칙이 발생시키는 pydantic 오류 타입 (fba.core.validators)
RULE_ERROR_TYPE = "fba_rule"


class ErrorKind(Enum):
    """오류 종류와 (HTTP 상태, 애플리케이션 코드) 매핑."""
    DATABASE_ERROR = (500, 500)
    NOT_FOUND = (404, 404)
    ALREADY_EXISTS = (409, 409)
    OPERATION_FAILED = (400, 400)
    VALIDATION_ERROR = (422, 422)
    PERMISSION_DENIED = (403, 403)
    UPSTREAM_API_FAILURE = (502, 502)

    @property
    def http_status(self) -> int:
        return self.value[0]

    @property
    def code(self) -> int:
        return self.value[1]


class AppError(Exception):
    """
    모든 도메인 오류의 기반 클래스입니다.
    하위 클래스는 kind 와 기본 메시지(default_message)를 선언합니다.
    """
    kind: ErrorKind = ErrorKind.DATABASE_ERROR
    default_message: str = INTERNAL_ERROR_MSG

    def __init__(self, message: Optional[str] = None):
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return self.kind.http_status

    @property
    def code(self) -> int:
        return self.kind.code

    def to_response(self) -> EnvelopeResponse:
        return error(self.code, self.message, status_code=self.http_status)


# =============================================================================
# 공통 오류 종류 (플러그인 오류가 상속합니다)
# =============================================================================
class DatabaseError(AppError):
    kind = ErrorKind.DATABASE_ERROR


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "资源不存在"


class AlreadyExistsError(AppError):
    kind = ErrorKind.ALREADY_EXISTS
    default_message = "资源已存在"


class OperationFailedError(AppError):
    kind = ErrorKind.OPERATION_FAILED
    default_message = "操作失败"


class ValidationFailedError(AppError):
    kind = ErrorKind.VALIDATION_ERROR
    default_message = "参数校验失败"


class PermissionDeniedError(AppError):
    """메시지는 항상 고정 문자열 'permission denied' 입니다."""
    kind = ErrorKind.PERMISSION_DENIED
    default_message = PERMISSION_DENIED_MSG

    def __init__(self, message: Optional[str] = None):
        # 거부 사유는 로그에만 남기고 응답에는 고정 문자열을 씁니다.
        if message:
            logger.info("Permission denied: %s", message)
        super().__init__(PERMISSION_DENIED_MSG)


class UpstreamApiError(AppError):
    kind = ErrorKind.UPSTREAM_API_FAILURE
    default_message = "上游服务调用失败"

    def __init__(self, message: Optional[str] = None, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        if message is not None and upstream_status is not None:
            message = f"{message} (status {upstream_status})"
        super().__init__(message)


# =============================================================================
# 검증 오류 메시지 집계
# =============================================================================
def _field_name(loc: Sequence[Any]) -> str:
    # ("body", "title") / ("query", "size") → "title" / "size"
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) if parts else "request"


def collect_validation_messages(errors: List[Dict[str, Any]]) -> List[str]:
    """
    pydantic 오류 목록을 필드 선언 순서대로 메시지 목록으로 변환합니다.
    한 필드는 정확히 하나의 메시지만 기여합니다.
    """
    messages: List[str] = []
    seen_fields = set()
    for err in errors:
        field = _field_name(err.get("loc", ()))
        if field in seen_fields:
            continue
        seen_fields.add(field)
        if err.get("type") == RULE_ERROR_TYPE:
            messages.append(err["msg"])
        else:
            messages.append(f"{field}: {err.get('msg', 'invalid')}")
    return messages


def validation_message(errors: List[Dict[str, Any]]) -> str:
    return ", ".join(collect_validation_messages(errors))


# =============================================================================
# FastAPI 예외 처리기 등록
# =============================================================================
def register_exception_handlers(app: FastAPI) -> None:
    """모든 전역 오류 처리기를 FastAPI 앱에 등록합니다."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.kind is ErrorKind.DATABASE_ERROR:
            logger.error("AppError on %s: %s", request.url.path, exc.message)
        return exc.to_response()

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # 검증 오류는 애플리케이션 오류로 기록하지 않습니다.
        message = validation_message(list(exc.errors()))
        return error(
            ErrorKind.VALIDATION_ERROR.code, message,
            status_code=ErrorKind.VALIDATION_ERROR.http_status,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s: %s", request.url.path, exc, exc_info=exc)
        return DatabaseError(database_error_message(exc)).to_response()


def database_error_message(exc: SQLAlchemyError) -> str:
    """드라이버 오류 메시지만 남깁니다. str(exc) 에는 SQL 문이 포함됩니다."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return f"数据库错误: {exc.orig}"
    return f"数据库错误: {type(exc).__name__}"
