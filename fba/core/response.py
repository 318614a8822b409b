# fba/core/response.py

"""
모든 엔드포인트가 사용하는 통일된 응답 봉투(Response Envelope)입니다.

    { "code": <int>, "msg": <str>, "data"?: <payload> }

핸들러는 success / success_msg / success_with 중 하나를 반환하고,
오류는 예외 처리기가 error() 로 변환합니다. data 는 메시지 전용 성공 응답과
오류 응답에서 생략됩니다.
"""

from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

SUCCESS_CODE = 200
SUCCESS_MSG = "success"

T = TypeVar("T")


class EnvelopeResponse(JSONResponse):
    """charset 을 명시한 JSON 응답."""
    media_type = "application/json; charset=utf-8"


class ResponseModel(BaseModel, Generic[T]):
    """OpenAPI 문서화를 위한 응답 봉투 스키마."""
    code: int = SUCCESS_CODE
    msg: str = SUCCESS_MSG
    data: Optional[T] = None


class MessageModel(BaseModel):
    """data 가 없는 응답 봉투 스키마."""
    code: int = SUCCESS_CODE
    msg: str = SUCCESS_MSG


def envelope(code: int, msg: str, data: Any = None, *, with_data: bool = True) -> Dict[str, Any]:
    body: Dict[str, Any] = {"code": code, "msg": msg}
    if with_data:
        body["data"] = jsonable_encoder(data)
    return body


def success(data: Any = None) -> EnvelopeResponse:
    return EnvelopeResponse(envelope(SUCCESS_CODE, SUCCESS_MSG, data))


def success_msg(msg: str) -> EnvelopeResponse:
    return EnvelopeResponse(envelope(SUCCESS_CODE, msg, with_data=False))


def success_with(msg: str, data: Any) -> EnvelopeResponse:
    return EnvelopeResponse(envelope(SUCCESS_CODE, msg, data))


def error(code: int, msg: str, *, status_code: Optional[int] = None,
          headers: Optional[Mapping[str, str]] = None) -> EnvelopeResponse:
    """오류 봉투. HTTP 상태는 지정하지 않으면 code 와 같습니다."""
    return EnvelopeResponse(
        envelope(code, msg, with_data=False),
        status_code=status_code or code,
        headers=dict(headers) if headers else None,
    )
