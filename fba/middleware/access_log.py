# fba/middleware/access_log.py

"""
접근 로그 미들웨어와 비동기 로그 기록기입니다.

요청마다
1. trace id 를 요청 헤더에서 받거나 새로 만들고 (uuid4 hex), 로그 컨텍스트와
   request.state 에 저장한 뒤 응답 헤더로 돌려줍니다.
2. 메서드, URL, 쿼리 문자열, 클라이언트 IP, UA(OS/브라우저/기기), referer 를 기록합니다.
3. 요청/응답 본문을 설정된 한도까지만 담고, 넘치면 '...[truncated]' 표시를 붙입니다.
4. 처리 시간과 오류 여부(HTTP >= 400 또는 봉투 code != 200)를 계산합니다.
5. 핸들러에서 처리되지 않은 예외를 잡아 trace id 와 함께 기록하고,
   일반 메시지의 DatabaseError 봉투로 응답합니다.

레코드는 큐에 넣기만 하고 바로 응답합니다. 저장은 AccessLogWriter 의 백그라운드
태스크가 묶음 단위로 수행하며, 저장 실패는 로그로만 남습니다.
"""

import asyncio
import json
import logging
import time
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from fba.core.database import SessionFactory
from fba.core.exceptions import INTERNAL_ERROR_MSG, DatabaseError
from fba.core.log import trace_id_var
from fba.core.models import utc_now
from fba.middleware.opera_log import OperaMark
from fba.plugins.log.crud import save_records
from fba.utils.request import client_ip, parse_user_agent

logger = logging.getLogger(__name__)

TRUNCATED_MARKER = "...[truncated]"
DEFAULT_SKIP_PATHS = frozenset({"/", "/health", "/favicon.ico", "/docs", "/redoc", "/openapi.json"})

LogRecord = Tuple[str, Dict[str, Any]]


def truncate_body(body: bytes, limit: int) -> Optional[str]:
    if not body:
        return None
    if len(body) <= limit:
        return body.decode("utf-8", errors="replace")
    return body[:limit].decode("utf-8", errors="ignore") + TRUNCATED_MARKER


def envelope_outcome(status_code: int, body: bytes) -> Tuple[bool, Optional[str], Optional[int]]:
    """(오류 여부, 오류 메시지, 봉투 code). 봉투가 아닌 본문은 HTTP 상태만으로 판단합니다."""
    code: Optional[int] = None
    msg: Optional[str] = None
    try:
        payload = json.loads(body) if body else None
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        if isinstance(payload.get("code"), int):
            code = payload["code"]
        if isinstance(payload.get("msg"), str):
            msg = payload["msg"]
    is_error = status_code >= 400 or (code is not None and code != 200)
    return is_error, (msg if is_error else None), code


# =============================================================================
# 비동기 로그 기록기
# =============================================================================
class AccessLogWriter:
    """
    무제한 asyncio.Queue 와 백그라운드 태스크로 로그 레코드를 묶어서 저장합니다.
    태스크는 첫 레코드가 들어올 때 현재 이벤트 루프에서 시작됩니다.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        batch_size: int = 100,
        persist: Optional[Callable[..., Any]] = None,
    ):
        self._session_factory = session_factory
        self._persist = persist or save_records
        self.batch_size = batch_size
        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None

    def emit(self, kind: str, values: Dict[str, Any]) -> None:
        if self._queue is None:
            self._queue = asyncio.Queue()
        self._queue.put_nowait((kind, values))
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._run(), name="access-log-writer")

    async def _run(self) -> None:
        queue = self._queue
        while True:
            batch: List[LogRecord] = [await queue.get()]
            while len(batch) < self.batch_size and not queue.empty():
                batch.append(queue.get_nowait())
            try:
                await self._write(batch)
            except Exception:
                logger.exception("Failed to persist %d log record(s)", len(batch))
            finally:
                for _ in batch:
                    queue.task_done()

    async def _write(self, batch: Iterable[LogRecord]) -> None:
        async with self._session_factory() as session:
            await self._persist(session, batch)

    async def flush(self) -> None:
        """지금까지 들어온 레코드가 모두 처리될 때까지 기다립니다."""
        if self._queue is not None and self._task is not None and not self._task.done():
            await self._queue.join()

    async def stop(self) -> None:
        await self.flush()
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None


# =============================================================================
# 미들웨어
# =============================================================================
class AccessLogMiddleware(BaseHTTPMiddleware):

    def __init__(
        self,
        app,
        *,
        writer: Optional[AccessLogWriter],
        trace_header: str = "X-Request-ID",
        body_limit: int = 10 * 1024,
        skip_paths: Iterable[str] = DEFAULT_SKIP_PATHS,
        skip_prefixes: Iterable[str] = (),
    ):
        super().__init__(app)
        self.writer = writer
        self.trace_header = trace_header
        self.body_limit = body_limit
        self.skip_paths = frozenset(skip_paths)
        self.skip_prefixes = tuple(skip_prefixes)

    def _should_log(self, path: str) -> bool:
        if self.writer is None or path in self.skip_paths:
            return False
        return not any(path == prefix or path.startswith(prefix + "/") for prefix in self.skip_prefixes)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = request.headers.get(self.trace_header) or uuid.uuid4().hex
        request.state.trace_id = trace_id
        token = trace_id_var.set(trace_id)
        try:
            return await self._handle(request, call_next, trace_id)
        finally:
            trace_id_var.reset(token)

    async def _handle(self, request: Request, call_next: Callable, trace_id: str) -> Response:
        should_log = self._should_log(request.url.path)
        request_body = b""
        content_type = request.headers.get("content-type", "")
        if should_log and not content_type.startswith("multipart/"):
            request_body = await request.body()

        started = time.perf_counter()
        access_time = utc_now()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s [trace_id=%s]", request.method, request.url.path, trace_id)
            response = DatabaseError(INTERNAL_ERROR_MSG).to_response()

        response_body = b""
        if should_log and response.headers.get("content-type", "").startswith("application/json"):
            response, response_body = await self._capture(response)
        cost_ms = (time.perf_counter() - started) * 1000
        response.headers[self.trace_header] = trace_id

        if should_log:
            try:
                self._emit(request, trace_id, access_time, cost_ms, request_body, response.status_code,
                           response_body, content_type)
            except Exception:
                logger.exception("Failed to enqueue access log [trace_id=%s]", trace_id)
        return response

    @staticmethod
    async def _capture(response: Response) -> Tuple[Response, bytes]:
        # 미들웨어가 직접 만든 오류 응답은 스트림이 아닌 완성된 본문을 가집니다
        if not hasattr(response, "body_iterator"):
            return response, bytes(response.body)
        body = b""
        async for chunk in response.body_iterator:
            body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
        captured = Response(content=body, status_code=response.status_code, background=response.background)
        captured.raw_headers = list(response.raw_headers)
        return captured, body

    def _emit(
        self,
        request: Request,
        trace_id: str,
        access_time,
        cost_ms: float,
        request_body: bytes,
        status_code: int,
        response_body: bytes,
        content_type: str,
    ) -> None:
        ip = client_ip(request)
        ua = parse_user_agent(request.headers.get("user-agent"))
        auth = getattr(request.state, "auth", None)
        is_error, error_msg, code = envelope_outcome(status_code, response_body)
        if content_type.startswith("multipart/"):
            captured_request = "[multipart body omitted]"
        else:
            captured_request = truncate_body(request_body, self.body_limit)

        self.writer.emit("access", {
            "trace_id": trace_id,
            "user_id": auth.user_id if auth else None,
            "user_name": auth.username if auth else None,
            "dept_id": auth.dept_id if auth else None,
            "dept_name": auth.dept_name if auth else None,
            "method": request.method,
            "url": str(request.url),
            "query_params": request.url.query or None,
            "request_body": captured_request,
            "status_code": status_code,
            "response_body": truncate_body(response_body, self.body_limit),
            "client_ip": ip,
            "user_agent": ua.user_agent or None,
            "os": ua.os,
            "browser": ua.browser,
            "device_type": ua.device,
            "referer": request.headers.get("referer"),
            "cost_time": int(round(cost_ms)),
            "is_error": is_error,
            "error_msg": error_msg,
            "access_time": access_time,
        })

        opera: Optional[OperaMark] = getattr(request.state, "opera", None)
        if opera is None:
            return
        args = captured_request if captured_request is not None else (request.url.query or None)
        self.writer.emit("opera", {
            "trace_id": trace_id,
            "username": auth.username if auth else None,
            "method": request.method,
            "title": opera.title,
            "business_type": opera.business_type.value,
            "path": request.url.path,
            "ip": ip,
            "os": ua.os,
            "browser": ua.browser,
            "device": ua.device,
            "user_agent": ua.user_agent or None,
            "args": args,
            "status": 0 if is_error else 1,
            "code": str(code if code is not None else status_code),
            "msg": error_msg or "success",
            "cost_time": round(cost_ms, 3),
            "opera_time": access_time,
        })
