import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-Id"
SPAN_ID_HEADER = "X-Span-Id"

# 헬스체크는 로드밸런서가 자주 호출하므로 로그에서 제외한다.
IGNORED_LOG_PATHS: set[str] = {"/health"}

BODY_SNIPPET_MAX_LEN = 1024
BODY_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


class RequestTraceMiddleware(BaseHTTPMiddleware):
    """요청마다 Request/Span ID 를 부여하고 완료 로그를 한 줄 남기는 미들웨어.

    - X-Request-Id 가 없으면 새로 만들고, X-Span-Id 가 없으면 "0" 을 쓴다.
    - request.state 에 request_id, span_id, request_body 를 저장한다.
    - 응답 헤더에 동일한 ID 를 돌려준다.
    """

    def __init__(self, app, logger: logging.Logger | None = None) -> None:  # type: ignore[override]
        super().__init__(app)
        self._logger = logger or logging.getLogger("request_trace")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        span_id = request.headers.get(SPAN_ID_HEADER) or "0"

        request.state.request_id = request_id
        request.state.span_id = span_id
        request.state.request_body = await self._read_body_snippet(request)

        should_log = request.url.path not in IGNORED_LOG_PATHS
        start = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            if should_log:
                self._logger.exception(
                    "request failed",
                    extra=self._build_log_extra(
                        request, duration=time.monotonic() - start
                    ),
                )
            raise

        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        response.headers.setdefault(SPAN_ID_HEADER, span_id)

        if should_log:
            self._logger.info(
                "completed request",
                extra=self._build_log_extra(
                    request,
                    status=response.status_code,
                    duration=time.monotonic() - start,
                ),
            )

        return response

    async def _read_body_snippet(self, request: Request) -> str | None:
        if request.method not in BODY_METHODS:
            return None

        body_bytes = await request.body()
        if not body_bytes:
            return None

        text = body_bytes.decode("utf-8", errors="replace")
        return text[:BODY_SNIPPET_MAX_LEN]

    def _build_log_extra(
        self,
        request: Request,
        status: int | None = None,
        duration: float | None = None,
    ) -> dict[str, object]:
        extra: dict[str, object] = {
            "request_id": request.state.request_id,
            "span_id": request.state.span_id,
            "method": request.method,
            "path": request.url.path,
        }

        # /api/posts/search?q=... 의 검색어처럼 쿼리 값은 키별로 모아 기록한다.
        query_params: dict[str, list[str]] = {}
        for key, value in request.query_params.multi_items():
            query_params.setdefault(key, []).append(value)
        if query_params:
            extra["query_params"] = {
                key: values[0] if len(values) == 1 else values
                for key, values in query_params.items()
            }

        body = getattr(request.state, "request_body", None)
        if body:
            extra["body"] = body

        if status is not None:
            extra["status"] = status

        if duration is not None:
            extra["duration"] = f"{duration * 1000:.3f}ms"

        return extra
