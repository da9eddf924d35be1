"""도메인 예외를 HTTP 상태 코드와 {"error": ...} 응답으로 변환한다.

에러 응답에는 success 필드를 넣지 않는다.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import PostNotFoundError, PostValidationError, StoreError


logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"
ROUTE_NOT_FOUND_MESSAGE = "Route not found"


def _error(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    content: dict[str, str] = {"error": error}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


async def handle_validation_error(request: Request, exc: PostValidationError) -> JSONResponse:
    return _error(400, exc.message)


async def handle_not_found(request: Request, exc: PostNotFoundError) -> JSONResponse:
    return _error(404, exc.message)


async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("store error on %s %s: %s", request.method, request.url.path, exc.message)
    return _error(400, exc.message)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """JSON 파싱 실패나 필드 타입 불일치 등 요청 형식 오류는 400 으로 돌려준다."""

    errors = exc.errors()
    if not errors:
        return _error(400, "Invalid request")

    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = first.get("msg", "invalid value")
    if location:
        return _error(400, f"Invalid request: {location}: {detail}")
    return _error(400, f"Invalid request: {detail}")


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # 라우트가 없거나 메서드가 맞지 않는 경우 모두 "Route not found" 로 응답한다.
    if exc.status_code in (404, 405):
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        return _error(
            404,
            ROUTE_NOT_FOUND_MESSAGE,
            f"Cannot {request.method} {target}",
        )
    return _error(exc.status_code, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error(500, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PostValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(PostNotFoundError, handle_not_found)  # type: ignore[arg-type]
    app.add_exception_handler(StoreError, handle_store_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)
