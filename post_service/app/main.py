from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware
from common.mongo.client import close_client

from .api.error_handlers import register_exception_handlers
from .api.health import router as health_router
from .api.v1 import api_router
from .config import AppConfig, load_config


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - framework hook
    # MongoClient 는 첫 요청에서 지연 생성되므로 종료 시 정리만 한다.
    try:
        yield
    finally:
        close_client()


def create_app(config: AppConfig | None = None) -> FastAPI:
    setup_logger("post-service")
    config = config or load_config()

    app = FastAPI(
        title="Tinkergram Post Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(RequestTraceMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router, prefix=config.api.base_path)

    logger.info("post-service app created (base_path=%s)", config.api.base_path)
    return app


app = create_app()


def main() -> None:
    """명령행에서 실행할 수 있도록 uvicorn 런처를 제공한다."""

    import uvicorn

    port = int(os.getenv("POST_SERVICE_PORT", "3000"))
    uvicorn.run(
        "post_service.app.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
