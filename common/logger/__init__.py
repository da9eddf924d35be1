import json
import logging
import os
import sys
from datetime import datetime, timezone


DEFAULT_SERVICE_NAME = "tinkergram"

# RequestTraceMiddleware 가 extra 로 넘기는 요청 추적 키
TRACE_EXTRA_KEYS = (
    "request_id",
    "span_id",
    "method",
    "path",
    "query_params",
    "status",
    "body",
    "duration",
)

# PostsService 가 extra 로 넘기는 포스트 작업 키
POST_EXTRA_KEYS = (
    "post_id",
    "count",
    "query",
    "fields",
)


def setup_logger(service_name: str = DEFAULT_SERVICE_NAME, level: str | None = None) -> logging.Logger:
    """루트 로거에 JSON 핸들러를 하나만 붙이고 서비스 로거를 반환한다.

    post_service.* 모듈 로거는 모두 루트로 전파되므로 핸들러는 루트에만 둔다.
    SERVICE_NAME, LOG_LEVEL 환경변수가 있으면 인자보다 우선한다.
    """

    service_name = os.getenv("SERVICE_NAME") or service_name
    level_name = (os.getenv("LOG_LEVEL") or level or "INFO").upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(service_name))

    root_logger = logging.getLogger()
    # create_app 을 여러 번 호출해도(테스트 등) JSON 핸들러는 하나만 유지한다.
    for existing in list(root_logger.handlers):
        if isinstance(existing.formatter, JsonFormatter):
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    return logging.getLogger(service_name)


class JsonFormatter(logging.Formatter):
    """로그 레코드 하나를 JSON 한 줄로 만든다.

    datetime 은 UTC ISO8601(밀리초)로 찍어 포스트의 created_at 과 같은 형식을 쓴다.
    요청 추적 키와 포스트 작업 키는 extra 로 넘어온 것만 기록한다.
    """

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME) -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_record: dict[str, object] = {
            "datetime": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "service_name": self.service_name,
            "message": record.getMessage(),
        }

        for key in (*TRACE_EXTRA_KEYS, *POST_EXTRA_KEYS):
            value = getattr(record, key, None)
            if value is not None:
                log_record[key] = value

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)
