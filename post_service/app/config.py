from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml


DEFAULT_CONFIG_FILE_NAME = "config.yaml"
DEFAULT_BASE_PATH = "/api"

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApiConfig:
    base_path: str = DEFAULT_BASE_PATH
    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass(slots=True)
class AppConfig:
    """post-service 설정 루트. 현재는 api 섹션만 사용한다."""

    api: ApiConfig = field(default_factory=ApiConfig)


def _find_config_path() -> Path | None:
    """현재 작업 디렉토리에서 상위로 올라가며 config.yaml 을 찾는다."""

    current = Path.cwd()
    for directory in (current, *current.parents):
        candidate = directory / DEFAULT_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _load_api_config(raw: object, path: Path) -> ApiConfig:
    if raw is None:
        return ApiConfig()
    if not isinstance(raw, dict):
        raise RuntimeError(f"invalid api section in {path}: expected a mapping")

    base_path = str(raw.get("base_path") or DEFAULT_BASE_PATH).strip()
    if not base_path.startswith("/"):
        raise RuntimeError(f"invalid api.base_path in {path}: {base_path!r}")

    origins_raw = raw.get("cors_allow_origins")
    if origins_raw is None:
        origins = ["*"]
    elif isinstance(origins_raw, list):
        origins = [str(item).strip() for item in origins_raw if str(item).strip()]
    else:
        raise RuntimeError(
            f"invalid api.cors_allow_origins in {path}: {origins_raw!r}",
        )

    # "/" 는 빈 prefix(루트 마운트)로 바꾼다. include_router 는 "/" 로 끝나는 prefix 를 거부한다.
    return ApiConfig(base_path=base_path.rstrip("/"), cors_allow_origins=origins)


def load_config(path: Path | None = None) -> AppConfig:
    """post-service 설정을 로드한다. config.yaml 이 없으면 기본값을 사용한다."""

    path = path or _find_config_path()
    if path is None:
        logger.info("%s not found, using default post-service config", DEFAULT_CONFIG_FILE_NAME)
        return AppConfig()

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return AppConfig(api=_load_api_config(data.get("api"), path))
