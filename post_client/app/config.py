from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml


DEFAULT_CONFIG_FILE_NAME = "config.yaml"
DEFAULT_API_BASE_URL = "http://localhost:3000/api"
DEFAULT_TIMEOUT_SECONDS = 10.0

API_BASE_URL_ENV = "POST_API_BASE_URL"


@dataclass(slots=True)
class ClientConfig:
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def _find_config_path() -> Path | None:
    current = Path.cwd()
    for directory in (current, *current.parents):
        candidate = directory / DEFAULT_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def load_client_config(path: Path | None = None) -> ClientConfig:
    """config.yaml 의 client 섹션을 읽는다.

    POST_API_BASE_URL 환경변수가 있으면 파일 값보다 우선한다.
    """

    path = path or _find_config_path()
    section: dict = {}
    if path is not None:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        section = data.get("client") or {}

    base_url = os.getenv(API_BASE_URL_ENV) or section.get("api_base_url") or DEFAULT_API_BASE_URL

    raw_timeout = section.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as exc:  # noqa: TRY003
        raise RuntimeError(
            f"invalid client.timeout_seconds in {path}: {raw_timeout!r}",
        ) from exc

    return ClientConfig(api_base_url=str(base_url).strip(), timeout_seconds=timeout)
