from __future__ import annotations

import os
from dataclasses import dataclass


MONGO_URI_ENV = "MONGO_URI"
MONGO_DB_NAME_ENV = "MONGO_DB_NAME"


@dataclass(frozen=True, slots=True)
class MongoSettings:
    """posts 저장소 연결 정보. 환경 변수에서만 읽는다.

    db_name 이 None 이면 URI 경로에 적힌 기본 DB 를 쓴다.
    """

    uri: str
    db_name: str | None = None

    @classmethod
    def from_env(cls) -> "MongoSettings":
        uri = os.getenv(MONGO_URI_ENV, "").strip()
        if not uri:
            raise RuntimeError(f"{MONGO_URI_ENV} environment variable is required for MongoDB")
        db_name = os.getenv(MONGO_DB_NAME_ENV, "").strip()
        return cls(uri=uri, db_name=db_name or None)
