from __future__ import annotations

import logging
import threading
from typing import Optional

from pymongo import DESCENDING, MongoClient
from pymongo.database import Database

from .config import MongoSettings


logger = logging.getLogger(__name__)

POSTS_COLLECTION = "posts"

_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_lock = threading.Lock()


def get_client() -> MongoClient:
    """프로세스 전역 MongoClient 싱글톤을 반환한다.

    - MONGO_URI 로 연결하고 ping 으로 검증한다.
    - MONGO_DB_NAME 이 없으면 URI 에 포함된 기본 DB 를 사용한다.
    - posts 컬렉션 인덱스를 최초 연결 시 한 번만 생성한다.
    """

    global _client, _db

    if _client is not None:
        return _client

    with _lock:
        if _client is not None:
            return _client

        settings = MongoSettings.from_env()
        client = MongoClient(settings.uri, tz_aware=True)

        try:
            client.admin.command("ping")
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(f"failed to connect to MongoDB: {exc}") from exc

        try:
            if settings.db_name:
                db = client[settings.db_name]
            else:
                db = client.get_default_database()
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(
                "MongoDB database name must be specified via MONGO_DB_NAME or in MONGO_URI (mongodb://.../db_name)",
            ) from exc

        try:
            ensure_indexes(db)
        except Exception as exc:  # noqa: BLE001
            # 인덱스 생성 실패는 치명적 오류로 간주한다.
            logger.error("failed to ensure MongoDB indexes: %s", exc)
            client.close()
            raise

        _client = client
        _db = db
        logger.info("MongoDB connected and indexes ensured (db=%s)", db.name)
        return _client


def get_database() -> Database:
    """전역 기본 Database 객체를 반환한다. FastAPI Depends 로 주입된다."""

    if _db is None:
        get_client()
    assert _db is not None
    return _db


def close_client() -> None:
    global _client, _db

    with _lock:
        if _client is not None:
            _client.close()
        _client = None
        _db = None


def ensure_indexes(db: Database) -> None:
    """posts 컬렉션의 기본 정렬(created_at desc, _id desc)용 인덱스를 만든다.

    caption 부분 일치 검색은 정규식 스캔이라 별도 인덱스를 두지 않는다.
    create_index 는 이미 있으면 아무것도 하지 않으므로 반복 호출해도 안전하다.
    """

    db[POSTS_COLLECTION].create_index(
        [("created_at", DESCENDING), ("_id", DESCENDING)],
        name="idx_created_at_id_desc",
    )
