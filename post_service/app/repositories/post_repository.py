from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Iterable

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from common.models.post import Post
from common.mongo.client import POSTS_COLLECTION
from common.mongo.types import parse_object_id

from ..errors import StoreError
from .documents.post_document import PostDocument
from .interfaces import PostRepositoryInterface


# created_at 이 같은 경우(같은 밀리초에 삽입) _id 로 삽입 순서를 보장한다.
_NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


class PostRepository(PostRepositoryInterface):
    """posts 컬렉션에 대한 MongoDB 접근 레이어.

    pymongo 예외는 모두 StoreError 로 감싸서 올린다. 형식이 잘못된 id 는
    "일치하는 레코드 없음" 으로 취급한다.
    """

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database[POSTS_COLLECTION]

    # --- helpers -----------------------------------------------------------------
    @staticmethod
    def _from_document(doc: dict[str, Any]) -> Post:
        return PostDocument.model_validate(doc).to_domain()

    def _from_cursor(self, cursor: Iterable[dict[str, Any]]) -> list[Post]:
        return [self._from_document(doc) for doc in cursor]

    # --- queries -----------------------------------------------------------------
    def list_all(self) -> list[Post]:
        try:
            return self._from_cursor(self._col.find({}, sort=_NEWEST_FIRST))
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    def search_by_caption(self, query: str) -> list[Post]:
        # 사용자 입력은 정규식이 아니라 리터럴 부분 문자열로 취급한다.
        filter_doc = {"caption": {"$regex": re.escape(query), "$options": "i"}}
        try:
            return self._from_cursor(self._col.find(filter_doc, sort=_NEWEST_FIRST))
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    def find_by_id(self, id_value: str) -> Post | None:
        oid = parse_object_id(id_value)
        if oid is None:
            return None
        try:
            doc = self._col.find_one({"_id": oid})
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        if not doc:
            return None
        return self._from_document(doc)

    # --- commands ----------------------------------------------------------------
    def insert(self, image: str, caption: str) -> Post:
        """새 포스트를 삽입한다. created_at 은 여기서 UTC 현재 시각으로 찍는다."""

        now = datetime.now(timezone.utc)
        # BSON datetime 은 밀리초 정밀도라 반환값과 이후 조회값이 같도록 미리 자른다.
        now = now.replace(microsecond=now.microsecond // 1000 * 1000)
        document = PostDocument(image=image, caption=caption, created_at=now)
        record = document.to_mongo_record()
        try:
            result = self._col.insert_one(record)
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

        document.id = result.inserted_id
        return document.to_domain()

    def update_fields(self, id_value: str, updates: dict[str, str]) -> Post | None:
        oid = parse_object_id(id_value)
        if oid is None:
            return None
        try:
            doc = self._col.find_one_and_update(
                {"_id": oid},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        if doc is None:
            return None
        return self._from_document(doc)

    def delete_by_id(self, id_value: str) -> Post | None:
        oid = parse_object_id(id_value)
        if oid is None:
            return None
        try:
            doc = self._col.find_one_and_delete({"_id": oid})
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
        if doc is None:
            return None
        return self._from_document(doc)
