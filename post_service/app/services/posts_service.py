from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends
from pymongo.database import Database

from common.models.post import Post
from common.mongo.client import get_database
from common.validation.post import validate_create, validate_search_query, validate_update

from ..errors import PostNotFoundError, StoreError
from ..repositories.interfaces import PostRepositoryInterface
from ..repositories.post_repository import PostRepository

logger = logging.getLogger(__name__)


class PostsService:
    """포스트 조회/검색 및 생성/수정/삭제 비즈니스 로직.

    - Repository 에만 의존하고, Mongo 세부 구현은 알지 않는다.
    - 입력 검증을 통과하지 못하면 저장소를 호출하지 않는다.
    - 저장소 실패(StoreError)는 재시도하지 않고 그대로 올린다.
    """

    def __init__(self, post_repo: PostRepositoryInterface) -> None:
        self._post_repo = post_repo

    def list_posts(self) -> list[Post]:
        posts = self._post_repo.list_all()
        logger.debug("listed posts", extra={"count": len(posts)})
        return posts

    def get_post(self, post_id: str) -> Post:
        # 조회 자체의 실패와 "없음" 을 구분하지 않고 모두 404 로 응답한다.
        try:
            post = self._post_repo.find_by_id(post_id)
        except StoreError as exc:
            logger.warning(
                "failed to fetch post: %s", exc.message, extra={"post_id": post_id}
            )
            raise PostNotFoundError(post_id) from exc

        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def create_post(self, data: Any) -> Post:
        valid = validate_create(data)
        post = self._post_repo.insert(valid.image, valid.caption)
        logger.info("created post", extra={"post_id": post.id})
        return post

    def update_post(self, post_id: str, data: Any) -> Post:
        patch = validate_update(data).to_patch()
        post = self._post_repo.update_fields(post_id, patch)
        if post is None:
            raise PostNotFoundError(post_id)

        logger.info("updated post", extra={"post_id": post_id, "fields": sorted(patch)})
        return post

    def delete_post(self, post_id: str) -> Post:
        post = self._post_repo.delete_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)

        logger.info("deleted post", extra={"post_id": post_id})
        return post

    def search_posts(self, query: str | None) -> list[Post]:
        q = validate_search_query(query)
        posts = self._post_repo.search_by_caption(q)
        logger.debug("searched posts", extra={"query": q, "count": len(posts)})
        return posts


def get_posts_service(
    db: Database = Depends(get_database),
) -> PostsService:
    """FastAPI DI용 PostsService 팩토리."""
    return PostsService(PostRepository(db))
