from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from common.models.post import Post
from post_service.app.config import AppConfig
from post_service.app.errors import StoreError
from post_service.app.main import create_app
from post_service.app.repositories.interfaces import PostRepositoryInterface
from post_service.app.services.posts_service import PostsService, get_posts_service


class FakePostRepository(PostRepositoryInterface):
    """Mongo 없이 posts 컬렉션처럼 동작하는 인메모리 저장소.

    - 호출된 메서드 이름을 calls 에 기록해 "저장소를 호출하지 않았음" 을 검증할 수 있다.
    - fail_with 를 설정하면 모든 호출이 그 예외를 던진다.
    """

    def __init__(self) -> None:
        self._rows: dict[str, Post] = {}
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    def _newest_first(self, posts: list[Post]) -> list[Post]:
        return sorted(posts, key=lambda p: (p.created_at, p.id), reverse=True)

    def list_all(self) -> list[Post]:
        self._record("list_all")
        return self._newest_first(list(self._rows.values()))

    def search_by_caption(self, query: str) -> list[Post]:
        self._record("search_by_caption")
        needle = query.lower()
        return self._newest_first(
            [p for p in self._rows.values() if needle in p.caption.lower()]
        )

    def find_by_id(self, id_value: str) -> Post | None:
        self._record("find_by_id")
        return self._rows.get(id_value)

    def insert(self, image: str, caption: str) -> Post:
        self._record("insert")
        self._clock += timedelta(seconds=1)
        post = Post(
            id=str(ObjectId()),
            image=image,
            caption=caption,
            created_at=self._clock,
        )
        self._rows[post.id] = post
        return post

    def update_fields(self, id_value: str, updates: dict[str, str]) -> Post | None:
        self._record("update_fields")
        current = self._rows.get(id_value)
        if current is None:
            return None
        updated = current.model_copy(update=updates)
        self._rows[id_value] = updated
        return updated

    def delete_by_id(self, id_value: str) -> Post | None:
        self._record("delete_by_id")
        return self._rows.pop(id_value, None)


@pytest.fixture
def repo() -> FakePostRepository:
    return FakePostRepository()


@pytest.fixture
def service(repo: FakePostRepository) -> PostsService:
    return PostsService(repo)


@pytest.fixture
def client(repo: FakePostRepository) -> TestClient:
    app = create_app(AppConfig())
    app.dependency_overrides[get_posts_service] = lambda: PostsService(repo)
    # 500 응답 본문을 검증하기 위해 서버 예외를 테스트로 다시 던지지 않는다.
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def store_error() -> StoreError:
    return StoreError("connection refused")
