from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from common.models.post import Post
from post_client.app.api_client import ApiError
from post_client.app.interaction import InteractionController
from post_client.app.post_store import ClientPostStore


class FakePostsApi:
    """PostsApiClient 대신 쓰는 인메모리 API.

    - calls 에 호출 순서를 남긴다.
    - fail_next 에 ApiError 를 넣으면 다음 변경 요청(create/update/delete)이 실패한다.
    - fail_list 에 ApiError 를 넣으면 get_posts 가 실패한다.
    """

    def __init__(self) -> None:
        self.posts: list[Post] = []
        self.calls: list[str] = []
        self.fail_next: ApiError | None = None
        self.fail_list: ApiError | None = None
        self.on_mutation = None
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)
        self._seq = 0

    def add(self, image: str, caption: str) -> Post:
        self._seq += 1
        self._clock += timedelta(seconds=1)
        post = Post(
            id=f"{self._seq:024x}",
            image=image,
            caption=caption,
            created_at=self._clock,
        )
        self.posts.insert(0, post)
        return post

    def _mutate(self, name: str) -> None:
        self.calls.append(name)
        if self.on_mutation is not None:
            self.on_mutation()
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    def get_posts(self) -> list[Post]:
        self.calls.append("get_posts")
        if self.fail_list is not None:
            raise self.fail_list
        return list(self.posts)

    def search_posts(self, query: str) -> list[Post]:
        self.calls.append("search_posts")
        return [p for p in self.posts if query.lower() in p.caption.lower()]

    def create_post(self, image: str, caption: str) -> Post:
        self._mutate("create_post")
        return self.add(image, caption)

    def update_post(self, post_id: str, image: str | None = None, caption: str | None = None) -> Post:
        self._mutate("update_post")
        for index, post in enumerate(self.posts):
            if post.id == post_id:
                changes = {k: v for k, v in {"image": image, "caption": caption}.items() if v is not None}
                self.posts[index] = post.model_copy(update=changes)
                return self.posts[index]
        raise ApiError(404, "Post not found")

    def delete_post(self, post_id: str) -> Post:
        self._mutate("delete_post")
        for index, post in enumerate(self.posts):
            if post.id == post_id:
                return self.posts.pop(index)
        raise ApiError(404, "Post not found")


@pytest.fixture
def api() -> FakePostsApi:
    return FakePostsApi()


@pytest.fixture
def store(api: FakePostsApi) -> ClientPostStore:
    return ClientPostStore(api)  # type: ignore[arg-type]


@pytest.fixture
def controller(store: ClientPostStore) -> InteractionController:
    return InteractionController(store)
