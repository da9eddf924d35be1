from __future__ import annotations

import logging
from typing import Callable

from common.models.post import Post

from .api_client import ApiError, PostsApiClient


logger = logging.getLogger(__name__)

Listener = Callable[[tuple[Post, ...]], None]


class ClientPostStore:
    """클라이언트 쪽 포스트 목록 저장소.

    - 생성/수정/삭제 후에는 로컬 목록을 직접 고치지 않고 항상 전체 목록을 다시 받아온다.
      즉 낙관적 캐시가 아니라 서버 상태를 그대로 비추는 거울이다.
    - 모듈 전역 상태를 두지 않고, 컨트롤러/뷰에 인스턴스를 넘겨서 쓴다.
    """

    def __init__(self, api: PostsApiClient) -> None:
        self._api = api
        self._posts: tuple[Post, ...] = ()
        self._listeners: list[Listener] = []
        self.loading = False
        self.error: str | None = None

    @property
    def posts(self) -> tuple[Post, ...]:
        return self._posts

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """목록을 다시 받아올 때마다 호출될 리스너를 등록하고 해제 함수를 반환한다."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load(self) -> tuple[Post, ...]:
        """전체 목록을 다시 받아온다. 실패하면 이전 목록을 유지하고 error 에 기록한다."""

        self.loading = True
        try:
            posts = self._api.get_posts()
        except ApiError as exc:
            logger.warning("failed to load posts: %s", exc.message)
            self.error = exc.message
            return self._posts
        finally:
            self.loading = False

        self._posts = tuple(posts)
        self.error = None
        for listener in list(self._listeners):
            listener(self._posts)
        return self._posts

    def create(self, image: str, caption: str) -> Post:
        post = self._api.create_post(image, caption)
        self.load()
        return post

    def update(
        self,
        post_id: str,
        image: str | None = None,
        caption: str | None = None,
    ) -> Post:
        post = self._api.update_post(post_id, image=image, caption=caption)
        self.load()
        return post

    def delete(self, post_id: str) -> Post:
        post = self._api.delete_post(post_id)
        self.load()
        return post

    def search(self, query: str) -> list[Post]:
        # 검색 결과는 캐시된 전체 목록을 대체하지 않는다.
        return self._api.search_posts(query)
