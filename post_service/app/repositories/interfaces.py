from __future__ import annotations

from typing import Protocol

from common.models.post import Post


class PostRepositoryInterface(Protocol):
    """PostRepository가 따라야 할 최소한의 계약.

    Service 레이어는 이 인터페이스에만 의존하고, 구체 구현(Mongo 등)은 몰라도 된다.
    저장소 실패는 StoreError 로 올려야 한다.
    """

    def list_all(self) -> list[Post]:  # pragma: no cover - Protocol
        """created_at 내림차순(최신순)으로 전체 포스트를 반환한다."""
        ...

    def search_by_caption(self, query: str) -> list[Post]:  # pragma: no cover - Protocol
        """caption 에 query 가 대소문자 무시 부분 일치하는 포스트를 최신순으로 반환한다."""
        ...

    def find_by_id(self, id_value: str) -> Post | None:  # pragma: no cover - Protocol
        ...

    def insert(self, image: str, caption: str) -> Post:  # pragma: no cover - Protocol
        """새 포스트를 저장하고 id/created_at 이 채워진 레코드를 반환한다."""
        ...

    def update_fields(
        self, id_value: str, updates: dict[str, str]
    ) -> Post | None:  # pragma: no cover - Protocol
        """일치하는 레코드가 없으면 None, 있으면 수정 후 레코드를 반환한다."""
        ...

    def delete_by_id(self, id_value: str) -> Post | None:  # pragma: no cover - Protocol
        """일치하는 레코드가 없으면 None, 있으면 삭제 직전 레코드를 반환한다."""
        ...
