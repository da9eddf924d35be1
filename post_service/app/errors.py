from __future__ import annotations

from common.errors import (  # noqa: F401 - 서비스 레이어에서 한 곳으로 import 하기 위해 재노출
    FieldTooLongError,
    MissingFieldError,
    PostError,
    PostValidationError,
)


class PostNotFoundError(PostError):
    def __init__(self, post_id: str) -> None:
        super().__init__("Post not found")
        self.post_id = post_id


class StoreError(PostError):
    """저장소가 유효한 요청을 거부하거나 실패했다. 메시지는 드라이버 것을 그대로 쓴다."""
