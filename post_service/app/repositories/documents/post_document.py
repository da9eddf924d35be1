from __future__ import annotations

from common.models.post import Post
from common.mongo.types import BaseDocument, from_object_id


class PostDocument(BaseDocument):
    """MongoDB posts 컬렉션 도큐먼트 모델."""

    image: str
    caption: str

    def to_domain(self) -> Post:
        return Post(
            id=from_object_id(self.id) or "",
            image=self.image,
            caption=self.caption,
            created_at=self.created_at,
        )
