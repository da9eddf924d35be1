from __future__ import annotations

from pydantic import BaseModel

from common.models.post import Post, PostDraft
from common.types.datetime import UtcDateTime


class PostResponse(BaseModel):
    """포스트 응답 DTO.

    도메인 모델(Post)을 그대로 노출하지 않고, API 경계를 위한 전용 응답 모델을 사용한다.
    """

    id: str
    image: str
    caption: str
    created_at: UtcDateTime

    @classmethod
    def from_domain(cls, post: Post) -> "PostResponse":
        return cls.model_validate(post.model_dump())


class PostWriteRequest(PostDraft):
    """POST/PUT 요청 바디. 필수 여부는 검증기가 판단하므로 모두 선택 필드다."""


class ListPostsResponse(BaseModel):
    success: bool = True
    data: list[PostResponse]
    count: int

    @classmethod
    def from_domain(cls, posts: list[Post]) -> "ListPostsResponse":
        items = [PostResponse.from_domain(post) for post in posts]
        return cls(data=items, count=len(items))


class SearchPostsResponse(ListPostsResponse):
    query: str


class PostEnvelopeResponse(BaseModel):
    """단건 응답. 단건 조회에는 message 가 없다."""

    success: bool = True
    message: str | None = None
    data: PostResponse


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None
