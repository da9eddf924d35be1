from __future__ import annotations

import json
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ...services.posts_service import PostsService, get_posts_service
from ..schemas.posts import (
    ErrorResponse,
    ListPostsResponse,
    PostEnvelopeResponse,
    PostResponse,
    PostWriteRequest,
    SearchPostsResponse,
)


router = APIRouter()

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "post not found"}}
_BAD_REQUEST = {400: {"model": ErrorResponse, "description": "invalid input or store error"}}

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_WRITE_BODY_SCHEMA = PostWriteRequest.model_json_schema()
_WRITE_BODY_DOC = {
    "requestBody": {
        "content": {
            "application/json": {"schema": _WRITE_BODY_SCHEMA},
            FORM_CONTENT_TYPE: {"schema": _WRITE_BODY_SCHEMA},
        }
    }
}


async def read_post_body(request: Request) -> Optional[PostWriteRequest]:
    """JSON 또는 form-urlencoded 바디를 PostWriteRequest 로 읽는다.

    바디가 비어 있거나 JSON null 이면 None 을 돌려주고 필수 여부는 검증기에 맡긴다.
    """

    raw: object
    if request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPE):
        form = await request.form()
        raw = {key: form[key] for key in ("image", "caption") if key in form}
    else:
        body = await request.body()
        if not body.strip():
            return None
        try:
            raw = json.loads(body)
        except ValueError as exc:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error"}]
            ) from exc

    if raw is None:
        return None
    try:
        return PostWriteRequest.model_validate(raw)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors()]
        ) from exc


@router.get(
    "",
    response_model=ListPostsResponse,
    summary="포스트 목록 조회",
    description="전체 포스트를 created_at 내림차순(최신순)으로 반환한다.",
    responses=_BAD_REQUEST,
)
def list_posts(
    service: PostsService = Depends(get_posts_service),
) -> ListPostsResponse:
    return ListPostsResponse.from_domain(service.list_posts())


# /{post_id} 보다 먼저 등록해야 "search" 가 post_id 로 잡히지 않는다.
@router.get(
    "/search",
    response_model=SearchPostsResponse,
    summary="포스트 caption 검색",
    description="caption 에 q 가 포함된(대소문자 무시) 포스트를 최신순으로 반환한다.",
    responses=_BAD_REQUEST,
)
def search_posts(
    q: Optional[str] = Query(default=None, description="검색어 (필수)"),
    service: PostsService = Depends(get_posts_service),
) -> SearchPostsResponse:
    posts = service.search_posts(q)
    listed = ListPostsResponse.from_domain(posts)
    return SearchPostsResponse(data=listed.data, count=listed.count, query=q or "")


@router.get(
    "/{post_id}",
    response_model=PostEnvelopeResponse,
    response_model_exclude_none=True,
    summary="단일 포스트 조회",
    responses=_NOT_FOUND,
)
def get_post(
    post_id: str,
    service: PostsService = Depends(get_posts_service),
) -> PostEnvelopeResponse:
    post = service.get_post(post_id)
    return PostEnvelopeResponse(data=PostResponse.from_domain(post))


@router.post(
    "",
    response_model=PostEnvelopeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="포스트 생성",
    openapi_extra=_WRITE_BODY_DOC,
    responses=_BAD_REQUEST,
)
def create_post(
    body: Optional[PostWriteRequest] = Depends(read_post_body),
    service: PostsService = Depends(get_posts_service),
) -> PostEnvelopeResponse:
    post = service.create_post(body)
    return PostEnvelopeResponse(
        message="Post created successfully",
        data=PostResponse.from_domain(post),
    )


@router.put(
    "/{post_id}",
    response_model=PostEnvelopeResponse,
    summary="포스트 수정",
    description="image/caption 중 전달된 필드만 수정한다.",
    openapi_extra=_WRITE_BODY_DOC,
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def update_post(
    post_id: str,
    body: Optional[PostWriteRequest] = Depends(read_post_body),
    service: PostsService = Depends(get_posts_service),
) -> PostEnvelopeResponse:
    post = service.update_post(post_id, body)
    return PostEnvelopeResponse(
        message="Post updated successfully",
        data=PostResponse.from_domain(post),
    )


@router.delete(
    "/{post_id}",
    response_model=PostEnvelopeResponse,
    summary="포스트 삭제",
    description="포스트를 영구 삭제하고 삭제 직전 상태를 반환한다.",
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
def delete_post(
    post_id: str,
    service: PostsService = Depends(get_posts_service),
) -> PostEnvelopeResponse:
    post = service.delete_post(post_id)
    return PostEnvelopeResponse(
        message="Post deleted successfully",
        data=PostResponse.from_domain(post),
    )
