from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from common.errors import FieldTooLongError, MissingFieldError, PostValidationError
from common.models.post import CAPTION_MAX_LENGTH, IMAGE_MAX_LENGTH


CREATE_MISSING_MESSAGE = "Image and caption are required fields"
UPDATE_MISSING_MESSAGE = "At least one field (image or caption) must be provided"
SEARCH_MISSING_MESSAGE = 'Search query parameter "q" is required'

_TOO_LONG_MESSAGES = {
    "image": f"Image URL must be less than {IMAGE_MAX_LENGTH} characters",
    "caption": f"Caption must be less than {CAPTION_MAX_LENGTH} characters",
}
_MAX_LENGTHS = {"image": IMAGE_MAX_LENGTH, "caption": CAPTION_MAX_LENGTH}


@dataclass(frozen=True, slots=True)
class ValidPost:
    image: str
    caption: str


@dataclass(frozen=True, slots=True)
class PartialValidPost:
    image: str | None = None
    caption: str | None = None

    def to_patch(self) -> dict[str, str]:
        """입력된 필드만 담은 부분 업데이트 dict."""

        patch: dict[str, str] = {}
        if self.image is not None:
            patch["image"] = self.image
        if self.caption is not None:
            patch["caption"] = self.caption
        return patch


def _read_field(data: Any, name: str) -> str | None:
    """mapping 또는 image/caption 속성을 가진 객체에서 값을 읽는다.

    빈 문자열은 입력하지 않은 것으로 본다.
    """

    if data is None:
        return None
    if isinstance(data, Mapping):
        value = data.get(name)
    else:
        value = getattr(data, name, None)

    if value is None:
        return None
    if not isinstance(value, str):
        raise PostValidationError(f"{name} must be a string")
    return value or None


def _check_length(name: str, value: str | None) -> None:
    if value is not None and len(value) > _MAX_LENGTHS[name]:
        raise FieldTooLongError(name, _MAX_LENGTHS[name], _TOO_LONG_MESSAGES[name])


def validate_create(data: Any) -> ValidPost:
    image = _read_field(data, "image")
    caption = _read_field(data, "caption")
    if image is None or caption is None:
        raise MissingFieldError(CREATE_MISSING_MESSAGE)

    _check_length("image", image)
    _check_length("caption", caption)
    return ValidPost(image=image, caption=caption)


def validate_update(data: Any) -> PartialValidPost:
    image = _read_field(data, "image")
    caption = _read_field(data, "caption")
    if image is None and caption is None:
        raise MissingFieldError(UPDATE_MISSING_MESSAGE)

    _check_length("image", image)
    _check_length("caption", caption)
    return PartialValidPost(image=image, caption=caption)


def validate_search_query(query: str | None) -> str:
    """검색어가 비어 있으면 전체 목록으로 대체하지 않고 MissingFieldError 를 낸다."""

    if query is None or not query.strip():
        raise MissingFieldError(SEARCH_MISSING_MESSAGE)
    return query
