from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic.functional_serializers import PlainSerializer
from pydantic.functional_validators import AfterValidator


def ensure_utc_datetime(value: datetime) -> datetime:
    """naive datetime 은 UTC 로 간주하고, aware datetime 은 UTC 로 변환한다."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_utc_iso8601(value: datetime) -> str:
    return ensure_utc_datetime(value).isoformat()


# 입력은 ISO 문자열/datetime 모두 받아 UTC 로 맞추고, JSON 으로는 +00:00 ISO 문자열을 낸다.
UtcDateTime = Annotated[
    datetime,
    AfterValidator(ensure_utc_datetime),
    PlainSerializer(to_utc_iso8601, return_type=str, when_used="json"),
]
