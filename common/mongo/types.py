from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, ConfigDict, Field
from pydantic.functional_validators import AfterValidator, BeforeValidator
from typing_extensions import Annotated

from common.types.datetime import ensure_utc_datetime


def to_object_id(value: Any) -> ObjectId:
    """str, ObjectId 등을 MongoDB ObjectId 로 변환한다. 형식이 틀리면 InvalidId."""

    if isinstance(value, ObjectId):
        return value
    if value is None:
        raise TypeError("ObjectId cannot be None")
    return ObjectId(str(value))


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """to_object_id 와 같지만 변환할 수 없는 값이면 None 을 반환한다.

    외부에서 들어온 post_id 처럼 형식을 보장할 수 없는 값에 사용한다.
    """

    try:
        return to_object_id(value)
    except (InvalidId, TypeError):
        return None


def from_object_id(value: Optional[ObjectId]) -> Optional[str]:
    if value is None:
        return None
    return str(value)


PyObjectId = Annotated[ObjectId, BeforeValidator(to_object_id)]
MongoDateTime = Annotated[datetime, AfterValidator(ensure_utc_datetime)]


class BaseDocument(BaseModel):
    """MongoDB 도큐먼트용 공통 베이스 모델.

    - ObjectId 같은 임의 타입을 허용한다.
    - id 는 Mongo 의 _id 필드와 alias 로 연결된다.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    created_at: MongoDateTime

    def to_mongo_record(self) -> dict[str, Any]:
        """insert 용 레코드. _id=None 을 빼서 Mongo 가 ObjectId 를 만들게 한다."""

        return self.model_dump(by_alias=True, exclude_none=True)
