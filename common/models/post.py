from pydantic import BaseModel

from common.types.datetime import UtcDateTime


IMAGE_MAX_LENGTH = 2048
CAPTION_MAX_LENGTH = 255


class Post(BaseModel):
    """게시글 도메인 모델 (API/클라이언트/저장소에서 공통 사용)

    id 와 created_at 은 저장 시점에 저장소가 채우며 이후 바뀌지 않는다.
    """

    id: str
    image: str
    caption: str
    created_at: UtcDateTime


class PostDraft(BaseModel):
    """아직 검증되지 않은 생성/수정 입력. 두 필드 모두 생략될 수 있다."""

    image: str | None = None
    caption: str | None = None
