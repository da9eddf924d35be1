from __future__ import annotations


class PostError(Exception):
    """포스트 도메인 예외의 공통 베이스. message 는 사용자에게 그대로 보여준다."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PostValidationError(PostError):
    """입력이 필드 제약을 위반했다. 서버에서는 저장소 호출 전에 발생한다."""


class MissingFieldError(PostValidationError):
    pass


class FieldTooLongError(PostValidationError):
    def __init__(self, field: str, max_length: int, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.max_length = max_length
