"""보기 → 수정 → 삭제 모달 흐름을 명시적인 상태 머신으로 다룬다.

화면 상태는 Browsing | Viewing | Editing | ConfirmingDelete | Composing 중 하나이고,
모든 전이는 reduce(state, action) 하나를 거친다. "수정 모달은 열렸는데 보기 모달은
닫힌" 것 같은 불가능한 조합은 표현할 수 없다.

InteractionController 는 reduce 위에서 제출(저장소 호출)이라는 부수효과만 담당한다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from common.errors import PostValidationError
from common.models.post import Post
from common.validation.post import validate_create

from .api_client import ApiError
from .post_store import ClientPostStore


logger = logging.getLogger(__name__)

UPDATE_FAILED_MESSAGE = "Failed to update post."
DELETE_FAILED_MESSAGE = "Failed to delete post."
CREATE_FAILED_MESSAGE = "Failed to create post."


# --- modes -----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Draft:
    """제출 전 로컬에서 편집 중인 필드 값."""

    image: str = ""
    caption: str = ""


@dataclass(frozen=True, slots=True)
class Browsing:
    pass


@dataclass(frozen=True, slots=True)
class Viewing:
    post: Post


@dataclass(frozen=True, slots=True)
class Editing:
    post: Post
    draft: Draft


@dataclass(frozen=True, slots=True)
class ConfirmingDelete:
    post: Post


@dataclass(frozen=True, slots=True)
class Composing:
    draft: Draft


Mode = Browsing | Viewing | Editing | ConfirmingDelete | Composing

# 제출 버튼이 있는 모드
SUBMITTABLE_MODES = (Editing, ConfirmingDelete, Composing)


@dataclass(frozen=True, slots=True)
class InteractionState:
    mode: Mode = Browsing()
    error: str | None = None
    submitting: bool = False


# --- actions ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SelectPost:
    post: Post


@dataclass(frozen=True, slots=True)
class Close:
    pass


@dataclass(frozen=True, slots=True)
class RequestEdit:
    pass


@dataclass(frozen=True, slots=True)
class ChangeDraft:
    image: str | None = None
    caption: str | None = None


@dataclass(frozen=True, slots=True)
class CancelEdit:
    pass


@dataclass(frozen=True, slots=True)
class RequestDelete:
    pass


@dataclass(frozen=True, slots=True)
class CancelDelete:
    pass


@dataclass(frozen=True, slots=True)
class RequestCompose:
    pass


@dataclass(frozen=True, slots=True)
class CancelCompose:
    pass


@dataclass(frozen=True, slots=True)
class SubmitStarted:
    pass


@dataclass(frozen=True, slots=True)
class SubmitSucceeded:
    pass


@dataclass(frozen=True, slots=True)
class SubmitFailed:
    message: str


Action = (
    SelectPost
    | Close
    | RequestEdit
    | ChangeDraft
    | CancelEdit
    | RequestDelete
    | CancelDelete
    | RequestCompose
    | CancelCompose
    | SubmitStarted
    | SubmitSucceeded
    | SubmitFailed
)


# --- reducer ---------------------------------------------------------------------


def _apply_draft_change(draft: Draft, action: ChangeDraft) -> Draft:
    changes: dict[str, str] = {}
    if action.image is not None:
        changes["image"] = action.image
    if action.caption is not None:
        changes["caption"] = action.caption
    return replace(draft, **changes)


def _reduce_mode(mode: Mode, action: Action) -> Mode | None:
    """모드 전이만 계산한다. 현재 모드에 적용되지 않는 액션이면 None."""

    if isinstance(mode, Browsing):
        if isinstance(action, SelectPost):
            return Viewing(action.post)
        if isinstance(action, RequestCompose):
            return Composing(Draft())
        return None

    if isinstance(mode, Viewing):
        if isinstance(action, Close):
            return Browsing()
        if isinstance(action, RequestEdit):
            # 수정 필드는 선택된 포스트의 현재 값으로 채운다.
            return Editing(mode.post, Draft(image=mode.post.image, caption=mode.post.caption))
        if isinstance(action, RequestDelete):
            return ConfirmingDelete(mode.post)
        return None

    if isinstance(mode, Editing):
        if isinstance(action, ChangeDraft):
            return Editing(mode.post, _apply_draft_change(mode.draft, action))
        if isinstance(action, CancelEdit):
            return Viewing(mode.post)
        return None

    if isinstance(mode, ConfirmingDelete):
        if isinstance(action, CancelDelete):
            return Viewing(mode.post)
        return None

    if isinstance(mode, Composing):
        if isinstance(action, ChangeDraft):
            return Composing(_apply_draft_change(mode.draft, action))
        if isinstance(action, CancelCompose):
            return Browsing()
        return None

    return None


def reduce(state: InteractionState, action: Action) -> InteractionState:
    """순수 함수. 적용할 수 없는 액션이면 state 를 그대로 반환한다."""

    submittable = isinstance(state.mode, SUBMITTABLE_MODES)

    if isinstance(action, SubmitStarted):
        if not submittable or state.submitting:
            return state
        return replace(state, submitting=True, error=None)

    if isinstance(action, SubmitSucceeded):
        if not submittable:
            return state
        # 성공하면 모든 모달을 닫는다. 목록 갱신은 저장소가 이미 끝냈다.
        return InteractionState()

    if isinstance(action, SubmitFailed):
        if not submittable:
            return state
        return replace(state, submitting=False, error=action.message)

    # 제출 중에는 취소/닫기를 포함한 다른 전이를 막는다. (입력 변경만 허용)
    if state.submitting and not isinstance(action, ChangeDraft):
        return state

    next_mode = _reduce_mode(state.mode, action)
    if next_mode is None:
        return state

    # 입력만 바뀐 경우에는 인라인 에러를 유지하고, 모드가 바뀌면 지운다.
    error = state.error if isinstance(action, ChangeDraft) else None
    return replace(state, mode=next_mode, error=error)


# --- controller ------------------------------------------------------------------


class InteractionController:
    """reduce 로 화면 상태를 관리하고, 제출 시 ClientPostStore 를 호출한다.

    성공한 제출은 저장소가 전체 목록을 다시 받아온 뒤 Browsing 으로 돌아간다.
    실패하면 현재 모드를 유지하고 error 에 메시지를 남긴다.
    """

    def __init__(self, store: ClientPostStore) -> None:
        self._store = store
        self._state = InteractionState()

    @property
    def store(self) -> ClientPostStore:
        return self._store

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def mode(self) -> Mode:
        return self._state.mode

    def dispatch(self, action: Action) -> InteractionState:
        self._state = reduce(self._state, action)
        return self._state

    # --- navigation ------------------------------------------------------------
    def select_post(self, post: Post) -> InteractionState:
        return self.dispatch(SelectPost(post))

    def close(self) -> InteractionState:
        return self.dispatch(Close())

    def request_edit(self) -> InteractionState:
        return self.dispatch(RequestEdit())

    def change_draft(
        self, image: str | None = None, caption: str | None = None
    ) -> InteractionState:
        return self.dispatch(ChangeDraft(image=image, caption=caption))

    def cancel_edit(self) -> InteractionState:
        return self.dispatch(CancelEdit())

    def request_delete(self) -> InteractionState:
        return self.dispatch(RequestDelete())

    def cancel_delete(self) -> InteractionState:
        return self.dispatch(CancelDelete())

    def request_compose(self) -> InteractionState:
        return self.dispatch(RequestCompose())

    def cancel_compose(self) -> InteractionState:
        return self.dispatch(CancelCompose())

    # --- submits ---------------------------------------------------------------
    def submit_edit(self) -> bool:
        mode = self._state.mode
        if not isinstance(mode, Editing) or self._state.submitting:
            return False
        if not self._validate_draft(mode.draft):
            return False

        return self._submit(
            lambda: self._store.update(
                mode.post.id, image=mode.draft.image, caption=mode.draft.caption
            ),
            UPDATE_FAILED_MESSAGE,
        )

    def confirm_delete(self) -> bool:
        mode = self._state.mode
        if not isinstance(mode, ConfirmingDelete) or self._state.submitting:
            return False

        return self._submit(lambda: self._store.delete(mode.post.id), DELETE_FAILED_MESSAGE)

    def submit_compose(self) -> bool:
        mode = self._state.mode
        if not isinstance(mode, Composing) or self._state.submitting:
            return False
        if not self._validate_draft(mode.draft):
            return False

        return self._submit(
            lambda: self._store.create(mode.draft.image, mode.draft.caption),
            CREATE_FAILED_MESSAGE,
        )

    def _validate_draft(self, draft: Draft) -> bool:
        # 폼은 두 필드를 모두 보내므로 수정도 생성 규칙으로 검사한다.
        try:
            validate_create(draft)
        except PostValidationError as exc:
            self.dispatch(SubmitFailed(exc.message))
            return False
        return True

    def _submit(self, call: Callable[[], object], fallback_message: str) -> bool:
        self.dispatch(SubmitStarted())
        try:
            call()
        except ApiError as exc:
            logger.warning("submit failed (mode=%s): %s", type(self.mode).__name__, exc.message)
            self.dispatch(SubmitFailed(exc.message or fallback_message))
            return False
        except Exception:
            # 예상하지 못한 실패도 제출 잠금은 풀어 두고 그대로 올린다.
            self.dispatch(SubmitFailed(fallback_message))
            raise

        self.dispatch(SubmitSucceeded())
        return True
