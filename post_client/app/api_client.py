from __future__ import annotations

import logging
from typing import Any

import httpx

from common.models.post import Post

from .config import ClientConfig, load_client_config


logger = logging.getLogger(__name__)


class ApiError(Exception):
    """서버가 에러 응답을 주었거나 요청 자체가 실패했다.

    status_code 가 None 이면 네트워크/타임아웃 등 전송 단계 실패다.
    message 는 서버 응답의 error 문자열을 그대로 담는다.
    """

    def __init__(self, status_code: int | None, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class PostsApiClient:
    """posts HTTP API(/api/posts, /health) 클라이언트.

    httpx.Client 를 주입받을 수 있어 테스트에서는 FastAPI TestClient 를 그대로 넘긴다.
    주입하지 않으면 설정의 base_url/timeout 으로 직접 만들고 close() 에서 닫는다.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        if client is None:
            config = config or load_client_config()
            # base_url 이 "/" 로 끝나야 "posts" 같은 상대 경로가 /api 아래로 붙는다.
            client = httpx.Client(
                base_url=config.api_base_url.rstrip("/") + "/",
                timeout=config.timeout_seconds,
                headers={"Content-Type": "application/json"},
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "PostsApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- posts ---------------------------------------------------------------------
    def get_posts(self) -> list[Post]:
        body = self._request("GET", "posts")
        return [Post.model_validate(item) for item in body.get("data") or []]

    def get_post(self, post_id: str) -> Post:
        body = self._request("GET", f"posts/{post_id}")
        return Post.model_validate(body["data"])

    def create_post(self, image: str, caption: str) -> Post:
        body = self._request("POST", "posts", json={"image": image, "caption": caption})
        return Post.model_validate(body["data"])

    def update_post(
        self,
        post_id: str,
        image: str | None = None,
        caption: str | None = None,
    ) -> Post:
        payload: dict[str, str] = {}
        if image is not None:
            payload["image"] = image
        if caption is not None:
            payload["caption"] = caption
        body = self._request("PUT", f"posts/{post_id}", json=payload)
        return Post.model_validate(body["data"])

    def delete_post(self, post_id: str) -> Post:
        body = self._request("DELETE", f"posts/{post_id}")
        return Post.model_validate(body["data"])

    def search_posts(self, query: str) -> list[Post]:
        body = self._request("GET", "posts/search", params={"q": query})
        return [Post.model_validate(item) for item in body.get("data") or []]

    # --- misc ----------------------------------------------------------------------
    def check_health(self) -> dict[str, Any]:
        # /health 는 /api 밖에 있으므로 base_url 의 경로를 바꿔서 호출한다.
        url = self._client.base_url.copy_with(path="/health")
        return self._request("GET", str(url))

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            logger.warning("posts api request failed (%s %s): %s", method, url, exc)
            raise ApiError(None, f"request failed: {exc}") from exc

        if resp.is_error:
            raise ApiError(resp.status_code, self._error_message(resp))

        try:
            body = resp.json()
        except ValueError as exc:
            logger.warning("posts api returned non-JSON body (%s %s)", method, url)
            raise ApiError(resp.status_code, "invalid response from server") from exc
        if not isinstance(body, dict):
            raise ApiError(resp.status_code, "invalid response from server")
        return body

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text or f"HTTP {resp.status_code}"
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"HTTP {resp.status_code}"
