"""Gitea REST API クライアント

httpx ベースの非同期クライアント。
Gitea / GitHub 互換の REST API をトークン認証で呼び出す。
リトライとタイムアウトの独自設定は行わず、失敗はそのまま呼び出し元へ送出する。
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class GiteaClientError(Exception):
    """Gitea API 呼び出しに関するエラー"""


class GiteaNetworkError(GiteaClientError):
    """通信レベルの失敗（接続拒否、名前解決失敗など）"""


class GiteaAPIError(GiteaClientError):
    """API が 2xx 以外のステータスを返した"""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Gitea API request failed: {status_code} {body}")


class GiteaClient:
    """Gitea REST API クライアント

    全操作は非同期で、リクエストごとに httpx.AsyncClient を生成する。

    Args:
        api_url: API ベースURL（例: https://gitea.example.com/api/v1）
        owner: リポジトリオーナー
        repo: リポジトリ名
        token: アクセストークン
        transport: httpx トランスポート（テスト用の差し替え）
    """

    def __init__(
        self,
        api_url: str,
        owner: str,
        repo: str,
        token: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not token:
            raise GiteaClientError("Gitea token is required")
        self._base_url = api_url.rstrip("/")
        self._owner = owner
        self._repo = repo
        self._token = token
        self._transport = transport

    # ------------------------------------------------------------------
    # プロパティ
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def repo(self) -> str:
        return self._repo

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def repo_path(self) -> str:
        """/repos/{owner}/{repo}"""
        return f"/repos/{self._owner}/{self._repo}"

    # ------------------------------------------------------------------
    # Issue / PR 取得
    # ------------------------------------------------------------------

    async def get_issue(self, issue_number: int) -> dict[str, Any]:
        return await self.request("GET", f"{self.repo_path}/issues/{issue_number}")

    async def get_pull_request(self, pr_number: int) -> dict[str, Any]:
        return await self.request("GET", f"{self.repo_path}/pulls/{pr_number}")

    async def list_issue_comments(self, issue_number: int) -> list[dict[str, Any]]:
        return await self.request("GET", f"{self.repo_path}/issues/{issue_number}/comments") or []

    async def list_pull_request_files(self, pr_number: int) -> list[dict[str, Any]]:
        return await self.request("GET", f"{self.repo_path}/pulls/{pr_number}/files") or []

    async def list_pull_request_reviews(self, pr_number: int) -> list[dict[str, Any]]:
        return await self.request("GET", f"{self.repo_path}/pulls/{pr_number}/reviews") or []

    async def list_review_comments(self, pr_number: int, review_id: int) -> list[dict[str, Any]]:
        return (
            await self.request(
                "GET", f"{self.repo_path}/pulls/{pr_number}/reviews/{review_id}/comments"
            )
            or []
        )

    # ------------------------------------------------------------------
    # コメント更新
    # ------------------------------------------------------------------

    async def update_issue_comment(self, comment_id: int, body: str) -> dict[str, Any]:
        """Issue / PR の一般コメントを更新する

        Raises:
            GiteaClientError: API 呼び出しに失敗した場合
        """
        return await self.request(
            "PATCH", f"{self.repo_path}/issues/comments/{comment_id}", {"body": body}
        )

    async def update_pull_request_comment(self, comment_id: int, body: str) -> dict[str, Any]:
        """PR インラインレビューコメントを更新する

        Raises:
            GiteaClientError: API 呼び出しに失敗した場合
        """
        return await self.request(
            "PATCH", f"{self.repo_path}/pulls/comments/{comment_id}", {"body": body}
        )

    # ------------------------------------------------------------------
    # 汎用リクエスト
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        """共通リクエストヘッダー"""
        return {
            "Authorization": f"token {self._token}",
            "Accept": "application/json",
        }

    async def request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """認証付きリクエストを送信し、JSON レスポンスを返す

        Args:
            method: HTTP メソッド
            endpoint: ベースURLからの相対パス（/repos/... ）
            payload: JSON ボディ
            params: クエリパラメータ

        Returns:
            デコードされた JSON（空レスポンスは None）

        Raises:
            GiteaNetworkError: 通信に失敗した場合
            GiteaAPIError: 2xx 以外のステータスの場合
            GiteaClientError: レスポンスが JSON でない場合
        """
        url = f"{self._base_url}{endpoint}"
        logger.debug("Making %s request to: %s", method, url)

        try:
            async with httpx.AsyncClient(
                headers=self._headers(), transport=self._transport
            ) as client:
                response = await client.request(method, url, json=payload, params=params)
        except httpx.HTTPError as exc:
            raise GiteaNetworkError(f"{method} {url} failed: {exc}") from exc

        text = response.text
        logger.debug("Response status: %s", response.status_code)
        logger.debug("Response: %s...", text[:500])

        if response.is_error:
            raise GiteaAPIError(response.status_code, text)

        if not text:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise GiteaClientError(f"Invalid JSON response from {method} {url}: {exc}") from exc
