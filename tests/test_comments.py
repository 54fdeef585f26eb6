"""トラッキングコメントのテスト"""

from __future__ import annotations

import json

import httpx
import pytest
from conftest import issue_comment_payload, review_comment_payload

from issuebee.core.comments import (
    SPINNER_HTML,
    create_branch_link,
    create_comment_body,
    create_job_run_link,
    update_tracking_comment,
)
from issuebee.core.gitea import GiteaAPIError, GiteaClient

SERVER_URL = "https://gitea.example.com/"


class RecordingTransport(httpx.MockTransport):
    """送信されたリクエストを記録するトランスポート"""

    def __init__(self, status_code: int = 200) -> None:
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(status_code, json={"id": 1})

        super().__init__(handler)


def _client(transport: httpx.AsyncBaseTransport) -> GiteaClient:
    return GiteaClient(
        "https://gitea.example.com/api/v1", "acme", "widgets", "secret", transport=transport
    )


class TestLinks:
    """リンクと本文の生成"""

    def test_job_run_link(self) -> None:
        assert create_job_run_link("acme", "widgets", "123", SERVER_URL) == (
            "[View job run](https://gitea.example.com/acme/widgets/actions/runs/123)"
        )

    def test_branch_link(self) -> None:
        assert create_branch_link("acme", "widgets", "claude/issue-5-fix", SERVER_URL) == (
            "\n[View branch](https://gitea.example.com/acme/widgets/src/branch/claude/issue-5-fix)"
        )

    def test_comment_body(self) -> None:
        """作業中表示・スピナー・リンクを含む"""
        body = create_comment_body("[View job run](x)", "\n[View branch](y)")

        assert body.startswith(f"Claude Code is working… {SPINNER_HTML}\n\n")
        assert "I'll analyze this and get back to you." in body
        assert body.endswith("[View job run](x)\n[View branch](y)")


class TestUpdateTrackingComment:
    """update_tracking_comment"""

    @pytest.mark.asyncio
    async def test_issue_gets_branch_link(self, make_context) -> None:
        """Issue ではブランチリンクを付与して issues/comments を更新する"""
        # Arrange
        transport = RecordingTransport()
        context = make_context("issue_comment", issue_comment_payload(5))

        # Act
        await update_tracking_comment(
            _client(transport), context, 555, "claude/issue-5-fix", SERVER_URL
        )

        # Assert
        request = transport.requests[0]
        assert request.method == "PATCH"
        assert request.url.path == "/api/v1/repos/acme/widgets/issues/comments/555"
        body = json.loads(request.content)["body"]
        assert "[View job run](https://gitea.example.com/acme/widgets/actions/runs/123)" in body
        assert "[View branch](https://gitea.example.com/acme/widgets/src/branch/claude/issue-5-fix)" in body

    @pytest.mark.asyncio
    async def test_pr_comment_has_no_branch_link(self, make_context) -> None:
        """PR 上のコメントではブランチリンクを付与しない"""
        # Arrange
        transport = RecordingTransport()
        context = make_context("issue_comment", issue_comment_payload(6, on_pr=True))

        # Act
        await update_tracking_comment(_client(transport), context, 555, "feature/x", SERVER_URL)

        # Assert
        body = json.loads(transport.requests[0].content)["body"]
        assert "[View branch]" not in body

    @pytest.mark.asyncio
    async def test_review_comment_uses_pulls_endpoint(self, make_context) -> None:
        """インラインレビューコメントは pulls/comments を更新する"""
        # Arrange
        transport = RecordingTransport()
        context = make_context("pull_request_review_comment", review_comment_payload(7))

        # Act
        await update_tracking_comment(_client(transport), context, 555, None, SERVER_URL)

        # Assert
        assert transport.requests[0].url.path == "/api/v1/repos/acme/widgets/pulls/comments/555"

    @pytest.mark.asyncio
    async def test_error_is_raised(self, make_context) -> None:
        """更新失敗は呼び出し元へ送出する"""
        # Arrange
        transport = RecordingTransport(status_code=500)
        context = make_context("issue_comment", issue_comment_payload(5))

        # Act & Assert
        with pytest.raises(GiteaAPIError):
            await update_tracking_comment(_client(transport), context, 555, None, SERVER_URL)
        assert len(transport.requests) == 1
