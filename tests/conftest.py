"""IssueBee テスト設定"""

from __future__ import annotations

from typing import Any

import pytest

from issuebee.core import config as config_module
from issuebee.core.config import ActionInputs, IssueBeeSettings
from issuebee.core.context import ParsedContext, parse_event_context
from issuebee.core.gitea.models import (
    Author,
    ChangedFile,
    ChangedFileWithSHA,
    Comment,
    FetchDataResult,
    IssueData,
    PullRequestData,
    Review,
    ReviewComment,
)

# テストに影響する CI 入力・ツールサーバー用の環境変数
_ENV_VARS = (
    "TRIGGER_PHRASE",
    "ASSIGNEE_TRIGGER",
    "CUSTOM_INSTRUCTIONS",
    "ALLOWED_TOOLS",
    "DISALLOWED_TOOLS",
    "DIRECT_PROMPT",
    "GITHUB_ENV",
    "REPO_OWNER",
    "REPO_NAME",
    "BRANCH_NAME",
    "GITHUB_TOKEN",
    "GITEA_TOKEN",
    "GITEA_API_URL",
    "CLAUDE_COMMENT_ID",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """環境変数と設定シングルトンをテストごとに初期化"""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_settings", IssueBeeSettings())


@pytest.fixture
def inputs() -> ActionInputs:
    """既定の呼び出し入力"""
    return ActionInputs(trigger_phrase="@claude")


# ---------------------------------------------------------------------------
# ペイロード
# ---------------------------------------------------------------------------


def issue_payload(number: int = 42, action: str = "opened", **extra: Any) -> dict[str, Any]:
    return {
        "action": action,
        "issue": {
            "number": number,
            "title": "Login button is broken",
            "body": "@claude please fix the login button",
            "user": {"login": "alice"},
        },
        **extra,
    }


def issue_comment_payload(
    number: int = 5, on_pr: bool = False, body: str = "@claude fix this"
) -> dict[str, Any]:
    issue: dict[str, Any] = {"number": number, "user": {"login": "alice"}}
    if on_pr:
        issue["pull_request"] = {"url": f"https://gitea.example.com/pulls/{number}"}
    return {
        "action": "created",
        "issue": issue,
        "comment": {"id": 1001, "body": body, "user": {"login": "bob"}},
    }


def review_comment_payload(number: int = 7, body: str = "fix this") -> dict[str, Any]:
    return {
        "action": "created",
        "pull_request": {"number": number},
        "comment": {"id": 99, "body": body, "user": {"login": "carol"}},
    }


def review_payload(number: int = 7, body: str | None = "@claude review please") -> dict[str, Any]:
    return {
        "action": "submitted",
        "pull_request": {"number": number},
        "review": {"id": 3, "body": body, "user": {"login": "dave"}},
    }


def pull_request_payload(number: int = 7, action: str = "opened") -> dict[str, Any]:
    return {"action": action, "pull_request": {"number": number, "user": {"login": "erin"}}}


@pytest.fixture
def make_context(inputs: ActionInputs):
    """ParsedContext ファクトリ"""

    def _make(
        event_name: str,
        payload: dict[str, Any],
        run_id: str = "123",
        action_inputs: ActionInputs | None = None,
    ) -> ParsedContext:
        return parse_event_context(
            event_name,
            payload,
            "acme/widgets",
            run_id=run_id,
            inputs=action_inputs or inputs,
        )

    return _make


# ---------------------------------------------------------------------------
# 事前取得データ
# ---------------------------------------------------------------------------


@pytest.fixture
def issue_fetch_data() -> FetchDataResult:
    """Issue の事前取得データ"""
    return FetchDataResult(
        context_data=IssueData(
            title="Login button is broken",
            body="Clicking login does nothing.",
            author=Author(login="alice"),
            state="open",
            created_at="2024-05-01T10:00:00Z",
        ),
        comments=[
            Comment(
                id="1",
                body="@claude please fix the login button",
                author=Author(login="alice"),
                created_at="2024-05-01T10:05:00Z",
            )
        ],
    )


@pytest.fixture
def pr_fetch_data() -> FetchDataResult:
    """PR の事前取得データ"""
    changed_file = ChangedFile(path="src/app.py", additions=3, deletions=1, change_type="MODIFIED")
    return FetchDataResult(
        context_data=PullRequestData(
            title="Add login handler",
            body="Implements the login handler.",
            author=Author(login="erin"),
            base_ref_name="main",
            head_ref_name="feature/login",
            head_ref_oid="abc123",
            state="open",
            created_at="2024-05-02T09:00:00Z",
            additions=3,
            deletions=1,
            total_commits=2,
            files=[changed_file],
        ),
        comments=[],
        changed_files=[changed_file],
        changed_files_with_sha=[ChangedFileWithSHA(**changed_file.model_dump(), sha="deadbeef")],
        review_data=[
            Review(
                id="3",
                author=Author(login="dave"),
                body="Looks mostly fine",
                state="COMMENTED",
                submitted_at="2024-05-02T11:00:00Z",
                comments=[
                    ReviewComment(
                        id="99",
                        body="fix this",
                        author=Author(login="carol"),
                        path="src/app.py",
                        line=12,
                        created_at="2024-05-02T11:00:00Z",
                    )
                ],
            )
        ],
    )
