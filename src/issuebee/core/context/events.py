"""イベントデータモデル

Webhook イベントを正規化した閉じたバリアント集合 (EventData) と、
プロンプト生成に渡す PreparedContext を定義する。
全モデルはイミュータブルで、バリアントごとに必要なフィールドのみを持つ。
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

SUPPORTED_EVENT_NAMES = (
    "issues",
    "issue_comment",
    "pull_request",
    "pull_request_review",
    "pull_request_review_comment",
)


class _EventDataBase(BaseModel):
    """EventData 基底クラス"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    claude_branch: str | None = Field(default=None, description="アシスタント作業ブランチ")


class _IssueEventBase(_EventDataBase):
    """Issue 対象イベントの共通フィールド

    Issue からは作業ブランチを切る必要があるため base_branch は必須。
    """

    is_pr: Literal[False] = False
    issue_number: str
    base_branch: str

    @property
    def entity_number(self) -> str:
        return self.issue_number


class _PullRequestEventBase(_EventDataBase):
    """PR 対象イベントの共通フィールド"""

    is_pr: Literal[True] = True
    pr_number: str
    base_branch: str | None = None

    @property
    def entity_number(self) -> str:
        return self.pr_number


class IssueOpenedEvent(_IssueEventBase):
    """issues / opened"""

    event_name: Literal["issues"] = "issues"
    event_action: Literal["opened"] = "opened"


class IssueAssignedEvent(_IssueEventBase):
    """issues / assigned"""

    event_name: Literal["issues"] = "issues"
    event_action: Literal["assigned"] = "assigned"
    assignee_trigger: str


class IssueCommentEvent(_IssueEventBase):
    """issue_comment（通常の Issue 上のコメント）"""

    event_name: Literal["issue_comment"] = "issue_comment"
    comment_id: str
    comment_body: str


class PullRequestCommentEvent(_PullRequestEventBase):
    """issue_comment（PR 上の一般コメント）"""

    event_name: Literal["issue_comment"] = "issue_comment"
    comment_id: str
    comment_body: str


class PullRequestReviewEvent(_PullRequestEventBase):
    """pull_request_review"""

    event_name: Literal["pull_request_review"] = "pull_request_review"
    comment_body: str


class PullRequestReviewCommentEvent(_PullRequestEventBase):
    """pull_request_review_comment（インラインレビューコメント）"""

    event_name: Literal["pull_request_review_comment"] = "pull_request_review_comment"
    comment_id: str | None = None
    comment_body: str


class PullRequestEvent(_PullRequestEventBase):
    """pull_request"""

    event_name: Literal["pull_request"] = "pull_request"
    event_action: str | None = None


EventData = Union[
    IssueOpenedEvent,
    IssueAssignedEvent,
    IssueCommentEvent,
    PullRequestCommentEvent,
    PullRequestReviewEvent,
    PullRequestReviewCommentEvent,
    PullRequestEvent,
]

# トリガーコメント（本文）を持つバリアント
COMMENT_EVENTS = (
    IssueCommentEvent,
    PullRequestCommentEvent,
    PullRequestReviewEvent,
    PullRequestReviewCommentEvent,
)


class PreparedContext(BaseModel):
    """プロンプト生成用コンテキスト

    1回の起動につき一度だけ構築され、以降は読み取り専用。
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    repository: str = Field(..., description="owner/repo 形式のリポジトリ名")
    claude_comment_id: str = Field(..., description="トラッキングコメントのID")
    trigger_phrase: str
    trigger_username: str | None = None
    custom_instructions: str | None = None
    allowed_tools: str | None = None
    disallowed_tools: str | None = None
    direct_prompt: str | None = None
    claude_branch: str | None = None
    event_data: EventData
