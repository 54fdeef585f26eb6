"""イベントコンテキスト正規化

ParsedContext（生のペイロード）を、イベント種別ごとに必須フィールドを検証した
EventData バリアントへ変換し、PreparedContext を構築する。
必須フィールドの欠落は InvalidEventError とし、既定値で補うことはしない。
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import DEFAULT_TRIGGER_PHRASE
from .events import (
    SUPPORTED_EVENT_NAMES,
    EventData,
    IssueAssignedEvent,
    IssueCommentEvent,
    IssueOpenedEvent,
    PreparedContext,
    PullRequestCommentEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
)
from .parser import ParsedContext

logger = logging.getLogger(__name__)


class InvalidEventError(ValueError):
    """イベント種別に対して必須フィールドが欠けている、または未サポートのイベント"""


def _dig(payload: dict[str, Any], *keys: str) -> Any:
    """ネストした dict を安全に辿る"""
    node: Any = payload
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _extract_trigger(context: ParsedContext) -> tuple[str | None, str | None, str | None]:
    """トリガーユーザー名・コメントID・コメント本文を抽出する

    opened/assigned の Issue にはトリガーコメントがないため、Issue 作成者を使う。
    """
    payload = context.payload
    event_name = context.event_name

    if event_name in ("issue_comment", "pull_request_review_comment"):
        return (
            _dig(payload, "comment", "user", "login"),
            _as_str(_dig(payload, "comment", "id")),
            _dig(payload, "comment", "body"),
        )
    if event_name == "pull_request_review":
        return (
            _dig(payload, "review", "user", "login"),
            None,
            _dig(payload, "review", "body") or "",
        )
    if event_name == "issues":
        return _dig(payload, "issue", "user", "login"), None, None
    return None, None, None


def _build_event_data(
    context: ParsedContext,
    comment_id: str | None,
    comment_body: str | None,
    base_branch: str | None,
    claude_branch: str | None,
) -> EventData:
    """イベント種別ごとの EventData を構築する"""
    event_name = context.event_name
    event_action = context.event_action
    is_pr = context.is_pr
    entity = _as_str(context.entity_number)
    pr_number = entity if is_pr else None
    issue_number = entity if not is_pr else None

    if event_name not in SUPPORTED_EVENT_NAMES:
        raise InvalidEventError(f"Unsupported event type: {event_name}")

    if event_name == "pull_request_review_comment":
        if not pr_number:
            raise InvalidEventError("PR_NUMBER is required for pull_request_review_comment event")
        if not is_pr:
            raise InvalidEventError("IS_PR must be true for pull_request_review_comment event")
        if not comment_body:
            raise InvalidEventError(
                "COMMENT_BODY is required for pull_request_review_comment event"
            )
        return PullRequestReviewCommentEvent(
            pr_number=pr_number,
            comment_id=comment_id,
            comment_body=comment_body,
            claude_branch=claude_branch,
            base_branch=base_branch,
        )

    if event_name == "pull_request_review":
        if not pr_number:
            raise InvalidEventError("PR_NUMBER is required for pull_request_review event")
        if not is_pr:
            raise InvalidEventError("IS_PR must be true for pull_request_review event")
        if not comment_body:
            raise InvalidEventError("COMMENT_BODY is required for pull_request_review event")
        return PullRequestReviewEvent(
            pr_number=pr_number,
            comment_body=comment_body,
            claude_branch=claude_branch,
            base_branch=base_branch,
        )

    if event_name == "issue_comment":
        if not comment_id:
            raise InvalidEventError("COMMENT_ID is required for issue_comment event")
        if not comment_body:
            raise InvalidEventError("COMMENT_BODY is required for issue_comment event")
        if is_pr:
            if not pr_number:
                raise InvalidEventError("PR_NUMBER is required for issue_comment event for PRs")
            return PullRequestCommentEvent(
                pr_number=pr_number,
                comment_id=comment_id,
                comment_body=comment_body,
                claude_branch=claude_branch,
                base_branch=base_branch,
            )
        # Issue 上のコメントは作業ブランチの起点が必要
        if not base_branch:
            raise InvalidEventError("BASE_BRANCH is required for issue_comment event")
        if not issue_number:
            raise InvalidEventError("ISSUE_NUMBER is required for issue_comment event for issues")
        return IssueCommentEvent(
            issue_number=issue_number,
            comment_id=comment_id,
            comment_body=comment_body,
            base_branch=base_branch,
            claude_branch=claude_branch,
        )

    if event_name == "issues":
        if not event_action:
            raise InvalidEventError("GITHUB_EVENT_ACTION is required for issues event")
        if not issue_number:
            raise InvalidEventError("ISSUE_NUMBER is required for issues event")
        if is_pr:
            raise InvalidEventError("IS_PR must be false for issues event")
        if not base_branch:
            raise InvalidEventError("BASE_BRANCH is required for issues event")

        if event_action == "assigned":
            assignee_trigger = context.inputs.assignee_trigger
            if not assignee_trigger:
                raise InvalidEventError("ASSIGNEE_TRIGGER is required for issue assigned event")
            return IssueAssignedEvent(
                issue_number=issue_number,
                base_branch=base_branch,
                assignee_trigger=assignee_trigger,
                claude_branch=claude_branch,
            )
        if event_action == "opened":
            return IssueOpenedEvent(
                issue_number=issue_number,
                base_branch=base_branch,
                claude_branch=claude_branch,
            )
        raise InvalidEventError(f"Unsupported issue action: {event_action}")

    # pull_request
    if not pr_number:
        raise InvalidEventError("PR_NUMBER is required for pull_request event")
    if not is_pr:
        raise InvalidEventError("IS_PR must be true for pull_request event")
    return PullRequestEvent(
        pr_number=pr_number,
        event_action=event_action,
        claude_branch=claude_branch,
        base_branch=base_branch,
    )


def prepare_context(
    context: ParsedContext,
    claude_comment_id: str,
    base_branch: str | None = None,
    claude_branch: str | None = None,
) -> PreparedContext:
    """ParsedContext から PreparedContext を構築する

    Args:
        context: 生のイベントコンテキスト
        claude_comment_id: トラッキングコメントのID
        base_branch: 作業ブランチの起点となるブランチ
        claude_branch: 既に割り当てられたアシスタント作業ブランチ

    Returns:
        検証済みの PreparedContext

    Raises:
        InvalidEventError: イベント種別に必要なフィールドが欠けている場合
    """
    inputs = context.inputs
    trigger_username, comment_id, comment_body = _extract_trigger(context)

    event_data = _build_event_data(
        context,
        comment_id=comment_id,
        comment_body=comment_body,
        base_branch=base_branch or None,
        claude_branch=claude_branch or None,
    )
    logger.debug("Prepared %s event data: %s", context.event_name, type(event_data).__name__)

    return PreparedContext(
        repository=context.repository.full_name,
        claude_comment_id=claude_comment_id,
        trigger_phrase=inputs.trigger_phrase or DEFAULT_TRIGGER_PHRASE,
        trigger_username=trigger_username or None,
        custom_instructions=inputs.custom_instructions or None,
        allowed_tools=inputs.allowed_tools or None,
        disallowed_tools=inputs.disallowed_tools or None,
        direct_prompt=inputs.direct_prompt or None,
        claude_branch=claude_branch or None,
        event_data=event_data,
    )
