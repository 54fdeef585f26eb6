"""ツール許可/禁止リストのテスト"""

from __future__ import annotations

import pytest

from issuebee.core.context import (
    IssueCommentEvent,
    IssueOpenedEvent,
    PullRequestCommentEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
)
from issuebee.prompts.tools import (
    BASE_ALLOWED_TOOLS,
    UPDATE_ISSUE_COMMENT_TOOL,
    UPDATE_PR_COMMENT_TOOL,
    build_allowed_tools_string,
    build_disallowed_tools_string,
)

REVIEW_COMMENT_EVENT = PullRequestReviewCommentEvent(
    pr_number="7", comment_id="99", comment_body="fix this"
)

OTHER_EVENTS = [
    IssueOpenedEvent(issue_number="42", base_branch="main"),
    IssueCommentEvent(issue_number="5", base_branch="main", comment_id="1", comment_body="hi"),
    PullRequestCommentEvent(pr_number="6", comment_id="1", comment_body="hi"),
    PullRequestReviewEvent(pr_number="7", comment_body="review"),
    PullRequestEvent(pr_number="7", event_action="opened"),
]


class TestBuildAllowedToolsString:
    """build_allowed_tools_string"""

    def test_review_comment_gets_pr_comment_tool(self) -> None:
        """インラインレビューコメントは PR コメント更新ツールのみ"""
        # Act
        tools = build_allowed_tools_string(REVIEW_COMMENT_EVENT).split(",")

        # Assert
        assert UPDATE_PR_COMMENT_TOOL in tools
        assert UPDATE_ISSUE_COMMENT_TOOL not in tools

    @pytest.mark.parametrize("event", OTHER_EVENTS, ids=lambda e: type(e).__name__)
    def test_other_events_get_issue_comment_tool(self, event) -> None:
        """それ以外のイベントは Issue コメント更新ツールのみ"""
        # Act
        tools = build_allowed_tools_string(event).split(",")

        # Assert
        assert UPDATE_ISSUE_COMMENT_TOOL in tools
        assert UPDATE_PR_COMMENT_TOOL not in tools

    def test_base_tools_come_first(self) -> None:
        """基本セット → コメント更新ツールの順"""
        # Act
        tools = build_allowed_tools_string(OTHER_EVENTS[0]).split(",")

        # Assert
        assert tools == [*BASE_ALLOWED_TOOLS, UPDATE_ISSUE_COMMENT_TOOL]

    def test_custom_tools_appended_verbatim(self) -> None:
        """ユーザー指定ツールは末尾にそのまま連結する"""
        # Act
        allowed = build_allowed_tools_string(OTHER_EVENTS[0], "Bash(npm test), WebSearch")

        # Assert
        assert allowed.endswith(f"{UPDATE_ISSUE_COMMENT_TOOL},Bash(npm test), WebSearch")


class TestBuildDisallowedToolsString:
    """build_disallowed_tools_string"""

    def test_defaults(self) -> None:
        """既定は WebSearch と WebFetch"""
        assert build_disallowed_tools_string() == "WebSearch,WebFetch"

    def test_allowed_tools_are_removed(self) -> None:
        """許可されたツールは禁止リストから除く（前後空白は無視）"""
        assert build_disallowed_tools_string(None, "Edit, WebSearch ") == "WebFetch"

    def test_custom_disallowed_appended(self) -> None:
        """ユーザー指定の禁止ツールは後ろに連結する"""
        assert build_disallowed_tools_string("Bash,Write") == "WebSearch,WebFetch,Bash,Write"

    def test_never_contains_allowed_tool(self) -> None:
        """解決済みの許可リストに含まれるツールは禁止リストに現れない"""
        # Arrange
        allowed = build_allowed_tools_string(OTHER_EVENTS[0], "WebFetch,Bash")

        # Act
        disallowed = build_disallowed_tools_string("Bash,Edit,Task", allowed)

        # Assert
        allowed_set = {tool.strip() for tool in allowed.split(",")}
        assert disallowed == "WebSearch,Task"
        assert not allowed_set & set(disallowed.split(","))
