"""アシスタントに渡すツール許可/禁止リスト

許可リストは固定の基本セット + イベント種別に応じたコメント更新ツール1つ +
ユーザー指定ツール。禁止リストは固定セットから許可済みのものを除き、
ユーザー指定の禁止ツールを後ろに連結する。
"""

from __future__ import annotations

from ..core.context.events import EventData

GITEA_TOOL_PREFIX = "mcp__gitea__"
LOCAL_GIT_TOOL_PREFIX = "mcp__local_git_ops__"

UPDATE_ISSUE_COMMENT_TOOL = f"{GITEA_TOOL_PREFIX}update_issue_comment"
UPDATE_PR_COMMENT_TOOL = f"{GITEA_TOOL_PREFIX}update_pull_request_comment"

BASE_ALLOWED_TOOLS = [
    "Edit",
    "Glob",
    "Grep",
    "LS",
    "Read",
    "Write",
    f"{LOCAL_GIT_TOOL_PREFIX}commit_files",
    f"{LOCAL_GIT_TOOL_PREFIX}delete_files",
    f"{LOCAL_GIT_TOOL_PREFIX}push_branch",
    f"{LOCAL_GIT_TOOL_PREFIX}create_pull_request",
    f"{LOCAL_GIT_TOOL_PREFIX}checkout_branch",
    f"{LOCAL_GIT_TOOL_PREFIX}create_branch",
    f"{LOCAL_GIT_TOOL_PREFIX}git_status",
    f"{GITEA_TOOL_PREFIX}get_issue",
    f"{GITEA_TOOL_PREFIX}get_issue_comments",
    f"{GITEA_TOOL_PREFIX}create_issue_comment",
    f"{GITEA_TOOL_PREFIX}delete_issue_comment",
    f"{GITEA_TOOL_PREFIX}get_comment",
    f"{GITEA_TOOL_PREFIX}list_issues",
    f"{GITEA_TOOL_PREFIX}create_issue",
    f"{GITEA_TOOL_PREFIX}update_issue",
    f"{GITEA_TOOL_PREFIX}get_repository",
    f"{GITEA_TOOL_PREFIX}list_pull_requests",
    f"{GITEA_TOOL_PREFIX}get_pull_request",
    f"{GITEA_TOOL_PREFIX}get_pull_request_files",
    f"{GITEA_TOOL_PREFIX}create_pull_request",
    f"{GITEA_TOOL_PREFIX}update_pull_request",
    f"{GITEA_TOOL_PREFIX}merge_pull_request",
    f"{GITEA_TOOL_PREFIX}update_pull_request_branch",
    f"{GITEA_TOOL_PREFIX}list_branches",
    f"{GITEA_TOOL_PREFIX}get_branch",
    f"{GITEA_TOOL_PREFIX}create_branch",
    f"{GITEA_TOOL_PREFIX}get_file_contents",
    f"{GITEA_TOOL_PREFIX}delete_file",
]
DISALLOWED_TOOLS = ["WebSearch", "WebFetch"]


def comment_update_tool(event_data: EventData) -> str:
    """イベント種別に対応するコメント更新ツール名

    インラインレビューコメントのみ PR コメント更新ツールを使う。
    """
    if event_data.event_name == "pull_request_review_comment":
        return UPDATE_PR_COMMENT_TOOL
    return UPDATE_ISSUE_COMMENT_TOOL


def build_allowed_tools_string(
    event_data: EventData,
    custom_allowed_tools: str | None = None,
) -> str:
    tools = [*BASE_ALLOWED_TOOLS, comment_update_tool(event_data)]
    allowed = ",".join(tools)
    if custom_allowed_tools:
        allowed = f"{allowed},{custom_allowed_tools}"
    return allowed


def build_disallowed_tools_string(
    custom_disallowed_tools: str | None = None,
    allowed_tools: str | None = None,
) -> str:
    """禁止ツール文字列を構築する

    固定の禁止セットの後ろにユーザー指定の禁止ツールを連結し、
    allowed_tools に含まれるツール（前後空白を除いて比較）は除外する。
    許可と禁止が衝突した場合は許可を優先する。
    """
    disallowed = list(DISALLOWED_TOOLS)
    if custom_disallowed_tools:
        disallowed.extend(
            tool.strip() for tool in custom_disallowed_tools.split(",") if tool.strip()
        )

    if allowed_tools:
        explicitly_allowed = {tool.strip() for tool in allowed_tools.split(",")}
        disallowed = [tool for tool in disallowed if tool not in explicitly_allowed]

    return ",".join(disallowed)
