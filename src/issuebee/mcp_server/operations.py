"""Gitea ツール操作テーブル

MCP で公開する REST プロキシ操作を GiteaOperation 記述子として一覧で定義する。
各操作は引数モデル（pydantic）・HTTP メソッド・パステンプレート・
レスポンス整形を持ち、ハンドラーはこのテーブルだけを見て処理する。
"""

from __future__ import annotations

import base64
import binascii
import json
import string
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from mcp.types import Tool
from pydantic import BaseModel, ConfigDict, Field


def to_json(value: Any) -> str:
    """レスポンスを整形済み JSON テキストにする"""
    return json.dumps(value, indent=2, ensure_ascii=False)


class ToolArguments(BaseModel):
    """ツール引数の基底モデル（未知の引数は拒否）"""

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# 引数モデル
# ---------------------------------------------------------------------------


class NoArguments(ToolArguments):
    pass


class IssueNumberArgs(ToolArguments):
    issue_number: int = Field(..., description="The issue number")


class CreateIssueCommentArgs(ToolArguments):
    issue_number: int = Field(..., description="The issue number to comment on")
    body: str = Field(..., description="The comment body")


class CommentIdArgs(ToolArguments):
    comment_id: int = Field(..., description="The comment ID")


class UpdateCommentArgs(ToolArguments):
    comment_id: int = Field(..., description="The comment ID to update")
    body: str = Field(..., description="The new comment body")


class UpdateClaudeCommentArgs(ToolArguments):
    body: str = Field(..., description="The updated comment content")


class ListIssuesArgs(ToolArguments):
    state: Literal["open", "closed", "all"] | None = Field(
        default=None, description="Filter by state (open, closed, all)"
    )
    labels: str | None = Field(default=None, description="Comma-separated list of label names")
    page: int | None = Field(default=None, description="Page number")
    limit: int | None = Field(default=None, description="Number of items per page")


class CreateIssueArgs(ToolArguments):
    title: str = Field(..., description="The issue title")
    body: str | None = Field(default=None, description="The issue body")
    labels: list[str] | None = Field(default=None, description="Array of label names to add")
    assignees: list[str] | None = Field(default=None, description="Array of usernames to assign")


class UpdateIssueArgs(ToolArguments):
    issue_number: int = Field(..., description="The issue number to update")
    title: str | None = Field(default=None, description="New title")
    body: str | None = Field(default=None, description="New body")
    state: Literal["open", "closed"] | None = Field(default=None, description="New state")
    labels: list[str] | None = Field(default=None, description="New labels (replaces existing)")


class ListPullRequestsArgs(ToolArguments):
    state: Literal["open", "closed", "all"] | None = Field(
        default=None, description="Filter by state"
    )
    page: int | None = Field(default=None, description="Page number")
    limit: int | None = Field(default=None, description="Number of items per page")


class PullRequestNumberArgs(ToolArguments):
    pr_number: int = Field(..., description="The pull request number")


class CreatePullRequestArgs(ToolArguments):
    title: str = Field(..., description="The pull request title")
    body: str | None = Field(default=None, description="The pull request body")
    head: str = Field(..., description="The branch containing changes")
    base: str = Field(..., description="The branch to merge into")


class UpdatePullRequestArgs(ToolArguments):
    pr_number: int = Field(..., description="The pull request number")
    title: str | None = Field(default=None, description="New title")
    body: str | None = Field(default=None, description="New body")
    state: Literal["open", "closed"] | None = Field(default=None, description="New state")


class MergePullRequestArgs(ToolArguments):
    pr_number: int = Field(..., description="The pull request number to merge")
    merge_style: Literal["merge", "rebase", "squash"] | None = Field(
        default=None, description="Merge method"
    )
    merge_commit_message: str | None = Field(
        default=None, description="Custom merge commit message"
    )


class UpdatePullRequestBranchArgs(ToolArguments):
    pr_number: int = Field(..., description="The pull request number")
    style: Literal["merge", "rebase"] | None = Field(
        default=None, description="How to update the branch (merge or rebase)"
    )


class BranchArgs(ToolArguments):
    branch: str = Field(..., description="The branch name")


class CreateBranchArgs(ToolArguments):
    new_branch_name: str = Field(..., description="Name of the new branch to create")
    old_branch_name: str = Field(..., description="Name of the source branch")


class GetFileContentsArgs(ToolArguments):
    path: str = Field(..., description="The file path to fetch")
    ref: str | None = Field(default=None, description="The branch or commit ref (optional)")


class DeleteFileArgs(ToolArguments):
    path: str = Field(..., description="The file path to delete")
    message: str = Field(..., description="Commit message")
    sha: str = Field(..., description="SHA of the file being deleted")
    branch: str | None = Field(default=None, description="Branch to delete from")


# ---------------------------------------------------------------------------
# レスポンス整形
# ---------------------------------------------------------------------------


def render_file_contents(args: GetFileContentsArgs, result: Any) -> str:
    """base64 エンコードされたファイル内容はデコードして返す"""
    if isinstance(result, dict) and result.get("content") and result.get("encoding") == "base64":
        try:
            decoded = base64.b64decode(result["content"]).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError):
            return to_json(result)
        return f"File: {args.path}\n\n{decoded}"
    return to_json(result)


def render_deleted_comment(args: CommentIdArgs, result: Any) -> str:
    return f"Comment {args.comment_id} deleted successfully"


def merge_body(args: MergePullRequestArgs) -> dict[str, Any]:
    body: dict[str, Any] = {"Do": args.merge_style or "merge"}
    if args.merge_commit_message:
        body["MergeCommitMessage"] = args.merge_commit_message
    return body


# ---------------------------------------------------------------------------
# 操作記述子
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GiteaOperation:
    """REST プロキシ操作の記述子

    Attributes:
        name: ツール名
        description: ツールの説明
        arguments: 引数モデル
        method: HTTP メソッド
        path: /repos/{owner}/{repo} からの相対パステンプレート
        action: エラーメッセージ用の動作名（"getting issue" など）
        success: 成功時の接頭辞。None の場合は JSON のみを返す
        query: クエリパラメータとして送る引数名
        body: リクエストボディの構築関数。None の場合は
            パス・クエリ以外の引数（None を除く）をボディにする
        render: レスポンス整形関数
        targets_claude_comment: comment_id を起動設定のトラッキングコメントIDで埋める
        strict: 失敗時にエンベロープへ isError を立てる
    """

    name: str
    description: str
    arguments: type[ToolArguments]
    method: str
    path: str
    action: str
    success: str | None = None
    query: tuple[str, ...] = ()
    body: Callable[[Any], dict[str, Any] | None] | None = None
    render: Callable[[Any, Any], str] | None = None
    targets_claude_comment: bool = False
    strict: bool = False

    @property
    def path_fields(self) -> tuple[str, ...]:
        """パステンプレート内のプレースホルダー名"""
        return tuple(
            field for _, field, _, _ in string.Formatter().parse(self.path) if field is not None
        )

    def build_body(self, args: ToolArguments) -> dict[str, Any] | None:
        if self.body is not None:
            return self.body(args)
        if self.method == "GET":
            return None
        payload = args.model_dump(
            exclude_none=True, exclude={*self.path_fields, *self.query}
        )
        return payload or None

    def build_params(self, args: ToolArguments) -> dict[str, Any] | None:
        values = args.model_dump(include=set(self.query), exclude_none=True)
        return values or None

    def render_result(self, args: ToolArguments, result: Any) -> str:
        if self.render is not None:
            return self.render(args, result)
        if self.success is None:
            return to_json(result)
        return f"{self.success}: {to_json(result)}"

    def to_tool(self) -> Tool:
        schema = self.arguments.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return Tool(name=self.name, description=self.description, inputSchema=schema)


OPERATIONS: tuple[GiteaOperation, ...] = (
    # Issue
    GiteaOperation(
        name="get_issue",
        description="Get details of a specific issue",
        arguments=IssueNumberArgs,
        method="GET",
        path="/issues/{issue_number}",
        action="getting issue",
    ),
    GiteaOperation(
        name="get_issue_comments",
        description="Get comments for a specific issue",
        arguments=IssueNumberArgs,
        method="GET",
        path="/issues/{issue_number}/comments",
        action="getting issue comments",
    ),
    GiteaOperation(
        name="list_issues",
        description="List issues in the repository",
        arguments=ListIssuesArgs,
        method="GET",
        path="/issues",
        action="listing issues",
        query=("state", "labels", "page", "limit"),
    ),
    GiteaOperation(
        name="create_issue",
        description="Create a new issue in the repository",
        arguments=CreateIssueArgs,
        method="POST",
        path="/issues",
        action="creating issue",
        success="Issue created successfully",
    ),
    GiteaOperation(
        name="update_issue",
        description="Update an existing issue",
        arguments=UpdateIssueArgs,
        method="PATCH",
        path="/issues/{issue_number}",
        action="updating issue",
        success="Issue updated successfully",
    ),
    # コメント
    GiteaOperation(
        name="create_issue_comment",
        description="Create a comment on an issue or pull request",
        arguments=CreateIssueCommentArgs,
        method="POST",
        path="/issues/{issue_number}/comments",
        action="creating issue comment",
        success="Comment created successfully",
    ),
    GiteaOperation(
        name="get_comment",
        description="Get a specific issue or pull request comment",
        arguments=CommentIdArgs,
        method="GET",
        path="/issues/comments/{comment_id}",
        action="getting comment",
    ),
    GiteaOperation(
        name="update_issue_comment",
        description="Update an existing issue or pull request comment",
        arguments=UpdateCommentArgs,
        method="PATCH",
        path="/issues/comments/{comment_id}",
        action="updating issue comment",
        success="Comment updated successfully",
    ),
    GiteaOperation(
        name="delete_issue_comment",
        description="Delete an issue or pull request comment",
        arguments=CommentIdArgs,
        method="DELETE",
        path="/issues/comments/{comment_id}",
        action="deleting issue comment",
        render=render_deleted_comment,
    ),
    GiteaOperation(
        name="update_claude_comment",
        description="Update the Claude comment with progress and results (automatically handles both issue and PR comments)",
        arguments=UpdateClaudeCommentArgs,
        method="PATCH",
        path="/issues/comments/{comment_id}",
        action="updating Claude comment",
        success="Claude comment updated successfully",
        targets_claude_comment=True,
        strict=True,
    ),
    # リポジトリ
    GiteaOperation(
        name="get_repository",
        description="Get repository information",
        arguments=NoArguments,
        method="GET",
        path="",
        action="getting repository",
    ),
    # プルリクエスト
    GiteaOperation(
        name="list_pull_requests",
        description="List pull requests in the repository",
        arguments=ListPullRequestsArgs,
        method="GET",
        path="/pulls",
        action="listing pull requests",
        query=("state", "page", "limit"),
    ),
    GiteaOperation(
        name="get_pull_request",
        description="Get details of a specific pull request",
        arguments=PullRequestNumberArgs,
        method="GET",
        path="/pulls/{pr_number}",
        action="getting pull request",
    ),
    GiteaOperation(
        name="get_pull_request_files",
        description="Get files changed in a pull request",
        arguments=PullRequestNumberArgs,
        method="GET",
        path="/pulls/{pr_number}/files",
        action="getting pull request files",
    ),
    GiteaOperation(
        name="create_pull_request",
        description="Create a new pull request",
        arguments=CreatePullRequestArgs,
        method="POST",
        path="/pulls",
        action="creating pull request",
        success="Pull request created successfully",
    ),
    GiteaOperation(
        name="update_pull_request",
        description="Update an existing pull request",
        arguments=UpdatePullRequestArgs,
        method="PATCH",
        path="/pulls/{pr_number}",
        action="updating pull request",
        success="Pull request updated successfully",
    ),
    GiteaOperation(
        name="update_pull_request_comment",
        description="Update a pull request review comment",
        arguments=UpdateCommentArgs,
        method="PATCH",
        path="/pulls/comments/{comment_id}",
        action="updating pull request comment",
        success="Pull request comment updated successfully",
    ),
    GiteaOperation(
        name="update_pull_request_branch",
        description="Update a pull request branch with the latest changes from the base branch",
        arguments=UpdatePullRequestBranchArgs,
        method="POST",
        path="/pulls/{pr_number}/update",
        action="updating pull request branch",
        success="Pull request branch updated successfully",
        query=("style",),
    ),
    GiteaOperation(
        name="merge_pull_request",
        description="Merge a pull request",
        arguments=MergePullRequestArgs,
        method="POST",
        path="/pulls/{pr_number}/merge",
        action="merging pull request",
        success="Pull request merged successfully",
        body=merge_body,
    ),
    # ブランチ
    GiteaOperation(
        name="list_branches",
        description="List all branches in the repository",
        arguments=NoArguments,
        method="GET",
        path="/branches",
        action="listing branches",
    ),
    GiteaOperation(
        name="get_branch",
        description="Get details of a specific branch",
        arguments=BranchArgs,
        method="GET",
        path="/branches/{branch}",
        action="getting branch",
    ),
    GiteaOperation(
        name="create_branch",
        description="Create a new branch in the repository",
        arguments=CreateBranchArgs,
        method="POST",
        path="/branches",
        action="creating branch",
        success="Branch created successfully",
    ),
    # ファイル
    GiteaOperation(
        name="get_file_contents",
        description="Get the contents of a file from the repository",
        arguments=GetFileContentsArgs,
        method="GET",
        path="/contents/{path}",
        action="getting file contents",
        query=("ref",),
        render=render_file_contents,
    ),
    GiteaOperation(
        name="delete_file",
        description="Delete a file from the repository",
        arguments=DeleteFileArgs,
        method="DELETE",
        path="/contents/{path}",
        action="deleting file",
        success="File deleted successfully",
    ),
)

OPERATIONS_BY_NAME: dict[str, GiteaOperation] = {op.name: op for op in OPERATIONS}


def get_tool_definitions() -> list[Tool]:
    """利用可能なツール一覧を取得"""
    return [op.to_tool() for op in OPERATIONS]
