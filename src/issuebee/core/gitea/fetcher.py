"""Issue / PR データの事前取得

プロンプトに埋め込むデータを REST API から取得し FetchDataResult を組み立てる。
PR の変更ファイルについては、チェックアウト済み作業ツリー上の blob SHA を
git hash-object で算出する。
"""

from __future__ import annotations

import logging
import subprocess
from typing import Any

from ..context.parser import ParsedContext
from .client import GiteaClient
from .models import (
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

logger = logging.getLogger(__name__)


def _author(raw: dict[str, Any] | None) -> Author:
    return Author(login=(raw or {}).get("login") or "Unknown")


def _to_comment(raw: dict[str, Any]) -> Comment:
    return Comment(
        id=str(raw.get("id", "")),
        body=raw.get("body") or "",
        author=_author(raw.get("user")),
        created_at=raw.get("created_at") or "",
    )


def _to_changed_file(raw: dict[str, Any]) -> ChangedFile:
    return ChangedFile(
        path=raw.get("filename", ""),
        additions=raw.get("additions", 0),
        deletions=raw.get("deletions", 0),
        change_type=(raw.get("status") or "modified").upper(),
    )


def compute_file_sha(path: str) -> str:
    """作業ツリー上のファイルの blob SHA を算出する（失敗時は unavailable）"""
    try:
        result = subprocess.run(
            ["git", "hash-object", path],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.warning("Failed to compute SHA for %s: %s", path, exc)
        return "unavailable"
    return result.stdout.strip()


def with_sha(changed_file: ChangedFile) -> ChangedFileWithSHA:
    sha = "deleted" if changed_file.change_type == "DELETED" else compute_file_sha(changed_file.path)
    return ChangedFileWithSHA(**changed_file.model_dump(), sha=sha)


async def _fetch_reviews(client: GiteaClient, pr_number: int) -> list[Review]:
    reviews = []
    for raw in await client.list_pull_request_reviews(pr_number):
        raw_comments = await client.list_review_comments(pr_number, raw["id"])
        reviews.append(
            Review(
                id=str(raw["id"]),
                author=_author(raw.get("user")),
                body=raw.get("body") or "",
                state=raw.get("state") or "",
                submitted_at=raw.get("submitted_at") or "",
                comments=[
                    ReviewComment(
                        id=str(c.get("id", "")),
                        body=c.get("body") or "",
                        author=_author(c.get("user")),
                        path=c.get("path") or "",
                        line=c.get("line") or c.get("position"),
                        created_at=c.get("created_at") or "",
                    )
                    for c in raw_comments
                ],
            )
        )
    return reviews


async def fetch_gitea_data(client: GiteaClient, context: ParsedContext) -> FetchDataResult:
    """対象の Issue / PR に関するデータを取得する

    Args:
        client: Gitea REST クライアント
        context: 生のイベントコンテキスト（entity_number / is_pr を使用）

    Returns:
        FetchDataResult

    Raises:
        GiteaClientError: API 呼び出しに失敗した場合
        ValueError: エンティティ番号がない場合
    """
    number = context.entity_number
    if number is None:
        raise ValueError(f"No issue or pull request number in {context.event_name} event")

    comments = [_to_comment(c) for c in await client.list_issue_comments(number)]

    if not context.is_pr:
        raw_issue = await client.get_issue(number)
        issue = IssueData(
            title=raw_issue.get("title", ""),
            body=raw_issue.get("body"),
            author=_author(raw_issue.get("user")),
            state=raw_issue.get("state", ""),
            created_at=raw_issue.get("created_at") or "",
        )
        logger.info("Fetched issue #%s with %d comments", number, len(comments))
        return FetchDataResult(context_data=issue, comments=comments)

    raw_pr = await client.get_pull_request(number)
    changed_files = [_to_changed_file(f) for f in await client.list_pull_request_files(number)]
    pull_request = PullRequestData(
        title=raw_pr.get("title", ""),
        body=raw_pr.get("body"),
        author=_author(raw_pr.get("user")),
        base_ref_name=(raw_pr.get("base") or {}).get("ref", ""),
        head_ref_name=(raw_pr.get("head") or {}).get("ref", ""),
        head_ref_oid=(raw_pr.get("head") or {}).get("sha", ""),
        state=raw_pr.get("state", ""),
        created_at=raw_pr.get("created_at") or "",
        additions=raw_pr.get("additions") or 0,
        deletions=raw_pr.get("deletions") or 0,
        total_commits=raw_pr.get("commits") or 0,
        files=changed_files,
    )
    reviews = await _fetch_reviews(client, number)

    logger.info(
        "Fetched PR #%s with %d comments, %d reviews, %d changed files",
        number,
        len(comments),
        len(reviews),
        len(changed_files),
    )
    return FetchDataResult(
        context_data=pull_request,
        comments=comments,
        changed_files=changed_files,
        changed_files_with_sha=[with_sha(f) for f in changed_files],
        review_data=reviews,
    )
