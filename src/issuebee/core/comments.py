"""トラッキングコメント

ボットが進捗報告に使い続ける単一コメントの本文生成と、
ブランチ作成後のブランチリンク追記。
"""

from __future__ import annotations

import logging

from .config import get_settings
from .context.parser import ParsedContext
from .gitea.client import GiteaClient, GiteaClientError

logger = logging.getLogger(__name__)

SPINNER_URL = (
    "https://raw.githubusercontent.com/markwylde/claude-code-gitea-action"
    "/refs/heads/gitea/assets/spinner.gif"
)
SPINNER_HTML = (
    f'<img src="{SPINNER_URL}" width="14px" height="14px" '
    'style="vertical-align: middle; margin-left: 4px;" />'
)


def create_job_run_link(owner: str, repo: str, run_id: str, server_url: str | None = None) -> str:
    server_url = (server_url or get_settings().gitea.server_url).rstrip("/")
    return f"[View job run]({server_url}/{owner}/{repo}/actions/runs/{run_id})"


def create_branch_link(owner: str, repo: str, branch: str, server_url: str | None = None) -> str:
    server_url = (server_url or get_settings().gitea.server_url).rstrip("/")
    return f"\n[View branch]({server_url}/{owner}/{repo}/src/branch/{branch})"


def create_comment_body(job_run_link: str, branch_link: str = "") -> str:
    return (
        f"Claude Code is working… {SPINNER_HTML}\n"
        "\n"
        "I'll analyze this and get back to you.\n"
        "\n"
        f"{job_run_link}{branch_link}"
    )


async def update_tracking_comment(
    client: GiteaClient,
    context: ParsedContext,
    comment_id: int,
    branch: str | None = None,
    server_url: str | None = None,
) -> None:
    """トラッキングコメントをブランチリンク付きで更新する

    ブランチリンクは Issue の場合のみ付与する（PR はホスティング UI 上に
    ブランチが既に表示されているため）。リトライは行わない。

    Args:
        client: Gitea REST クライアント
        context: 生のイベントコンテキスト
        comment_id: トラッキングコメントのID
        branch: 作成されたブランチ名
        server_url: Web UI のベースURL（省略時は設定値）

    Raises:
        GiteaClientError: API 呼び出しに失敗した場合
    """
    owner = context.repository.owner
    repo = context.repository.repo

    job_run_link = create_job_run_link(owner, repo, context.run_id, server_url)
    branch_link = ""
    if branch and not context.is_pr:
        branch_link = create_branch_link(owner, repo, branch, server_url)

    body = create_comment_body(job_run_link, branch_link)

    try:
        if context.event_name == "pull_request_review_comment":
            # インラインレビューコメントは pulls 系エンドポイント
            await client.update_pull_request_comment(comment_id, body)
            logger.info("Updated PR review comment %s with branch link", comment_id)
        else:
            await client.update_issue_comment(comment_id, body)
            logger.info("Updated issue comment %s with branch link", comment_id)
    except GiteaClientError:
        logger.exception("Error updating comment %s with branch link", comment_id)
        raise
