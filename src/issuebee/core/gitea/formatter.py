"""事前取得データのフォーマッター

FetchDataResult の各要素をプロンプト埋め込み用のテキストへ整形する。
本文系のテキストは画像URLをローカルパスへ置換した上でサニタイズする。
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .models import ChangedFileWithSHA, Comment, IssueData, PullRequestData, Review
from .sanitizer import sanitize_content


def _replace_image_urls(body: str, image_url_map: Mapping[str, str] | None) -> str:
    for original_url, local_path in (image_url_map or {}).items():
        body = body.replace(original_url, local_path)
    return body


def format_context(context_data: IssueData | PullRequestData, is_pr: bool) -> str:
    """エンティティの概要を整形する"""
    if is_pr and isinstance(context_data, PullRequestData):
        return "\n".join(
            [
                f"PR Title: {context_data.title}",
                f"PR Author: {context_data.author.login}",
                f"PR Branch: {context_data.head_ref_name} -> {context_data.base_ref_name}",
                f"PR State: {context_data.state}",
                f"PR Additions: {context_data.additions}",
                f"PR Deletions: {context_data.deletions}",
                f"Total Commits: {context_data.total_commits}",
                f"Changed Files: {len(context_data.files)} files",
            ]
        )
    return "\n".join(
        [
            f"Issue Title: {context_data.title}",
            f"Issue Author: {context_data.author.login}",
            f"Issue State: {context_data.state}",
        ]
    )


def format_body(body: str, image_url_map: Mapping[str, str] | None = None) -> str:
    return sanitize_content(_replace_image_urls(body, image_url_map))


def format_comments(
    comments: Iterable[Comment], image_url_map: Mapping[str, str] | None = None
) -> str:
    """コメントスレッドを `[author at time]: body` 形式で整形する"""
    return "\n\n".join(
        f"[{comment.author.login} at {comment.created_at}]: "
        f"{format_body(comment.body, image_url_map)}"
        for comment in comments
    )


def format_review_comments(
    review_data: Iterable[Review] | None, image_url_map: Mapping[str, str] | None = None
) -> str:
    """レビューとその配下のインラインコメントを整形する"""
    if not review_data:
        return ""

    formatted_reviews = []
    for review in review_data:
        output = f"[Review by {review.author.login} at {review.submitted_at}]: {review.state}"
        if review.body and review.body.strip():
            output += f"\n{format_body(review.body, image_url_map)}"
        if review.comments:
            output += "\n" + "\n".join(
                f"  [Comment on {comment.path}:{comment.line or '?'}]: "
                f"{format_body(comment.body, image_url_map)}"
                for comment in review.comments
            )
        formatted_reviews.append(output)
    return "\n\n".join(formatted_reviews)


def format_changed_files_with_sha(changed_files: Iterable[ChangedFileWithSHA]) -> str:
    return "\n".join(
        f"- {f.path} ({f.change_type}) +{f.additions}/-{f.deletions} SHA: {f.sha}"
        for f in changed_files
    )
