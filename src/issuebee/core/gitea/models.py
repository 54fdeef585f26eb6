"""事前取得データモデル

プロンプト生成前に REST API から取得する Issue/PR・コメント・レビュー・
変更ファイルの記録。FetchDataResult はプロンプト生成側から読み取り専用で参照される。
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ChangeType = Literal["ADDED", "MODIFIED", "DELETED", "RENAMED", "COPIED", "CHANGED"]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class Author(_Record):
    login: str


class Comment(_Record):
    """Issue / PR の一般コメント"""

    id: str
    body: str = ""
    author: Author
    created_at: str = ""


class ReviewComment(_Record):
    """PR インラインレビューコメント"""

    id: str
    body: str = ""
    author: Author
    path: str = ""
    line: int | None = None
    created_at: str = ""


class Review(_Record):
    """PR レビュー（本文と配下のインラインコメント）"""

    id: str
    author: Author
    body: str = ""
    state: str = ""
    submitted_at: str = ""
    comments: list[ReviewComment] = Field(default_factory=list)


class ChangedFile(_Record):
    path: str
    additions: int = 0
    deletions: int = 0
    change_type: ChangeType | str = "MODIFIED"


class ChangedFileWithSHA(ChangedFile):
    sha: str


class IssueData(_Record):
    title: str = ""
    body: str | None = None
    author: Author
    state: str = ""
    created_at: str = ""


class PullRequestData(_Record):
    title: str = ""
    body: str | None = None
    author: Author
    base_ref_name: str = ""
    head_ref_name: str = ""
    head_ref_oid: str = ""
    state: str = ""
    created_at: str = ""
    additions: int = 0
    deletions: int = 0
    total_commits: int = 0
    files: list[ChangedFile] = Field(default_factory=list)


class FetchDataResult(_Record):
    """事前取得結果

    image_url_map は元の画像URL → ダウンロード先ローカルパスの対応。
    """

    context_data: IssueData | PullRequestData
    comments: list[Comment] = Field(default_factory=list)
    changed_files: list[ChangedFile] = Field(default_factory=list)
    changed_files_with_sha: list[ChangedFileWithSHA] = Field(default_factory=list)
    review_data: list[Review] | None = None
    image_url_map: dict[str, str] = Field(default_factory=dict)
