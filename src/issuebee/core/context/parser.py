"""Webhook コンテキストパーサー

CI ランナーから渡される生のイベントペイロードを ParsedContext に包む。
エンティティ番号と PR/Issue の判定はここで一度だけ行い、
正規化 (normalizer) 側では再判定しない。
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..config import ActionInputs

logger = logging.getLogger(__name__)

PULL_REQUEST_EVENT_NAMES = (
    "pull_request",
    "pull_request_review",
    "pull_request_review_comment",
)


class RepositoryRef(BaseModel):
    """リポジトリ識別子"""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, full_name: str) -> RepositoryRef:
        """owner/repo 形式の文字列から生成"""
        owner, sep, repo = full_name.partition("/")
        if not sep or not owner or not repo:
            raise ValueError(f"Invalid repository name: {full_name!r} (expected owner/repo)")
        return cls(owner=owner, repo=repo)


class ParsedContext(BaseModel):
    """生のイベントコンテキスト

    payload はイベント種別ごとに形が異なる不透明な dict としてそのまま保持する。
    """

    model_config = ConfigDict(frozen=True)

    event_name: str
    event_action: str | None = None
    repository: RepositoryRef
    run_id: str = ""
    entity_number: int | None = None
    is_pr: bool = False
    payload: dict[str, Any] = Field(default_factory=dict)
    inputs: ActionInputs = Field(default_factory=ActionInputs)


def _entity_of(event_name: str, payload: dict[str, Any]) -> tuple[int | None, bool]:
    """イベント種別からエンティティ番号と PR フラグを導出"""
    if event_name in PULL_REQUEST_EVENT_NAMES:
        pull_request = payload.get("pull_request") or {}
        return pull_request.get("number"), True

    issue = payload.get("issue") or {}
    if event_name == "issue_comment":
        return issue.get("number"), bool(issue.get("pull_request"))
    return issue.get("number"), False


def parse_event_context(
    event_name: str,
    payload: dict[str, Any],
    repository: str,
    run_id: str = "",
    inputs: ActionInputs | None = None,
) -> ParsedContext:
    """イベントペイロードから ParsedContext を構築する

    未サポートのイベント種別もここでは受け付け、拒否は正規化時に行う。

    Args:
        event_name: イベント名 (issues, issue_comment, ...)
        payload: Webhook ペイロード
        repository: owner/repo 形式のリポジトリ名
        run_id: ワークフロー実行ID
        inputs: 呼び出し入力（省略時は環境変数から読み込む）

    Returns:
        ParsedContext インスタンス
    """
    entity_number, is_pr = _entity_of(event_name, payload)
    return ParsedContext(
        event_name=event_name,
        event_action=payload.get("action"),
        repository=RepositoryRef.parse(repository),
        run_id=run_id,
        entity_number=entity_number,
        is_pr=is_pr,
        payload=payload,
        inputs=inputs if inputs is not None else ActionInputs(),
    )


def load_event_context_from_env(inputs: ActionInputs | None = None) -> ParsedContext:
    """CI ランナーの環境変数から ParsedContext を構築する

    GITHUB_EVENT_NAME / GITHUB_EVENT_PATH / GITHUB_REPOSITORY / GITHUB_RUN_ID を使用する。

    Raises:
        KeyError: 必須の環境変数が未設定の場合
        ValueError: イベントファイルが不正な JSON の場合
    """
    event_name = os.environ["GITHUB_EVENT_NAME"]
    event_path = Path(os.environ["GITHUB_EVENT_PATH"])
    repository = os.environ["GITHUB_REPOSITORY"]
    run_id = os.environ.get("GITHUB_RUN_ID", "")

    try:
        payload = json.loads(event_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Failed to parse event payload {event_path}: {exc}") from exc

    logger.info("Loaded %s event for %s (run %s)", event_name, repository, run_id or "-")
    return parse_event_context(event_name, payload, repository, run_id, inputs)
