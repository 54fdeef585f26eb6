"""CI ランナー連携ヘルパー

ワークフロー環境変数のエクスポートと失敗マーカーの出力。
Gitea Actions / GitHub Actions 互換のワークフローコマンドを使用する。
"""

from __future__ import annotations

import logging
import os
import uuid

logger = logging.getLogger(__name__)


def export_variable(name: str, value: str) -> None:
    """後続ステップに環境変数をエクスポートする

    現在のプロセス環境にも設定し、GITHUB_ENV ファイルがあれば
    ヒアドキュメント形式で追記する。
    """
    os.environ[name] = value

    env_file = os.environ.get("GITHUB_ENV")
    if not env_file:
        logger.debug("GITHUB_ENV not set; exported %s to process environment only", name)
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(env_file, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def set_failed(message: str) -> None:
    """ステップを失敗としてマークする（::error:: コマンドを出力）"""
    logger.error(message)
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    print(f"::error::{escaped}", flush=True)
