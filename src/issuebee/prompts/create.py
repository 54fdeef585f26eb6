"""プロンプト作成ステップ

コンテキスト準備 → プロンプト生成 → ファイル書き出し → ツールリストのエクスポート。
失敗時はステップを失敗としてマークし、終了コード 1 で終了する。
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.actions import export_variable, set_failed
from ..core.config import IssueBeeSettings, get_settings
from ..core.context.normalizer import prepare_context
from ..core.context.parser import ParsedContext
from ..core.gitea.models import FetchDataResult
from .builder import generate_prompt
from .tools import build_allowed_tools_string, build_disallowed_tools_string

logger = logging.getLogger(__name__)


def create_prompt(
    claude_comment_id: int | str,
    base_branch: str | None,
    claude_branch: str | None,
    data: FetchDataResult,
    context: ParsedContext,
    settings: IssueBeeSettings | None = None,
) -> Path:
    """プロンプトファイルを作成し ALLOWED_TOOLS / DISALLOWED_TOOLS をエクスポートする

    Args:
        claude_comment_id: トラッキングコメントのID
        base_branch: 作業ブランチの起点ブランチ
        claude_branch: 既に割り当てられた作業ブランチ
        data: 事前取得データ
        context: 生のイベントコンテキスト
        settings: 設定（省略時はグローバル設定）

    Returns:
        書き出したプロンプトファイルのパス

    Raises:
        SystemExit: いずれかの処理に失敗した場合（終了コード 1）
    """
    settings = settings or get_settings()
    try:
        prepared = prepare_context(context, str(claude_comment_id), base_branch, claude_branch)
        prompt = generate_prompt(prepared, data)

        logger.info("===== FINAL PROMPT =====\n%s\n=======================", prompt)

        prompt_path = settings.prompt.prompt_path
        prompt_path.parent.mkdir(parents=True, exist_ok=True)
        prompt_path.write_text(prompt, encoding="utf-8")

        allowed_tools = build_allowed_tools_string(prepared.event_data, prepared.allowed_tools)
        disallowed_tools = build_disallowed_tools_string(prepared.disallowed_tools, allowed_tools)
        export_variable("ALLOWED_TOOLS", allowed_tools)
        export_variable("DISALLOWED_TOOLS", disallowed_tools)
    except Exception as exc:
        set_failed(f"Create prompt failed with error: {exc}")
        raise SystemExit(1) from exc

    logger.info("Prompt written to %s", prompt_path)
    return prompt_path
