"""アシスタント設定ファイルのマージ

~/.claude/settings.json に対して、ワークフロー入力の設定（JSON 文字列または
JSON ファイルパス）をマージする。プロジェクト MCP サーバーは常に有効化する。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class AgentSettingsError(RuntimeError):
    """設定入力の読み込み・解析に失敗した"""


def _load_settings_input(settings_input: str) -> dict[str, Any]:
    """JSON 文字列として解釈し、失敗したらファイルパスとして読む"""
    try:
        parsed = json.loads(settings_input)
        logger.info("Parsed settings input as JSON")
        return parsed
    except json.JSONDecodeError:
        logger.info("Settings input is not JSON, treating as file path: %s", settings_input)

    try:
        return json.loads(Path(settings_input).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise AgentSettingsError(f"Failed to process settings input: {exc}") from exc


def setup_agent_settings(
    settings_input: str | None = None,
    home_dir: str | Path | None = None,
) -> Path:
    """設定ファイルを作成・マージする

    Args:
        settings_input: JSON 文字列、または JSON ファイルへのパス
        home_dir: ホームディレクトリ（省略時はユーザーのホーム）

    Returns:
        書き込んだ設定ファイルのパス

    Raises:
        AgentSettingsError: 入力または既存設定ファイルが不正な場合
    """
    home = Path(home_dir) if home_dir is not None else Path.home()
    settings_path = home / ".claude" / "settings.json"
    logger.info("Setting up assistant settings at: %s", settings_path)

    settings_path.parent.mkdir(parents=True, exist_ok=True)

    settings: dict[str, Any] = {}
    if settings_path.exists():
        existing = settings_path.read_text(encoding="utf-8")
        if existing.strip():
            try:
                settings = json.loads(existing)
            except json.JSONDecodeError as exc:
                raise AgentSettingsError(
                    f"Existing settings file {settings_path} is not valid JSON: {exc}"
                ) from exc
            logger.debug("Found existing settings: %s", settings)

    if settings_input and settings_input.strip():
        input_settings = _load_settings_input(settings_input)
        if not isinstance(input_settings, dict):
            raise AgentSettingsError("Failed to process settings input: expected a JSON object")
        settings = {**settings, **input_settings}
        logger.info("Merged settings with input settings")

    settings["enableAllProjectMcpServers"] = True

    settings_path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
    logger.info("Settings saved successfully")
    return settings_path
