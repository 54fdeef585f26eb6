"""IssueBee 設定管理モジュール

Pydantic Settingsを使用した型安全な設定管理。
issuebee.config.yaml と環境変数から設定を読み込む。

- IssueBeeSettings: パッケージ全体の設定（YAML + ISSUEBEE_ 環境変数）
- ActionInputs: CI 呼び出しごとの入力（TRIGGER_PHRASE 等）
- ToolServerConfig: MCP ツールサーバーの起動設定（REPO_OWNER 等）
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_TRIGGER_PHRASE = "@claude"


class GiteaConfig(BaseModel):
    """Gitea (ホスティングサービス) 接続設定"""

    api_url: str = Field(default=DEFAULT_API_URL, description="REST API のベースURL")
    server_url: str = Field(
        default=DEFAULT_SERVER_URL, description="Web UI のベースURL（ジョブ/ブランチリンク用）"
    )
    token_env: str = Field(default="GITHUB_TOKEN", description="トークンを保持する環境変数名")

    def get_token(self) -> str | None:
        """環境変数からトークンを取得"""
        return os.environ.get(self.token_env) or None


class PromptConfig(BaseModel):
    """プロンプトファイル出力設定"""

    output_dir: str = Field(default="/tmp/claude-prompts")
    filename: str = Field(default="claude-prompt.txt")

    @property
    def prompt_path(self) -> Path:
        """プロンプトファイルのパス"""
        return Path(self.output_dir) / self.filename


class LoggingConfig(BaseModel):
    """ロギング設定"""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


class IssueBeeSettings(BaseSettings):
    """IssueBee全体設定

    設定の優先順位:
    1. 環境変数 (ISSUEBEE_ プレフィックス、ネストは __ 区切り)
    2. issuebee.config.yaml（初期化引数として渡す）
    3. デフォルト値
    """

    model_config = SettingsConfigDict(
        env_prefix="ISSUEBEE_",
        env_nested_delimiter="__",
    )

    gitea: GiteaConfig = Field(default_factory=GiteaConfig)
    prompt: PromptConfig = Field(default_factory=PromptConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """環境変数を初期化引数 (YAML の値) より優先する"""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, config_path: Path | str | None = None) -> "IssueBeeSettings":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス。Noneの場合はデフォルトパスを探索

        Returns:
            IssueBeeSettings インスタンス
        """
        if config_path is None:
            search_paths = [
                Path.cwd() / "issuebee.config.yaml",
                Path.cwd() / "issuebee.config.yml",
                Path.home() / ".issuebee" / "config.yaml",
            ]
            for path in search_paths:
                if path.exists():
                    config_path = path
                    break

        if config_path and Path(config_path).exists():
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
            return cls(**yaml_config)

        return cls()


class ActionInputs(BaseSettings):
    """CI 呼び出し入力

    ワークフローから環境変数として渡される。空文字列は未設定として扱う。
    """

    model_config = SettingsConfigDict(env_ignore_empty=True)

    trigger_phrase: str = Field(default=DEFAULT_TRIGGER_PHRASE)
    assignee_trigger: str | None = None
    custom_instructions: str | None = None
    allowed_tools: str | None = None
    disallowed_tools: str | None = None
    direct_prompt: str | None = None


class ToolServerConfig(BaseSettings):
    """MCP ツールサーバー起動設定

    起動時に一度だけ読み込まれ、以降は変更されない。
    リポジトリ識別子とトークンが欠けている場合は検証エラーとなる。
    """

    model_config = SettingsConfigDict(env_ignore_empty=True, frozen=True)

    repo_owner: str = Field(..., min_length=1)
    repo_name: str = Field(..., min_length=1)
    branch_name: str | None = None
    github_token: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("github_token", "gitea_token"),
        repr=False,
    )
    gitea_api_url: str = Field(default=DEFAULT_API_URL)
    # 数値変換は update_claude_comment 呼び出し時に行う
    claude_comment_id: str | None = None


# グローバル設定インスタンス（遅延初期化）
_settings: IssueBeeSettings | None = None


def get_settings() -> IssueBeeSettings:
    """設定シングルトンを取得"""
    global _settings
    if _settings is None:
        _settings = IssueBeeSettings.from_yaml()
    return _settings


def reload_settings(config_path: Path | str | None = None) -> IssueBeeSettings:
    """設定を再読み込み"""
    global _settings
    _settings = IssueBeeSettings.from_yaml(config_path)
    return _settings
