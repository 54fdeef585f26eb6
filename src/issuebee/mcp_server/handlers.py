"""Gitea ツールハンドラー

ツール呼び出しを 引数検証 → REST 呼び出し → エンベロープ生成 の順に処理する。
REST の失敗は例外として送出せず、アシスタントが読めるテキストとして返す。
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from mcp.types import CallToolResult, TextContent
from pydantic import ValidationError

from ..core.config import ToolServerConfig
from ..core.gitea.client import GiteaClient, GiteaClientError
from .operations import OPERATIONS_BY_NAME, GiteaOperation, ToolArguments

logger = logging.getLogger(__name__)


def text_result(text: str, is_error: bool = False) -> CallToolResult:
    """テキスト1件のエンベロープ"""
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


class GiteaToolHandlers:
    """Gitea ツールハンドラー

    起動時設定（リポジトリ・トークン）は不変で、呼び出し間で共有する状態は持たない。

    Args:
        config: ツールサーバー起動設定
        transport: httpx トランスポート（テスト用の差し替え）
    """

    def __init__(
        self,
        config: ToolServerConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = GiteaClient(
            api_url=config.gitea_api_url,
            owner=config.repo_owner,
            repo=config.repo_name,
            token=config.github_token,
            transport=transport,
        )

    @property
    def config(self) -> ToolServerConfig:
        return self._config

    def _claude_comment_id(self) -> int:
        """起動設定のトラッキングコメントIDを数値で返す

        Raises:
            ValueError: 未設定、または数値でない場合
        """
        raw = self._config.claude_comment_id
        if raw is None:
            raise ValueError("CLAUDE_COMMENT_ID environment variable is required")
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"CLAUDE_COMMENT_ID must be a number, got {raw!r}") from exc

    def _endpoint(
        self, operation: GiteaOperation, args: ToolArguments, comment_id: int | None = None
    ) -> str:
        values = args.model_dump()
        if comment_id is not None:
            values["comment_id"] = comment_id
        path = operation.path.format(
            **{field: quote(str(values[field]), safe="") for field in operation.path_fields}
        )
        return f"{self._client.repo_path}{path}"

    async def handle(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """ツールを実行する

        Args:
            name: ツール名
            arguments: ツール引数

        Returns:
            CallToolResult（失敗時もエンベロープとして返す）
        """
        operation = OPERATIONS_BY_NAME.get(name)
        if operation is None:
            return text_result(f"Error: Unknown tool: {name}", is_error=True)

        try:
            args = operation.arguments.model_validate(arguments or {})
        except ValidationError as exc:
            logger.warning("Invalid arguments for %s: %s", name, exc)
            return text_result(f"Invalid arguments for {name}: {exc}", is_error=True)

        comment_id = None
        if operation.targets_claude_comment:
            try:
                comment_id = self._claude_comment_id()
            except ValueError as exc:
                logger.error("Error %s: %s", operation.action, exc)
                return text_result(f"Error {operation.action}: {exc}", is_error=True)

        try:
            result = await self._client.request(
                operation.method,
                self._endpoint(operation, args, comment_id),
                payload=operation.build_body(args),
                params=operation.build_params(args),
            )
        except GiteaClientError as exc:
            logger.error("Error %s: %s", operation.action, exc)
            return text_result(f"Error {operation.action}: {exc}", is_error=operation.strict)

        return text_result(operation.render_result(args, result))
