"""Gitea MCP Server

Model Context Protocol (MCP) サーバー実装。
アシスタントから Gitea REST API へのブリッジを提供する。
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

import httpx
from mcp.server import InitializationOptions, Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, ServerCapabilities, Tool, ToolsCapability
from pydantic import ValidationError

from .. import __version__
from ..core.config import ToolServerConfig, get_settings
from ..core.logging_config import configure_logging
from .handlers import GiteaToolHandlers
from .operations import get_tool_definitions

logger = logging.getLogger(__name__)

SERVER_NAME = "gitea"


class GiteaMCPServer:
    """Gitea MCP Server

    起動時に読み込んだリポジトリ・トークンで固定され、
    ツール呼び出しごとに1回の REST リクエストを行う。

    提供ツール:
    - Issue: get_issue, list_issues, create_issue, update_issue
    - コメント: get_issue_comments, create_issue_comment, get_comment,
      update_issue_comment, delete_issue_comment, update_claude_comment
    - PR: list_pull_requests, get_pull_request, get_pull_request_files,
      create_pull_request, update_pull_request, update_pull_request_comment,
      update_pull_request_branch, merge_pull_request
    - リポジトリ: get_repository, list_branches, get_branch, create_branch,
      get_file_contents, delete_file
    """

    def __init__(
        self,
        config: ToolServerConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.server = Server(SERVER_NAME)
        self._config = config
        self._handlers = GiteaToolHandlers(config, transport=transport)

        self._setup_handlers()

    @property
    def config(self) -> ToolServerConfig:
        return self._config

    def _setup_handlers(self) -> None:  # pragma: no cover
        """MCPハンドラーを設定"""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """利用可能なツール一覧"""
            return get_tool_definitions()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            """ツールを実行"""
            return await self._dispatch_tool(name, arguments)

    async def _dispatch_tool(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """ツール名に応じてハンドラーにディスパッチ"""
        logger.debug("Calling tool %s", name)
        return await self._handlers.handle(name, arguments)

    async def run(self) -> None:  # pragma: no cover
        """サーバーを起動"""
        init_options = InitializationOptions(
            server_name=SERVER_NAME,
            server_version=__version__,
            capabilities=ServerCapabilities(
                tools=ToolsCapability(),
            ),
        )
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(read_stream, write_stream, init_options)


def load_config() -> ToolServerConfig:
    """環境変数から起動設定を読み込み、内容をログに出す

    Raises:
        ValidationError: REPO_OWNER / REPO_NAME / GITHUB_TOKEN が欠けている場合
            (CLAUDE_COMMENT_ID はここでは検証しない)
    """
    config = ToolServerConfig()
    logger.info("Starting Gitea API Operations MCP Server")
    logger.info("REPO_OWNER: %s", config.repo_owner)
    logger.info("REPO_NAME: %s", config.repo_name)
    logger.info("BRANCH_NAME: %s", config.branch_name)
    logger.info("GITEA_API_URL: %s", config.gitea_api_url)
    logger.info("GITHUB_TOKEN: %s", "***" if config.github_token else "undefined")
    return config


def main() -> None:  # pragma: no cover
    """エントリーポイント"""
    configure_logging(get_settings().logging.level)
    try:
        config = load_config()
    except ValidationError as exc:
        logger.error("Invalid tool server configuration: %s", exc)
        sys.exit(1)

    server = GiteaMCPServer(config)
    asyncio.run(server.run())


if __name__ == "__main__":  # pragma: no cover
    main()
