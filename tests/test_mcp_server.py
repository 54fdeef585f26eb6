"""Gitea MCP Server のテスト"""

from __future__ import annotations

import httpx
import pytest
from pydantic import ValidationError

from issuebee.core.config import ToolServerConfig
from issuebee.mcp_server import OPERATIONS, GiteaMCPServer, get_tool_definitions, load_config


@pytest.fixture
def config() -> ToolServerConfig:
    return ToolServerConfig(
        repo_owner="acme",
        repo_name="widgets",
        github_token="secret",
        gitea_api_url="https://gitea.example.com/api/v1",
        claude_comment_id="555",
    )


class TestToolDefinitions:
    """get_tool_definitions"""

    def test_all_operations_exposed(self) -> None:
        """全操作がツールとして公開される"""
        tools = get_tool_definitions()
        names = [tool.name for tool in tools]

        assert len(tools) == len(OPERATIONS) == 24
        assert len(set(names)) == len(names)
        assert "update_claude_comment" in names
        assert "update_pull_request_comment" in names

    def test_input_schemas(self) -> None:
        """入力スキーマは object 型で必須引数を持つ"""
        tools = {tool.name: tool for tool in get_tool_definitions()}

        for tool in tools.values():
            assert tool.inputSchema["type"] == "object"
            assert "properties" in tool.inputSchema
            assert tool.description

        assert tools["get_issue"].inputSchema["required"] == ["issue_number"]
        assert tools["update_claude_comment"].inputSchema["required"] == ["body"]
        assert "required" not in tools["list_branches"].inputSchema


class TestGiteaMCPServer:
    """GiteaMCPServer"""

    def test_init(self, config) -> None:
        server = GiteaMCPServer(config)

        assert server.server.name == "gitea"
        assert server.config is config

    @pytest.mark.asyncio
    async def test_dispatch_tool(self, config) -> None:
        """ツール呼び出しをハンドラーへ委譲する"""
        # Arrange
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json=[{"name": "main"}])

        server = GiteaMCPServer(config, transport=httpx.MockTransport(handler))

        # Act
        result = await server._dispatch_tool("list_branches", {})

        # Assert
        assert seen == ["/api/v1/repos/acme/widgets/branches"]
        assert result.isError is False
        assert '"name": "main"' in result.content[0].text

    @pytest.mark.asyncio
    async def test_dispatch_unknown_tool(self, config) -> None:
        result = await GiteaMCPServer(config)._dispatch_tool("nope", None)

        assert result.isError is True


class TestLoadConfig:
    """load_config"""

    def test_from_env(self, monkeypatch) -> None:
        """環境変数から起動設定を読み込む"""
        # Arrange
        monkeypatch.setenv("REPO_OWNER", "acme")
        monkeypatch.setenv("REPO_NAME", "widgets")
        monkeypatch.setenv("BRANCH_NAME", "claude/issue-5-fix")
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        monkeypatch.setenv("GITEA_API_URL", "https://gitea.example.com/api/v1")
        monkeypatch.setenv("CLAUDE_COMMENT_ID", "555")

        # Act
        config = load_config()

        # Assert
        assert config.repo_owner == "acme"
        assert config.repo_name == "widgets"
        assert config.branch_name == "claude/issue-5-fix"
        assert config.github_token == "secret"
        assert config.gitea_api_url == "https://gitea.example.com/api/v1"
        assert config.claude_comment_id == "555"

    def test_gitea_token_fallback(self, monkeypatch) -> None:
        """GITEA_TOKEN もトークンとして受け付ける"""
        monkeypatch.setenv("REPO_OWNER", "acme")
        monkeypatch.setenv("REPO_NAME", "widgets")
        monkeypatch.setenv("GITEA_TOKEN", "other")

        config = load_config()

        assert config.github_token == "other"
        assert config.gitea_api_url == "https://api.github.com"
        assert config.claude_comment_id is None

    def test_non_numeric_comment_id_is_not_fatal(self, monkeypatch) -> None:
        """数値でない CLAUDE_COMMENT_ID でも起動設定は読み込める"""
        # Arrange
        monkeypatch.setenv("REPO_OWNER", "acme")
        monkeypatch.setenv("REPO_NAME", "widgets")
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        monkeypatch.setenv("CLAUDE_COMMENT_ID", "not-a-number")

        # Act
        config = load_config()

        # Assert
        assert config.claude_comment_id == "not-a-number"

    def test_token_is_not_logged(self, monkeypatch, caplog) -> None:
        """トークンはログに出さない"""
        monkeypatch.setenv("REPO_OWNER", "acme")
        monkeypatch.setenv("REPO_NAME", "widgets")
        monkeypatch.setenv("GITHUB_TOKEN", "very-secret")

        with caplog.at_level("INFO"):
            load_config()

        assert "very-secret" not in caplog.text
        assert "GITHUB_TOKEN: ***" in caplog.text

    def test_missing_env(self, monkeypatch) -> None:
        """リポジトリ識別子やトークンがなければ検証エラー"""
        monkeypatch.setenv("REPO_OWNER", "acme")

        with pytest.raises(ValidationError):
            load_config()
