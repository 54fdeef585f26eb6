"""アシスタント設定ファイルのマージのテスト"""

from __future__ import annotations

import json

import pytest

from issuebee.core.agent_settings import AgentSettingsError, setup_agent_settings


def _read(path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


class TestSetupAgentSettings:
    """setup_agent_settings"""

    def test_creates_file_without_input(self, tmp_path) -> None:
        """入力がなくてもプロジェクト MCP サーバーを有効化した設定を作る"""
        # Act
        path = setup_agent_settings(None, home_dir=tmp_path)

        # Assert
        assert path == tmp_path / ".claude" / "settings.json"
        assert _read(path) == {"enableAllProjectMcpServers": True}

    def test_json_string_input(self, tmp_path) -> None:
        """JSON 文字列をマージする"""
        path = setup_agent_settings('{"model": "sonnet", "env": {"A": "1"}}', home_dir=tmp_path)

        assert _read(path) == {
            "model": "sonnet",
            "env": {"A": "1"},
            "enableAllProjectMcpServers": True,
        }

    def test_file_path_input(self, tmp_path) -> None:
        """JSON でなければファイルパスとして読む"""
        # Arrange
        source = tmp_path / "input.json"
        source.write_text('{"permissions": {"allow": ["Bash"]}}', encoding="utf-8")

        # Act
        path = setup_agent_settings(str(source), home_dir=tmp_path / "home")

        # Assert
        assert _read(path)["permissions"] == {"allow": ["Bash"]}

    def test_merges_with_existing(self, tmp_path) -> None:
        """既存設定に入力を上書きマージし、有効化フラグは常に true"""
        # Arrange
        existing = tmp_path / ".claude" / "settings.json"
        existing.parent.mkdir(parents=True)
        existing.write_text(
            '{"model": "old", "theme": "dark", "enableAllProjectMcpServers": false}',
            encoding="utf-8",
        )

        # Act
        setup_agent_settings('{"model": "new"}', home_dir=tmp_path)

        # Assert
        assert _read(existing) == {
            "model": "new",
            "theme": "dark",
            "enableAllProjectMcpServers": True,
        }

    def test_blank_input_is_ignored(self, tmp_path) -> None:
        path = setup_agent_settings("   ", home_dir=tmp_path)

        assert _read(path) == {"enableAllProjectMcpServers": True}

    def test_missing_file_input(self, tmp_path) -> None:
        """JSON でもファイルでもない入力はエラー"""
        with pytest.raises(AgentSettingsError, match="Failed to process settings input"):
            setup_agent_settings(str(tmp_path / "missing.json"), home_dir=tmp_path)

    def test_non_object_input(self, tmp_path) -> None:
        """JSON オブジェクト以外はエラー"""
        with pytest.raises(AgentSettingsError, match="expected a JSON object"):
            setup_agent_settings("[1, 2]", home_dir=tmp_path)

    def test_invalid_existing_file(self, tmp_path) -> None:
        """既存設定ファイルが不正な JSON ならエラー"""
        # Arrange
        existing = tmp_path / ".claude" / "settings.json"
        existing.parent.mkdir(parents=True)
        existing.write_text("{broken", encoding="utf-8")

        # Act & Assert
        with pytest.raises(AgentSettingsError, match="not valid JSON"):
            setup_agent_settings('{"model": "x"}', home_dir=tmp_path)
