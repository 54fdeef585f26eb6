"""CI ランナー連携ヘルパーのテスト"""

from __future__ import annotations

import os

from issuebee.core.actions import export_variable, set_failed


class TestExportVariable:
    """export_variable"""

    def test_sets_process_env(self, monkeypatch) -> None:
        """GITHUB_ENV がなくてもプロセス環境には設定する"""
        # Arrange
        monkeypatch.delenv("ISSUEBEE_TEST_VAR", raising=False)

        # Act
        export_variable("ISSUEBEE_TEST_VAR", "value")

        # Assert
        assert os.environ["ISSUEBEE_TEST_VAR"] == "value"
        monkeypatch.delenv("ISSUEBEE_TEST_VAR")

    def test_appends_heredoc_to_env_file(self, tmp_path, monkeypatch) -> None:
        """GITHUB_ENV ファイルにヒアドキュメント形式で追記する"""
        # Arrange
        env_file = tmp_path / "github_env"
        env_file.write_text("EXISTING=1\n", encoding="utf-8")
        monkeypatch.setenv("GITHUB_ENV", str(env_file))
        monkeypatch.delenv("ALLOWED_TOOLS", raising=False)

        # Act
        export_variable("ALLOWED_TOOLS", "Edit,Read\nWrite")

        # Assert
        lines = env_file.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "EXISTING=1"
        assert lines[1].startswith("ALLOWED_TOOLS<<ghadelimiter_")
        delimiter = lines[1].split("<<", 1)[1]
        assert lines[2:] == ["Edit,Read", "Write", delimiter]
        monkeypatch.delenv("ALLOWED_TOOLS")


class TestSetFailed:
    """set_failed"""

    def test_prints_error_command(self, capsys) -> None:
        """::error:: コマンドを改行をエスケープして出力する"""
        # Act
        set_failed("boom\nsecond line 100%")

        # Assert
        out = capsys.readouterr().out
        assert out == "::error::boom%0Asecond line 100%25\n"
