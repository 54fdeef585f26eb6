"""ロギング設定

全ログは stderr に出力する。stdout は MCP stdio トランスポートと
CI ワークフローコマンド（::error:: 等）専用。
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """ルートロガーに stderr ハンドラーを設定する"""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, stream=sys.stderr, force=True)
    return logging.getLogger()
