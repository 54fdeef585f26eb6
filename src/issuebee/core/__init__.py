"""IssueBee Core

設定、イベントコンテキスト、Gitea 連携、トラッキングコメント。
"""

from .config import (
    ActionInputs,
    IssueBeeSettings,
    ToolServerConfig,
    get_settings,
    reload_settings,
)
from .context import InvalidEventError, ParsedContext, PreparedContext, prepare_context
from .gitea import GiteaAPIError, GiteaClient, GiteaClientError, GiteaNetworkError

__all__ = [
    "ActionInputs",
    "IssueBeeSettings",
    "ToolServerConfig",
    "get_settings",
    "reload_settings",
    "InvalidEventError",
    "ParsedContext",
    "PreparedContext",
    "prepare_context",
    "GiteaAPIError",
    "GiteaClient",
    "GiteaClientError",
    "GiteaNetworkError",
]
