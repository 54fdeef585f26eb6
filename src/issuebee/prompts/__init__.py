"""プロンプト生成

イベントコンテキストと事前取得データからアシスタント用プロンプトを組み立てる。
"""

from .builder import EventType, generate_prompt, get_branch_state, get_event_type_and_context
from .create import create_prompt
from .templates import BranchState
from .tools import (
    BASE_ALLOWED_TOOLS,
    DISALLOWED_TOOLS,
    build_allowed_tools_string,
    build_disallowed_tools_string,
    comment_update_tool,
)

__all__ = [
    "EventType",
    "generate_prompt",
    "get_branch_state",
    "get_event_type_and_context",
    "create_prompt",
    "BranchState",
    "BASE_ALLOWED_TOOLS",
    "DISALLOWED_TOOLS",
    "build_allowed_tools_string",
    "build_disallowed_tools_string",
    "comment_update_tool",
]
