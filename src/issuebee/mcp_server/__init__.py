"""Gitea MCP Server

Gitea REST API 操作を MCP ツールとして公開する。
"""

from .handlers import GiteaToolHandlers
from .operations import OPERATIONS, GiteaOperation, get_tool_definitions
from .server import GiteaMCPServer, load_config, main

__all__ = [
    "GiteaToolHandlers",
    "OPERATIONS",
    "GiteaOperation",
    "get_tool_definitions",
    "GiteaMCPServer",
    "load_config",
    "main",
]
