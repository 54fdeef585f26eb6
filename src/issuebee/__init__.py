"""IssueBee - Issue/PR イベントと AI コーディングアシスタントの橋渡し

Webhook イベントからプロンプトを組み立て、MCP ツールサーバー経由で
Gitea REST API 操作を提供する。
"""

__version__ = "0.1.0"
