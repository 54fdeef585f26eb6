"""Gitea関連モジュール

REST クライアント、事前取得データのモデル・取得・整形・サニタイズ。
"""

from .client import GiteaAPIError, GiteaClient, GiteaClientError, GiteaNetworkError
from .fetcher import fetch_gitea_data
from .models import FetchDataResult
from .sanitizer import sanitize_content

__all__ = [
    "GiteaAPIError",
    "GiteaClient",
    "GiteaClientError",
    "GiteaNetworkError",
    "FetchDataResult",
    "fetch_gitea_data",
    "sanitize_content",
]
