"""コンテンツサニタイザー

プロンプトへ埋め込む自由記述テキスト（コメント本文・直接指示など）から、
文書構造として誤解され得る要素や不可視の指示を取り除く。
"""

from __future__ import annotations

import re

_HTML_COMMENT = re.compile(r"<!--[\s\S]*?-->")
_ZERO_WIDTH = re.compile(r"[\u200b\u200c\u200d\ufeff]")
_CONTROL_CHARS = re.compile(r"[\u0000-\u0008\u000b\u000c\u000e-\u001f\u007f-\u009f]")
_SOFT_HYPHEN = re.compile(r"\u00ad")
_BIDI_CONTROLS = re.compile(r"[\u202a-\u202e\u2066-\u2069]")

_IMAGE_ALT_TEXT = re.compile(r"!\[[^\]]*\]\(")
_LINK_TITLE_DOUBLE = re.compile(r'(\[[^\]]*\]\([^)]+)\s+"[^"]*"')
_LINK_TITLE_SINGLE = re.compile(r"(\[[^\]]*\]\([^)]+)\s+'[^']*'")

_HIDDEN_ATTRIBUTES = [
    re.compile(rf"\s{name}\s*=\s*{value}", re.IGNORECASE)
    for name in ("alt", "title", "aria-label", r"data-[a-zA-Z0-9-]+", "placeholder")
    for value in (r"[\"'][^\"']*[\"']", r"[^\s>]+")
]

_DECIMAL_ENTITY = re.compile(r"&#(\d+);")
_HEX_ENTITY = re.compile(r"&#x([0-9a-fA-F]+);")

_TOKEN_PATTERNS = [
    re.compile(r"\bgh[pousr]_[A-Za-z0-9]{36}\b"),
    re.compile(r"\bgithub_pat_[A-Za-z0-9_]{11,221}\b"),
]
REDACTED_TOKEN = "[REDACTED_GITHUB_TOKEN]"


def strip_html_comments(content: str) -> str:
    return _HTML_COMMENT.sub("", content)


def strip_invisible_characters(content: str) -> str:
    """ゼロ幅文字・制御文字・ソフトハイフン・双方向制御文字を除去"""
    content = _ZERO_WIDTH.sub("", content)
    content = _CONTROL_CHARS.sub("", content)
    content = _SOFT_HYPHEN.sub("", content)
    return _BIDI_CONTROLS.sub("", content)


def strip_markdown_image_alt_text(content: str) -> str:
    return _IMAGE_ALT_TEXT.sub("![](", content)


def strip_markdown_link_titles(content: str) -> str:
    content = _LINK_TITLE_DOUBLE.sub(r"\1", content)
    return _LINK_TITLE_SINGLE.sub(r"\1", content)


def strip_hidden_attributes(content: str) -> str:
    """alt / title / aria-label / data-* / placeholder 属性を除去"""
    for pattern in _HIDDEN_ATTRIBUTES:
        content = pattern.sub("", content)
    return content


def _printable_or_empty(code: int) -> str:
    return chr(code) if 32 <= code <= 126 else ""


def normalize_html_entities(content: str) -> str:
    """数値文字参照を展開する（印字可能 ASCII 以外は削除）"""
    content = _DECIMAL_ENTITY.sub(lambda m: _printable_or_empty(int(m.group(1))), content)
    return _HEX_ENTITY.sub(lambda m: _printable_or_empty(int(m.group(1), 16)), content)


def redact_tokens(content: str) -> str:
    for pattern in _TOKEN_PATTERNS:
        content = pattern.sub(REDACTED_TOKEN, content)
    return content


def sanitize_content(content: str) -> str:
    """全てのサニタイズ処理を順に適用する"""
    content = strip_html_comments(content)
    content = strip_invisible_characters(content)
    content = strip_markdown_image_alt_text(content)
    content = strip_markdown_link_titles(content)
    content = strip_hidden_attributes(content)
    content = normalize_html_entities(content)
    return redact_tokens(content)
