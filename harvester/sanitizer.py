"""
コメント本文のクリーニング
"""
import re

URL_PATTERN = re.compile(r"https?://\S+")
# <br> の前後にあるテキストごと除去する（リンクプレビューの残骸対策）
BREAK_PATTERN = re.compile(r"<br>[^<]*|[^<]*<br>", re.IGNORECASE)


def remove_urls(text: str) -> str:
    return URL_PATTERN.sub("", text)


def remove_break_text(text: str) -> str:
    return BREAK_PATTERN.sub("", text)


def sanitize_text(text: str) -> str:
    """URL を除去したあと、<br> と隣接テキストを除去する"""
    return remove_break_text(remove_urls(text))
