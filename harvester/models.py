"""
データモデルモジュール
"""
from dataclasses import dataclass, field
from typing import List, NewType, Optional

# URL から取り出した動画ID（空文字列にはならない）
VideoReference = NewType("VideoReference", str)

@dataclass
class CommentPage:
    """コメントスレッド1ページ分のデータクラス"""
    items: List[str]
    next_page_token: Optional[str] = None

    @property
    def has_next(self) -> bool:
        return bool(self.next_page_token)

@dataclass
class UserRecord:
    """ユーザー送信履歴データクラス"""
    chat_id: int
    links: List[str] = field(default_factory=list)
    link_count: int = 0
