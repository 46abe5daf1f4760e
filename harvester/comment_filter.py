"""
コメントフィルターモジュール
"""
from typing import Iterable, Optional

from .config import Config


class CommentFilter:
    """宣伝・スパムコメントの除外フィルター"""
    
    def __init__(self, keywords: Optional[Iterable[str]] = None):
        """
        初期化
        
        Args:
            keywords: 除外キーワード（省略時は Config.SPAM_KEYWORDS）
        """
        source = Config.SPAM_KEYWORDS if keywords is None else keywords
        self.keywords = tuple(k.lower() for k in source)
    
    def is_allowed(self, text: str) -> bool:
        """
        コメントを残すかどうか判定する
        
        Args:
            text: クリーニング済みのコメント
            
        Returns:
            bool: どのキーワードも含まなければ True
        """
        lowered = text.lower()
        return not any(keyword in lowered for keyword in self.keywords)
