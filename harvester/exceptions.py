"""
例外定義モジュール

コメント収集処理で発生するエラーの階層を定義する。
"""
from typing import Any, Dict, Optional


class HarvestError(Exception):
    """コメント収集処理の基底例外"""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        初期化
        
        Args:
            message: エラーメッセージ
            details: 追加情報
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidVideoUrl(HarvestError):
    """動画IDを取り出せないURL"""
    
    def __init__(self, url: str, reason: str = "Invalid YouTube URL"):
        super().__init__(reason, {"url": url})
        self.url = url


class FetchFailed(HarvestError):
    """コメントAPIの呼び出しに失敗した"""
    
    def __init__(self, video_id: str, message: str = "Failed to fetch comments",
                 status_code: Optional[int] = None):
        super().__init__(message, {"video_id": video_id, "status_code": status_code})
        self.video_id = video_id
        self.status_code = status_code


class IOFailure(HarvestError):
    """ファイルシステム操作に失敗した"""
    
    def __init__(self, path: str, message: str = "File system operation failed"):
        super().__init__(message, {"path": path})
        self.path = path


class StoreFailure(HarvestError):
    """ユーザーレコードの読み書きに失敗した"""
    
    def __init__(self, chat_id: Optional[int] = None, message: str = "User store operation failed"):
        super().__init__(message, {"chat_id": chat_id} if chat_id is not None else None)
        self.chat_id = chat_id
