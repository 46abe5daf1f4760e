"""
YouTube コメント取得モジュール
"""
import asyncio
from typing import Any, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .config import Config
from .exceptions import FetchFailed
from .models import CommentPage
from utils.logger import get_logger

logger = get_logger(__name__)

class PageFetcher:
    """commentThreads.list を1ページずつ呼び出すクラス"""
    
    def __init__(self, api_key: Optional[str] = None, client: Any = None,
                 page_size: int = Config.PAGE_SIZE):
        """
        初期化
        
        Args:
            api_key: YouTube Data API キー（省略時は Config.YOUTUBE_API_KEY）
            client: 構築済みの API クライアント（テスト用）
            page_size: 1ページあたりの取得件数
        """
        self.page_size = page_size
        if client is None:
            client = build(
                'youtube', 'v3',
                developerKey=api_key or Config.YOUTUBE_API_KEY,
                cache_discovery=False
            )
        self.youtube = client
    
    async def fetch_page(self, video_id: str, page_token: str = "") -> CommentPage:
        """
        コメントを1ページ取得する
        
        Args:
            video_id: 動画ID
            page_token: 継続トークン（空文字列は先頭ページ）
            
        Returns:
            CommentPage: コメント本文と次ページのトークン
            
        Raises:
            FetchFailed: API 呼び出しに失敗した場合
        """
        params = {
            "part": "snippet",
            "videoId": video_id,
            "maxResults": self.page_size,
        }
        if page_token:
            params["pageToken"] = page_token
        
        try:
            request = self.youtube.commentThreads().list(**params)
            response = await asyncio.get_running_loop().run_in_executor(None, request.execute)
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            logger.error(f"Error fetching comments for {video_id}: HTTP {status}: {e}")
            raise FetchFailed(video_id, status_code=status) from e
        except Exception as e:
            logger.error(f"Error fetching comments for {video_id}: {e}")
            raise FetchFailed(video_id) from e
        
        try:
            items = [
                item['snippet']['topLevelComment']['snippet']['textDisplay']
                for item in response.get('items', [])
            ]
        except (KeyError, TypeError) as e:
            logger.error(f"Unexpected commentThreads response for {video_id}: {e}")
            raise FetchFailed(video_id, "Malformed comments response") from e

        return CommentPage(items=items, next_page_token=response.get('nextPageToken') or None)
