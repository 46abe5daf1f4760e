"""
コメント収集モジュール
"""
import asyncio
from typing import Awaitable, Callable, List, Optional

from .batch_writer import BatchWriter
from .comment_filter import CommentFilter
from .config import Config
from .page_fetcher import PageFetcher
from .sanitizer import sanitize_text
from utils.logger import get_logger

logger = get_logger(__name__)

BatchCallback = Callable[[str], Awaitable[None]]

class CommentHarvester:
    """ページングしながら動画の全コメントを収集するクラス"""

    def __init__(self, fetcher: PageFetcher, writer: BatchWriter,
                 comment_filter: Optional[CommentFilter] = None,
                 batch_size: int = Config.BATCH_SIZE):
        """
        初期化

        Args:
            fetcher: コメント取得
            writer: バッチファイル書き込み
            comment_filter: スパム除外フィルター
            batch_size: 1バッチあたりのコメント数
        """
        self.fetcher = fetcher
        self.writer = writer
        self.comment_filter = comment_filter or CommentFilter()
        self.batch_size = batch_size

    def _clean(self, items: List[str]) -> List[str]:
        """クリーニングとフィルタリングを適用する"""
        cleaned = (sanitize_text(text) for text in items)
        return [text for text in cleaned if self.comment_filter.is_allowed(text)]

    async def harvest(self, video_id: str,
                      on_batch: Optional[BatchCallback] = None) -> List[str]:
        """
        全コメントを収集する

        コメントが batch_size 件たまるごとに先頭 batch_size 件を
        comments_batch_<n>.txt に書き出す。バッファとバッチ番号は呼び出しごとに独立。

        Args:
            video_id: 動画ID
            on_batch: バッチファイル書き込み後に呼ばれるコールバック

        Returns:
            List[str]: 最後のバッチ以降に残ったコメント（取得順）

        Raises:
            FetchFailed: コメント取得に失敗した場合
            IOFailure: バッチファイルの書き込みに失敗した場合
        """
        buffer: List[str] = []
        page_token = ""
        batch_count = 0
        page_count = 0

        while True:
            page = await self.fetcher.fetch_page(video_id, page_token)
            page_count += 1
            buffer.extend(self._clean(page.items))
            logger.debug(f"{video_id}: page {page_count}, {len(page.items)} items, buffer {len(buffer)}")

            if len(buffer) >= self.batch_size:
                batch_count += 1
                batch, buffer = buffer[:self.batch_size], buffer[self.batch_size:]
                path = await asyncio.to_thread(
                    self.writer.write, batch, Config.BATCH_FILENAME.format(batch_count)
                )
                if on_batch:
                    await on_batch(path)

            if not page.has_next:
                break
            page_token = page.next_page_token

        logger.info(f"コメント収集が完了しました: {video_id} ({page_count}ページ, {batch_count}バッチ, 残り{len(buffer)}件)")
        return buffer
