"""
コントローラーモジュール
"""
import asyncio
import os
from typing import Callable, List, Optional

from harvester.batch_writer import BatchWriter
from harvester.comment_harvester import CommentHarvester
from harvester.config import Config
from harvester.exceptions import HarvestError, InvalidVideoUrl, StoreFailure
from harvester.page_fetcher import PageFetcher
from harvester.url_resolver import resolve_video_id
from harvester.user_store import UserStore
from utils.logger import get_logger

from . import messages
from .progress import ProgressTicker
from .sessions import Session, SessionRegistry, SessionState

logger = get_logger(__name__)

HarvesterFactory = Callable[[int], CommentHarvester]

def default_harvester_factory(chat_id: int) -> CommentHarvester:
    """チャットごとの保存先と API クライアントを持つ CommentHarvester を作る"""
    directory = os.path.join(Config.COMMENTS_DIR, str(chat_id))
    return CommentHarvester(PageFetcher(), BatchWriter(directory))

class HarvestController:
    """チャットのコマンドとメッセージを処理するコントローラー"""

    def __init__(self, transport, store: UserStore,
                 harvester_factory: HarvesterFactory = default_harvester_factory,
                 sessions: Optional[SessionRegistry] = None,
                 progress_interval: float = Config.PROGRESS_INTERVAL):
        """
        初期化

        Args:
            transport: メッセージ送信（send_text / edit_text / send_file）
            store: ユーザー送信履歴ストア
            harvester_factory: チャットIDから CommentHarvester を作る関数
            sessions: セッション管理
            progress_interval: 進捗表示の更新間隔（秒）
        """
        self.transport = transport
        self.store = store
        self.harvester_factory = harvester_factory
        self.sessions = sessions or SessionRegistry()
        self.progress_interval = progress_interval

    async def handle_start(self, chat_id: int) -> None:
        """/start コマンド"""
        session = await self.sessions.get(chat_id)
        if session.state != SessionState.HARVESTING:
            session.state = SessionState.WAITING_FOR_URL
        await self.transport.send_text(chat_id, messages.GREETING)

    async def handle_stats(self, chat_id: int) -> None:
        """/stats コマンド"""
        try:
            record = await asyncio.to_thread(self.store.get, chat_id)
        except StoreFailure as e:
            logger.error(f"Error getting stats for {chat_id}: {e}")
            await self.transport.send_text(chat_id, messages.STATS_FAILED)
            return

        if record is None:
            await self.transport.send_text(chat_id, messages.NO_LINKS_YET)
        else:
            await self.transport.send_text(
                chat_id, messages.stats_message(record.link_count, record.links)
            )

    async def handle_text(self, chat_id: int, text: str) -> None:
        """
        テキストメッセージを処理する

        Args:
            chat_id: チャットID
            text: メッセージ本文
        """
        # /start 前のチャットはセッションを作らずに無視する
        session = await self.sessions.peek(chat_id)
        if session is None or session.state == SessionState.IDLE:
            return
        if session.state == SessionState.HARVESTING:
            await self.transport.send_text(chat_id, messages.BUSY)
            return

        url = (text or "").strip()
        if not url.startswith("http"):
            await self.transport.send_text(chat_id, messages.ASK_VALID_URL)
            return

        try:
            video_id = resolve_video_id(url)
        except InvalidVideoUrl as e:
            logger.info(f"Invalid URL from {chat_id}: {e}")
            await self.transport.send_text(chat_id, messages.ASK_VALID_URL)
            return

        if not session.begin_harvest():
            await self.transport.send_text(chat_id, messages.BUSY)
            return
        try:
            await self._harvest_and_deliver(session, url, video_id)
        finally:
            session.finish_harvest()

    async def _harvest_and_deliver(self, session: Session, url: str, video_id: str) -> None:
        """コメントを収集してファイルを送信し、履歴を保存する"""
        chat_id = session.chat_id
        logger.info(f"コメント収集を開始します: chat_id={chat_id}, video_id={video_id}")

        try:
            message_id = await self.transport.send_text(chat_id, messages.HARVEST_STARTED)
            harvester = self.harvester_factory(chat_id)
            batch_paths: List[str] = []

            async def remember_batch(path: str) -> None:
                batch_paths.append(path)

            async with ProgressTicker(self.transport, chat_id, message_id,
                                      messages.PROGRESS_BASE, self.progress_interval):
                remainder = await harvester.harvest(video_id, on_batch=remember_batch)

            await self.transport.edit_text(chat_id, message_id, messages.HARVEST_DONE)
            final_path = await asyncio.to_thread(
                harvester.writer.write, remainder, Config.FINAL_FILENAME, enforce_retention=False
            )
            for path in batch_paths:
                if os.path.exists(path):
                    await self.transport.send_file(chat_id, path)
                else:
                    logger.warning(f"バッチファイルが削除済みのため送信をスキップしました: {path}")
            await self.transport.send_file(chat_id, final_path)
        except HarvestError as e:
            logger.error(f"Error occurred while fetching comments for {chat_id}: {e}")
            await self.transport.send_text(chat_id, messages.HARVEST_FAILED)
            return
        except Exception as e:
            logger.exception(f"Unexpected error while harvesting for {chat_id}: {e}")
            await self.transport.send_text(chat_id, messages.HARVEST_FAILED)
            return

        try:
            await asyncio.to_thread(self.store.record_submission, chat_id, url)
        except StoreFailure as e:
            logger.error(f"Error saving link for {chat_id}: {e}")
