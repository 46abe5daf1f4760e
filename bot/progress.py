"""
進捗表示モジュール
"""
import asyncio
from typing import Optional

from utils.logger import get_logger

logger = get_logger(__name__)

class ProgressTicker:
    """一定間隔でメッセージを編集して進捗を示す非同期コンテキストマネージャ

    async with を抜けるとき（成功・例外どちらでも）に定期タスクを必ずキャンセルする。
    """

    def __init__(self, transport, chat_id: int, message_id: int, base_text: str,
                 interval: float = 0.5, max_dots: int = 3):
        """
        初期化

        Args:
            transport: メッセージ送信（edit_text を持つ）
            chat_id: チャットID
            message_id: 編集対象のメッセージID
            base_text: ドットの前に表示する文
            interval: 更新間隔（秒）
            max_dots: ドットの最大数
        """
        self.transport = transport
        self.chat_id = chat_id
        self.message_id = message_id
        self.base_text = base_text
        self.interval = interval
        self.max_dots = max_dots
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None

    def render(self, tick: int) -> str:
        """tick 回目の表示文（ドットは 1..max_dots, 0 を巡回）"""
        return self.base_text + "." * (tick % (self.max_dots + 1))

    async def __aenter__(self) -> "ProgressTicker":
        self._task = asyncio.create_task(self._run())
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.stop()
        return False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def stop(self) -> None:
        """定期タスクを停止する"""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.ticks += 1
            try:
                await self.transport.edit_text(self.chat_id, self.message_id, self.render(self.ticks))
            except Exception as e:
                logger.warning(f"進捗メッセージの更新に失敗しました: {e}")
