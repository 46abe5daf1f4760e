"""
チャットごとのセッション状態管理
"""
import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

class SessionState(str, Enum):
    """セッションの状態"""
    IDLE = "idle"
    WAITING_FOR_URL = "waiting_for_url"
    HARVESTING = "harvesting"

@dataclass
class Session:
    """1つのチャットのセッション"""
    chat_id: int
    state: SessionState = SessionState.IDLE

    def begin_harvest(self) -> bool:
        """URL待ちの場合のみ収集中に遷移する"""
        if self.state != SessionState.WAITING_FOR_URL:
            return False
        self.state = SessionState.HARVESTING
        return True

    def finish_harvest(self) -> None:
        self.state = SessionState.WAITING_FOR_URL

@dataclass
class SessionRegistry:
    """チャットID → セッションの対応表"""
    _sessions: Dict[int, Session] = field(default_factory=dict)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def get(self, chat_id: int) -> Session:
        """セッションを取得する（なければ作成）"""
        async with self._lock:
            session = self._sessions.get(chat_id)
            if session is None:
                session = Session(chat_id=chat_id)
                self._sessions[chat_id] = session
            return session

    async def peek(self, chat_id: int) -> Optional[Session]:
        """セッションを取得する（なければ作成せず None）"""
        async with self._lock:
            return self._sessions.get(chat_id)
