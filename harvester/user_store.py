"""
ユーザー送信履歴ストアモジュール
"""
import sqlite3
from contextlib import closing
from typing import Optional
from urllib.parse import quote, unquote

from .config import Config
from .exceptions import StoreFailure
from .models import UserRecord
from utils.logger import get_logger

logger = get_logger(__name__)

LINK_SEPARATOR = ","
# 区切り文字を含む URL も1件として保存できるようエスケープする
LINK_SAFE_CHARS = ":/?=&"

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS users (
    chat_id INTEGER PRIMARY KEY,
    links TEXT,
    link_count INTEGER DEFAULT 0
)
"""

UPSERT_SQL = """
INSERT INTO users (chat_id, links, link_count) VALUES (?, ?, 1)
ON CONFLICT(chat_id) DO UPDATE SET
    links = CASE
        WHEN users.links IS NULL OR users.links = '' THEN excluded.links
        ELSE users.links || ',' || excluded.links
    END,
    link_count = users.link_count + 1
"""

class UserStore:
    """SQLite にユーザーごとの送信リンクを保存するクラス

    メソッドはブロッキングなので、イベントループからは asyncio.to_thread で呼ぶ。
    """

    def __init__(self, db_path: str = Config.DB_PATH):
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=30)

    def init(self) -> None:
        """テーブルを作成する"""
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(CREATE_TABLE_SQL)
        except sqlite3.Error as e:
            logger.error(f"Error initializing user store {self.db_path}: {e}")
            raise StoreFailure(message="Failed to initialize user store") from e
        logger.info(f"ユーザーストアを初期化しました: {self.db_path}")

    def get(self, chat_id: int) -> Optional[UserRecord]:
        """
        ユーザーレコードを取得する

        Args:
            chat_id: チャットID

        Returns:
            Optional[UserRecord]: 未登録なら None
        """
        try:
            with closing(self._connect()) as conn:
                row = conn.execute(
                    "SELECT chat_id, links, link_count FROM users WHERE chat_id = ?",
                    (chat_id,)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Error getting user {chat_id}: {e}")
            raise StoreFailure(chat_id, "Failed to get user record") from e

        if row is None:
            return None
        links = [unquote(part) for part in row[1].split(LINK_SEPARATOR)] if row[1] else []
        return UserRecord(chat_id=row[0], links=links, link_count=row[2] or 0)

    def record_submission(self, chat_id: int, link: str) -> UserRecord:
        """
        送信されたリンクを追加する（初回はレコードを作成）

        Args:
            chat_id: チャットID
            link: 送信された動画のURL

        Returns:
            UserRecord: 更新後のレコード
        """
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(UPSERT_SQL, (chat_id, quote(link, safe=LINK_SAFE_CHARS)))
        except sqlite3.Error as e:
            logger.error(f"Error saving link for user {chat_id}: {e}")
            raise StoreFailure(chat_id, "Failed to save link") from e

        record = self.get(chat_id)
        logger.info(f"リンクを保存しました: chat_id={chat_id}, count={record.link_count}")
        return record
