"""
コメント収集ボット起動スクリプト
"""
import sys

from bot.telegram_bot import build_app
from harvester.config import Config
from harvester.user_store import UserStore
from utils.logger import get_logger

logger = get_logger(__name__)

def main():
    """メイン関数"""
    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"設定エラー: {e}")
        sys.exit(2)

    # ユーザーストアを初期化
    store = UserStore(Config.DB_PATH)
    store.init()

    app = build_app(Config.TELEGRAM_BOT_TOKEN, store)
    logger.info("ボットを起動しました")

    # ポーリング開始（終了シグナルまでブロック）
    app.run_polling()

if __name__ == "__main__":
    main()
