"""
設定管理モジュール
"""
import os
from dotenv import load_dotenv

# 環境変数の読み込み
load_dotenv()

class Config:
    """設定管理クラス"""
    
    # API Keys
    TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
    YOUTUBE_API_KEY = os.getenv("YOUTUBE_API_KEY") or os.getenv("GOOGLE_API_KEY")
    
    # Storage Paths
    STORAGE_DIR = os.getenv("STORAGE_DIR", "storage")
    COMMENTS_DIR = os.getenv("COMMENTS_DIR", os.path.join(STORAGE_DIR, "comments"))
    DB_PATH = os.getenv("DB_PATH", os.path.join(STORAGE_DIR, "users.db"))
    
    # Harvest Settings
    PAGE_SIZE = 100  # commentThreads.list の上限
    BATCH_SIZE = int(os.getenv("BATCH_SIZE", "1000"))
    FINAL_FILENAME = "comments_final.txt"
    BATCH_FILENAME = "comments_batch_{}.txt"
    
    # Retention Settings
    MAX_STORED_FILES = int(os.getenv("MAX_STORED_FILES", "5"))
    RETENTION_POLICY = os.getenv("RETENTION_POLICY", "wipe_all")  # "wipe_all" or "keep_newest"
    
    # Progress Settings
    PROGRESS_INTERVAL = float(os.getenv("PROGRESS_INTERVAL", "0.5"))
    
    # スパム判定キーワード
    SPAM_KEYWORDS = (
        "subscribe", "views", "SEO", "tags",
        "audience", "increase", "followers", "promote",
    )
    
    @classmethod
    def validate(cls):
        """設定の検証"""
        required_vars = [
            "TELEGRAM_BOT_TOKEN",
            "YOUTUBE_API_KEY",
        ]
        
        missing_vars = [var for var in required_vars if not getattr(cls, var)]
        if missing_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")
        
        if cls.RETENTION_POLICY not in ("wipe_all", "keep_newest"):
            raise ValueError(f"Invalid RETENTION_POLICY: {cls.RETENTION_POLICY}")
        
        # ディレクトリの作成
        os.makedirs(cls.STORAGE_DIR, exist_ok=True)
        os.makedirs(cls.COMMENTS_DIR, exist_ok=True)
        os.makedirs(os.path.dirname(os.path.abspath(cls.DB_PATH)), exist_ok=True)
