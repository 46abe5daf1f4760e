"""
ロギングユーティリティモジュール
"""
import logging
import logging.handlers
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _resolve_level(level: Optional[str]) -> int:
    """ログレベル名を logging の定数に変換する"""
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    ロガーを取得する
    
    Args:
        name: ロガー名
        level: ログレベル（省略時は環境変数 LOG_LEVEL）
        
    Returns:
        logging.Logger: 設定済みのロガー
    """
    logger = logging.getLogger(name)
    
    if not logger.handlers:
        log_level = _resolve_level(level)
        logger.setLevel(log_level)
        formatter = logging.Formatter(LOG_FORMAT)
        
        # コンソールハンドラ
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
        
        # ファイルハンドラ（LOG_FILE 指定時のみ）
        log_file = os.getenv("LOG_FILE")
        if log_file:
            os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
    
    return logger
