"""
バッチファイル書き込みモジュール
"""
import os
from typing import List, Sequence

from .config import Config
from .exceptions import IOFailure
from utils.helpers import ensure_directory, list_files, oldest_first, remove_files
from utils.logger import get_logger

logger = get_logger(__name__)

WIPE_ALL = "wipe_all"
KEEP_NEWEST = "keep_newest"

class BatchWriter:
    """コメントをテキストファイルに書き出し、保存件数を制限するクラス"""

    def __init__(self, directory: str = Config.COMMENTS_DIR,
                 max_files: int = Config.MAX_STORED_FILES,
                 policy: str = Config.RETENTION_POLICY):
        """
        初期化

        Args:
            directory: 保存先ディレクトリ
            max_files: ディレクトリに残すファイルの上限
            policy: "wipe_all"（上限超過で全削除）または "keep_newest"（新しい順に上限件数を残す）
        """
        if policy not in (WIPE_ALL, KEEP_NEWEST):
            raise ValueError(f"無効な保存ポリシー: {policy}")
        self.directory = directory
        self.max_files = max_files
        self.policy = policy

    def write(self, comments: Sequence[str], filename: str,
              enforce_retention: bool = True) -> str:
        """
        コメントを改行区切りでファイルに書き出す

        Args:
            comments: 書き出すコメント
            filename: ファイル名（同名ファイルは上書き）
            enforce_retention: 書き込み後に保存件数の制限を適用するか

        Returns:
            str: 書き出したファイルの絶対パス

        Raises:
            IOFailure: ファイル操作に失敗した場合
        """
        try:
            directory = ensure_directory(self.directory)
        except OSError as e:
            logger.error(f"Error creating directory {self.directory}: {e}")
            raise IOFailure(self.directory, "Failed to create directory") from e

        file_path = os.path.join(directory, filename)
        try:
            with open(file_path, "w", encoding="utf-8") as f:
                f.write("\n".join(comments))
        except OSError as e:
            logger.error(f"Error writing {file_path}: {e}")
            raise IOFailure(file_path, "Failed to write comments file") from e

        logger.info(f"{len(comments)}件のコメントを書き出しました: {file_path}")

        if enforce_retention:
            self._apply_retention(directory, file_path)
        return file_path

    def _apply_retention(self, directory: str, just_written: str) -> None:
        """保存件数の上限を超えたファイルを削除する"""
        try:
            files = list_files(directory)
            if len(files) <= self.max_files:
                return

            if self.policy == WIPE_ALL:
                # 書き込んだばかりのファイルも含めて全て削除する
                removed = remove_files(files)
            else:
                candidates = [p for p in oldest_first(files) if p != just_written]
                excess = len(files) - self.max_files
                removed = remove_files(candidates[:excess])
        except OSError as e:
            logger.error(f"Error pruning {directory}: {e}")
            raise IOFailure(directory, "Failed to prune stored files") from e

        logger.warning(f"保存ファイル数が上限({self.max_files})を超えたため{removed}件削除しました: {directory}")

    def stored_files(self) -> List[str]:
        """保存ディレクトリ内のファイル一覧"""
        if not os.path.isdir(self.directory):
            return []
        return list_files(self.directory)
