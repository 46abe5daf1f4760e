"""
ヘルパー関数モジュール
"""
import os
import re
from typing import List

DIGITS_PATTERN = re.compile(r"(\d+)")


def ensure_directory(directory: str) -> str:
    """
    ディレクトリを作成する（既に存在する場合は何もしない）
    
    Args:
        directory: ディレクトリのパス
        
    Returns:
        str: ディレクトリの絶対パス
    """
    os.makedirs(directory, exist_ok=True)
    return os.path.abspath(directory)


def list_files(directory: str) -> List[str]:
    """
    ディレクトリ直下のファイル一覧を取得する
    
    Args:
        directory: ディレクトリのパス
        
    Returns:
        List[str]: ファイルの絶対パスのリスト（名前順）
    """
    paths = []
    for name in sorted(os.listdir(directory)):
        path = os.path.join(directory, name)
        if os.path.isfile(path):
            paths.append(os.path.abspath(path))
    return paths


def natural_key(path: str) -> list:
    """ファイル名中の数字を数値として比較するキー（batch_2 < batch_10）"""
    name = os.path.basename(path)
    return [int(part) if part.isdecimal() else part for part in DIGITS_PATTERN.split(name)]


def oldest_first(paths: List[str]) -> List[str]:
    """更新日時の古い順に並べ替える（同時刻はファイル名の自然順）"""
    return sorted(paths, key=lambda p: (os.stat(p).st_mtime_ns, natural_key(p)))


def remove_files(paths: List[str]) -> int:
    """
    ファイルをまとめて削除する
    
    Args:
        paths: 削除するファイルのパス
        
    Returns:
        int: 削除したファイル数
    """
    for path in paths:
        os.remove(path)
    return len(paths)
