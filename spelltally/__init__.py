"""spelltally
辞書ベースのスペルチェックで、テキストファイル中の誤記と修正候補を回数つきで集計するツール。

主な提供機能:
- 単語リストからのファジーマッチングモデル学習 (rapidfuzz / symspellpy)
- 単一ファイル / globに一致するファイル群の検査と誤記回数の合算
- 回数の降順に並べた JSON レポート出力
- CLI インターフェース (check / check batch / check train)
"""
from .checker import check_text, check_file, check_paths, BatchResult
from .model import load_model, train_model
from .report import save_results, load_results
from .typos import Typo, ErrorCount, update_counts, merge_tables

__all__ = [
    "check_text",
    "check_file",
    "check_paths",
    "BatchResult",
    "load_model",
    "train_model",
    "save_results",
    "load_results",
    "Typo",
    "ErrorCount",
    "update_counts",
    "merge_tables",
]

__version__ = "0.1.0"
