"""spelltally の例外階層。

ライブラリ関数は例外を送出し、終了コードへの変換は CLI のみが行う。
"""
from __future__ import annotations


class SpellTallyError(Exception):
    """spelltally が送出する例外の基底クラス。"""


class PathError(SpellTallyError, FileNotFoundError):
    """入力パス/globが何にも一致しない。"""


class ModelLoadError(SpellTallyError):
    """モデルファイルが存在しない、または壊れている。"""


class FileReadError(SpellTallyError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ReportWriteError(SpellTallyError):
    """結果JSONの書き込みに失敗した。"""


__all__ = [
    "SpellTallyError",
    "PathError",
    "ModelLoadError",
    "FileReadError",
    "ReportWriteError",
]
