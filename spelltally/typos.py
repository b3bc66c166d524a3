"""誤記(Typo)と出現回数の集計。

ErrorTable は ``Counter[Typo]`` 。順序は持たず、出力時に sorted_counts で並べる。
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List

ErrorTable = Counter


@dataclass(frozen=True, order=True)
class Typo:
    wrong: str
    correct: str


@dataclass(frozen=True)
class ErrorCount:
    typo: Typo
    count: int

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"count must be >= 1: {self.count}")

    @property
    def wrong(self) -> str:
        return self.typo.wrong

    @property
    def correct(self) -> str:
        return self.typo.correct


def add_error(table: ErrorTable, typo: Typo, count: int = 1) -> ErrorTable:
    table[typo] += count
    return table


def update_counts(records: Iterable[ErrorCount]) -> ErrorTable:
    """重複キーを含むレコード列を、Typoごとの合計回数にまとめる。"""
    table: ErrorTable = Counter()
    for rec in records:
        add_error(table, rec.typo, rec.count)
    return table


def merge_tables(*tables: ErrorTable) -> ErrorTable:
    merged: ErrorTable = Counter()
    for t in tables:
        for typo, n in t.items():
            add_error(merged, typo, n)
    return merged


def apply_threshold(table: ErrorTable, threshold: int) -> ErrorTable:
    """出現回数が threshold 未満の誤記を除外する。"""
    if threshold < 1:
        raise ValueError(f"threshold must be >= 1: {threshold}")
    return Counter({t: n for t, n in table.items() if n >= threshold})


def sorted_counts(table: ErrorTable) -> List[ErrorCount]:
    # 回数の降順。同数は (wrong, correct) の昇順で固定
    items = sorted(table.items(), key=lambda kv: (-kv[1], kv[0]))
    return [ErrorCount(t, n) for t, n in items if n > 0]


__all__ = [
    "Typo",
    "ErrorCount",
    "ErrorTable",
    "add_error",
    "update_counts",
    "merge_tables",
    "apply_threshold",
    "sorted_counts",
]
