"""集計結果の JSON 入出力。

形式: [{"wrong": "Teh", "correct": "The", "counts": 2}, ...] (counts の降順)
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, List

from .errors import ReportWriteError
from .typos import ErrorTable, ErrorCount, Typo, sorted_counts, update_counts

DEFAULT_TARGET = "results.json"


def to_records(table: ErrorTable) -> List[Dict[str, Any]]:
    return [
        {"wrong": ec.wrong, "correct": ec.correct, "counts": ec.count}
        for ec in sorted_counts(table)
    ]


def dumps(table: ErrorTable) -> str:
    return json.dumps(to_records(table), ensure_ascii=False, indent=2)


def save_results(table: ErrorTable, target: str | Path = DEFAULT_TARGET) -> Path:
    """結果を target に上書き保存する。書き込み失敗は ReportWriteError。"""
    p = Path(target)
    try:
        p.write_text(dumps(table), encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(f"{p}: {e.strerror or e}") from e
    return p


def parse_records(data: Any) -> ErrorTable:
    if not isinstance(data, list):
        raise ValueError("結果ファイルは配列である必要があります")
    records = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError(f"invalid record: {item!r}")
        try:
            records.append(ErrorCount(Typo(str(item["wrong"]), str(item["correct"])), int(item["counts"])))
        except KeyError as e:
            raise ValueError(f"missing key {e} in record: {item!r}") from e
    return update_counts(records)


def load_results(path: str | Path) -> ErrorTable:
    return parse_records(json.loads(Path(path).read_text(encoding="utf-8")))


__all__ = ["to_records", "dumps", "save_results", "parse_records", "load_results", "DEFAULT_TARGET"]
