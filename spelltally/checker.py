"""高レベル API: テキスト/ファイル/パス群に対する誤記集計

- トークン分割 (既定は空白の連続をまとめる)
- モデルの修正候補と大文字小文字を無視して比較し、異なれば誤記として数える
- バッチ: globで展開したファイルを順に検査し、読めないファイルは記録して続行
- バッチ結果のファイル単位キャッシュ
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from tqdm import tqdm

from .cache import DEFAULT_CACHE, load_cache, save_cache, file_fingerprint
from .errors import FileReadError, PathError
from .file_scanner import expand_pattern, read_text
from .model import SpellModel
from .report import parse_records, to_records
from .tokenizer import tokenize
from .typos import ErrorTable, Typo, add_error, merge_tables


@dataclass
class BatchResult:
    counts: ErrorTable = field(default_factory=Counter)
    failures: List[FileReadError] = field(default_factory=list)
    files: int = 0
    cache_error: str | None = None


def check_text(text: str, model: SpellModel, collapse_whitespace: bool = True) -> ErrorTable:
    errors: ErrorTable = Counter()
    for word in tokenize(text, collapse_whitespace=collapse_whitespace):
        checked = model.suggest(word)
        # 候補なし = モデルが知らない語。誤記とはみなさない
        if not checked:
            continue
        if word.lower() != checked.lower():
            add_error(errors, Typo(word, checked))
    return errors


def check_file(path: str | Path, model: SpellModel, collapse_whitespace: bool = True) -> ErrorTable:
    return check_text(read_text(path), model, collapse_whitespace=collapse_whitespace)


def check_paths(
    pattern: str,
    model: SpellModel,
    collapse_whitespace: bool = True,
    use_cache: bool = False,
    model_key: str | None = None,
    progress: bool = False,
) -> BatchResult:
    files = expand_pattern(pattern)
    if not files:
        raise PathError(pattern)

    use_cache = use_cache and model_key is not None
    cache = load_cache(str(Path.cwd()), model_key) if use_cache else {}
    # 今回の対象ファイルの分だけを書き戻す
    kept: dict = {}
    result = BatchResult(files=len(files))
    tables: List[ErrorTable] = []

    for f in tqdm(files, desc="checking", unit="file", disable=not progress):
        key = str(f)
        fp = None
        if use_cache:
            try:
                fp = file_fingerprint(f)
            except OSError:
                fp = None
            entry = cache.get(key)
            if fp is not None and isinstance(entry, dict) and entry.get("fingerprint") == fp:
                tables.append(parse_records(entry.get("counts", [])))
                kept[key] = entry
                continue
        try:
            table = check_file(f, model, collapse_whitespace=collapse_whitespace)
        except FileReadError as e:
            result.failures.append(e)
            continue
        tables.append(table)
        if use_cache and fp is not None:
            kept[key] = {"fingerprint": fp, "counts": to_records(table)}

    if use_cache:
        # キャッシュは任意機能。書けなくても結果は返す
        try:
            save_cache(str(Path.cwd()), model_key, kept)
        except OSError as e:
            result.cache_error = f"{DEFAULT_CACHE}: {e.strerror or e}"

    result.counts = merge_tables(*tables)
    return result


__all__ = ["check_text", "check_file", "check_paths", "BatchResult"]
