"""学習用単語リストの読み込み。

形式:
- プレーンテキスト: 1行1語。空行と先頭#のコメント行は無視。
- JSON: ["word", ...] または {"words": ["word", ...]}
- YAML: JSON と同じ構造

重複は出現回数として学習に使うため除去しない。
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Iterable, List

import yaml

from .errors import PathError
from .file_scanner import decode_bytes


def _words_from_data(data, source: str) -> List[str]:
    if isinstance(data, dict):
        data = data.get("words")
    if not isinstance(data, list):
        raise ValueError(f"{source}: 単語リストは配列、または words キーを持つ辞書である必要があります")
    return [str(w).strip() for w in data if w is not None and str(w).strip()]


def load_words(path: str | Path) -> List[str]:
    p = Path(path)
    if not p.is_file():
        raise PathError(str(p))
    text = decode_bytes(p.read_bytes())
    if text is None:
        raise ValueError(f"{p}: unable to decode dictionary")
    suffix = p.suffix.lower()
    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"{p}: invalid JSON: {e}") from e
        return _words_from_data(data, str(p))
    if suffix in {".yaml", ".yml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"{p}: invalid YAML: {e}") from e
        return _words_from_data(data, str(p))
    words: List[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        words.append(line)
    return words


def filter_words(words: Iterable[str]) -> List[str]:
    """アポストロフィを含む語 (don't 等) を除外する。"""
    return [w for w in words if "'" not in w]


__all__ = ["load_words", "filter_words"]
