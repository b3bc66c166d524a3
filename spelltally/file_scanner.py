"""入力ファイルの解決と読み込み。

- 単一パス/ディレクトリ/globパターンを、実在ファイルの整列済みリストへ展開
- バイナリらしいものは読み込みエラー扱い(ヒューリスティック)
"""
from __future__ import annotations
import codecs
import glob
import os
from pathlib import Path
from typing import List

from .errors import FileReadError

BINARY_BYTES = set(range(0, 9)) | {11, 12} | set(range(14, 32))
ENCODINGS = ("utf-8-sig", "cp1252")
_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


def is_probably_text(data: bytes, threshold: float = 0.30) -> bool:
    if not data:
        return True
    non_text = sum(b in BINARY_BYTES for b in data)
    ratio = non_text / len(data)
    return ratio < threshold


def decode_bytes(raw: bytes, encodings=ENCODINGS) -> str | None:
    if raw.startswith(_UTF16_BOMS):
        try:
            return raw.decode("utf-16")
        except UnicodeDecodeError:
            return None
    for enc in encodings:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    return None


def read_text(path: str | os.PathLike[str], encodings=ENCODINGS) -> str:
    p = Path(path)
    try:
        raw = p.read_bytes()
    except OSError as e:
        raise FileReadError(str(p), e.strerror or str(e)) from e
    if not raw.startswith(_UTF16_BOMS) and not is_probably_text(raw):
        raise FileReadError(str(p), "looks like a binary file")
    text = decode_bytes(raw, encodings)
    if text is None:
        raise FileReadError(str(p), "unable to decode with " + ", ".join(encodings))
    return text


def path_exists(pattern: str) -> bool:
    """パスが存在するか、globが1件以上に一致すれば True。"""
    if os.path.exists(pattern):
        return True
    return bool(glob.glob(pattern, recursive=True))


def expand_pattern(pattern: str) -> List[Path]:
    path = Path(pattern)
    if path.is_dir():
        found: List[Path] = []
        for root, _dirs, files in os.walk(path):
            for f in files:
                found.append(Path(root) / f)
        return sorted(found)
    if path.is_file():
        return [path]
    matches = glob.glob(pattern, recursive=True)
    # globがディレクトリを返した場合は対象外
    return sorted(Path(m) for m in matches if not os.path.isdir(m))


__all__ = ["expand_pattern", "path_exists", "read_text", "decode_bytes", "is_probably_text"]
