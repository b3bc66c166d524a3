from __future__ import annotations
"""
学習用単語リストのブートストラップ用スクリプト。
- 指定したファイル/ディレクトリ/globのテキストを走査し、単語を集めて頻度辞書を生成。
- 生成物は 1行1語 のプレーンテキスト(dict.txt)として出力し、'check train --dictionary' に渡せる。

使い方(例):
  python tools/build_dict.py corpus/ --out dict.txt --min-freq 3

注意:
- バイナリ/非対応エンコーディングは自動でスキップされます。
"""
import argparse
from collections import Counter
import re
from typing import Iterable

from spelltally.errors import FileReadError
from spelltally.file_scanner import expand_pattern, read_text

_WORD_RE = re.compile(r"[A-Za-z]+(?:'[A-Za-z]+)?")


def simple_tokens(text: str):
    for m in _WORD_RE.finditer(text):
        yield m.group(0)


def gather_tokens(paths: Iterable[str], lower: bool = True) -> Counter:
    cnt: Counter = Counter()
    for pattern in paths:
        for p in expand_pattern(pattern):
            try:
                s = read_text(p)
            except FileReadError:
                continue
            for tok in simple_tokens(s):
                cnt[tok.lower() if lower else tok] += 1
    return cnt


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument('paths', nargs='+', help='走査するファイル/ディレクトリ/glob')
    ap.add_argument('--out', default='dict.txt', help='出力ファイル(既定: dict.txt)')
    ap.add_argument('--min-freq', type=int, default=2, help='採用する最小出現回数(既定:2)')
    ap.add_argument('--keep-case', action='store_true', help='小文字化せずに数える')
    args = ap.parse_args()

    cnt = gather_tokens(args.paths, lower=not args.keep_case)
    words = [w for w, c in cnt.items() if c >= args.min_freq]
    words.sort()
    with open(args.out, 'w', encoding='utf-8') as f:
        f.write("\n".join(words))
    print(f"Wrote {len(words)} words to {args.out}")


if __name__ == '__main__':
    main()
