from __future__ import annotations
from typing import List


def tokenize(text: str, collapse_whitespace: bool = True) -> List[str]:
    """テキストを単語トークンに分割する。

    collapse_whitespace=False の場合は旧来の挙動を再現する:
    改行を空白に置換してから半角スペース1文字で分割するため、
    連続スペースは空トークンになり、タブはトークン内に残る。
    """
    if collapse_whitespace:
        return text.split()
    return text.replace("\n", " ").split(" ")

__all__ = ["tokenize"]
