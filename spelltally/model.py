from __future__ import annotations
"""
ファジーマッチングによる修正候補モデル
- 既定は rapidfuzz の Levenshtein 距離で辞書語彙から最も近い語を提示
- symspellpy があれば SymSpell バックエンドも利用可能 (任意依存)
- 検査側は suggest(word) だけを呼ぶ。テストでは辞書を返すだけのスタブで代替できる

モデルファイル形式:
- rapidfuzz: JSON {"backend": "rapidfuzz", "depth": 3, "threshold": 1, "words": {"word": count, ...}}
- symspell: SymSpell.save_pickle の gzip 圧縮 pickle
"""
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol
import json

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from .dictionary import load_words, filter_words
from .errors import ModelLoadError, ReportWriteError

try:
    from symspellpy import SymSpell, Verbosity  # type: ignore
    _SYMSPELL_AVAILABLE = True
except Exception:
    SymSpell = None  # type: ignore
    Verbosity = None  # type: ignore
    _SYMSPELL_AVAILABLE = False

# 最大編集距離 / 学習時の最小出現回数 (固定値)
DEFAULT_DEPTH = 3
DEFAULT_THRESHOLD = 1

BACKENDS = ("rapidfuzz", "symspell")
_GZIP_MAGIC = b"\x1f\x8b"


class SpellModel(Protocol):
    def suggest(self, word: str) -> Optional[str]:
        ...


def symspell_available() -> bool:
    return _SYMSPELL_AVAILABLE


class FuzzyModel:
    backend = "rapidfuzz"

    def __init__(self, counts: Dict[str, int], depth: int = DEFAULT_DEPTH, threshold: int = DEFAULT_THRESHOLD):
        self.depth = depth
        self.threshold = threshold
        self.counts = {w: int(c) for w, c in counts.items() if w}
        # 小文字化した語 -> 代表表記 (最頻の表記を採用)
        self._canonical: Dict[str, str] = {}
        for w, c in self.counts.items():
            if c < threshold:
                continue
            key = w.lower()
            cur = self._canonical.get(key)
            if cur is None or c > self.counts[cur]:
                self._canonical[key] = w
        self._keys: List[str] = sorted(self._canonical)

    @classmethod
    def train(cls, words: Iterable[str], depth: int = DEFAULT_DEPTH, threshold: int = DEFAULT_THRESHOLD) -> "FuzzyModel":
        counts = Counter(w.strip() for w in words if w and w.strip())
        return cls(dict(counts), depth=depth, threshold=threshold)

    def suggest(self, word: str) -> Optional[str]:
        if not word or not self._keys:
            return None
        query = word.lower()
        exact = self._canonical.get(query)
        if exact is not None:
            return exact
        hits = process.extract(
            query,
            self._keys,
            scorer=Levenshtein.distance,
            score_cutoff=self.depth,
            limit=None,
        )
        if not hits:
            return None
        # 距離が小さい順、同距離なら出現回数の多い順、最後に辞書順
        best, _dist, _idx = min(
            hits,
            key=lambda h: (h[1], -self.counts[self._canonical[h[0]]], h[0]),
        )
        return self._canonical[best]

    def save(self, path: str | Path) -> None:
        data = {
            "backend": self.backend,
            "depth": self.depth,
            "threshold": self.threshold,
            "words": self.counts,
        }
        Path(path).write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    @classmethod
    def load(cls, path: str | Path) -> "FuzzyModel":
        p = Path(path)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ModelLoadError(f"{p}: {e}") from e
        if not isinstance(data, dict) or data.get("backend") != cls.backend or not isinstance(data.get("words"), dict):
            raise ModelLoadError(f"{p}: not a {cls.backend} model file")
        try:
            return cls(
                data["words"],
                depth=int(data.get("depth", DEFAULT_DEPTH)),
                threshold=int(data.get("threshold", DEFAULT_THRESHOLD)),
            )
        except (TypeError, ValueError) as e:
            raise ModelLoadError(f"{p}: {e}") from e


class SymSpellModel:
    backend = "symspell"

    def __init__(self, sym_spell):
        self._sym = sym_spell

    @staticmethod
    def _require():
        if not _SYMSPELL_AVAILABLE:
            raise RuntimeError("symspellpy がインストールされていないため symspell バックエンドは使えません。'pip install symspellpy' を実行してください")

    @classmethod
    def train(cls, words: Iterable[str], depth: int = DEFAULT_DEPTH, threshold: int = DEFAULT_THRESHOLD) -> "SymSpellModel":
        cls._require()
        sym = SymSpell(max_dictionary_edit_distance=depth, count_threshold=threshold)
        for w in words:
            w = w.strip()
            if w:
                sym.create_dictionary_entry(w.lower(), 1)
        return cls(sym)

    def suggest(self, word: str) -> Optional[str]:
        if not word:
            return None
        items = self._sym.lookup(word.lower(), Verbosity.TOP)
        if not items:
            return None
        return items[0].term

    def save(self, path: str | Path) -> None:
        self._sym.save_pickle(str(path))

    @classmethod
    def load(cls, path: str | Path) -> "SymSpellModel":
        if not _SYMSPELL_AVAILABLE:
            raise ModelLoadError(f"{path}: symspell model requires symspellpy")
        sym = SymSpell()
        try:
            ok = sym.load_pickle(str(path))
        except Exception as e:
            raise ModelLoadError(f"{path}: {e}") from e
        if not ok:
            raise ModelLoadError(f"{path}: incompatible symspell model")
        return cls(sym)


class TrailingByteModel:
    """3文字以上の候補から末尾1文字を落とすアダプタ。

    末尾に余計な1バイトを付けて候補を返すモデル向けの互換処理。
    """

    def __init__(self, inner: SpellModel):
        self.inner = inner

    def suggest(self, word: str) -> Optional[str]:
        cand = self.inner.suggest(word)
        if cand and len(cand) > 2:
            cand = cand[:-1]
        return cand


def _model_class(backend: str):
    if backend == FuzzyModel.backend:
        return FuzzyModel
    if backend == SymSpellModel.backend:
        return SymSpellModel
    raise ValueError(f"unknown backend: {backend} (choose from {', '.join(BACKENDS)})")


def detect_backend(path: str | Path) -> str:
    with open(path, "rb") as f:
        head = f.read(2)
    return SymSpellModel.backend if head == _GZIP_MAGIC else FuzzyModel.backend


def load_model(path: str | Path):
    p = Path(path)
    if not p.is_file():
        raise ModelLoadError(f"{p}: model file not found")
    try:
        backend = detect_backend(p)
    except OSError as e:
        raise ModelLoadError(f"{p}: {e}") from e
    return _model_class(backend).load(p)


def train_from_words(words: Iterable[str], output: str | Path, backend: str = FuzzyModel.backend):
    model = _model_class(backend).train(words, depth=DEFAULT_DEPTH, threshold=DEFAULT_THRESHOLD)
    try:
        model.save(output)
    except OSError as e:
        raise ReportWriteError(f"{output}: {e.strerror or e}") from e
    return model


def train_model(
    dictionary: str | Path,
    output: str | Path,
    backend: str = FuzzyModel.backend,
    skip_apostrophes: bool = False,
):
    """単語リストファイルからモデルを学習し、output に保存して返す。"""
    _model_class(backend)
    words = load_words(dictionary)
    if skip_apostrophes:
        words = filter_words(words)
    return train_from_words(words, output, backend=backend)


__all__ = [
    "SpellModel",
    "FuzzyModel",
    "SymSpellModel",
    "TrailingByteModel",
    "load_model",
    "train_model",
    "train_from_words",
    "detect_backend",
    "symspell_available",
    "BACKENDS",
    "DEFAULT_DEPTH",
    "DEFAULT_THRESHOLD",
]
