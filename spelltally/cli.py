from __future__ import annotations
import argparse
import sys
import time
import tomllib
from contextlib import contextmanager
from pathlib import Path
from typing import List

from .checker import check_file, check_paths
from .dictionary import load_words, filter_words
from .errors import SpellTallyError, PathError
from .file_scanner import path_exists
from .model import BACKENDS, TrailingByteModel, load_model, train_from_words, symspell_available
from .report import DEFAULT_TARGET, save_results
from .typos import apply_threshold
from . import cache as _cache

MODES = ("batch", "train")
DEFAULT_MODEL_OUTPUT = "wordlist.txt"


def _strict_bool(value) -> bool:
    # TOML の true/false のみ受け付ける ("false" 等の文字列は不可)
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {type(value).__name__}")
    return value


# 設定ファイルのキー -> 引数名 (該当モードに無い引数は無視)
_CONFIG_KEYS = [
    ("target", "target", str),
    ("threshold", "threshold", int),
    ("splitOnSpace", "split_on_space", _strict_bool),
    ("stripTrailingByte", "strip_trailing_byte", _strict_bool),
    ("failOnIssue", "fail_on_issue", _strict_bool),
    ("cache", "no_cache", lambda v: not _strict_bool(v)),
    ("progress", "no_progress", lambda v: not _strict_bool(v)),
    ("backend", "backend", str),
]


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"整数を指定してください: {value}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"1以上を指定してください: {value}")
    return n


def build_parser(mode: str = "file") -> argparse.ArgumentParser:
    if mode == "train":
        p = argparse.ArgumentParser(
            prog="check train",
            description="単語リストからスペルチェック用モデルを学習して保存します",
        )
        p.add_argument("--dictionary", required=True, help="学習に使う単語リスト(1行1語 / JSON / YAML)")
        p.add_argument("--model-output", default=DEFAULT_MODEL_OUTPUT, help=f"モデルの保存先 (既定: {DEFAULT_MODEL_OUTPUT})")
        p.add_argument("--backend", choices=BACKENDS, default="rapidfuzz", help="照合バックエンド (既定: rapidfuzz)")
        p.add_argument("--skip-apostrophes", action="store_true", help="アポストロフィを含む語を学習から除外")
        p.add_argument("--config", help="設定ファイル(TOML: pyproject.toml など)を読み込み、既定値を上書き")
        return p

    if mode == "batch":
        p = argparse.ArgumentParser(
            prog="check batch",
            description="globに一致する全ファイルを検査し、誤記の回数を合算してJSONに保存します",
        )
        p.add_argument("directory", metavar="DIRECTORY", help="検査するディレクトリまたはglobパターン")
        p.add_argument("--no-cache", action="store_true", help="キャッシュを使わず毎回フルスキャン")
        p.add_argument("--no-progress", action="store_true", help="進捗バーを表示しない")
    else:
        p = argparse.ArgumentParser(
            prog="check",
            description="ファイルを単語ごとにスペルチェックし、誤記と修正候補と回数をJSONに保存します",
            epilog="他のモード: 'check batch -h' / 'check train -h'",
        )
        p.add_argument("file", metavar="FILE", help="検査するファイル")
    p.add_argument("--model-path", required=True, help="学習済みモデルのパス")
    p.add_argument("--target", default=DEFAULT_TARGET, help=f"結果の保存先 (既定: {DEFAULT_TARGET})")
    p.add_argument("--threshold", type=_positive_int, default=1, help="この回数未満の誤記は出力しない (既定: 1)")
    p.add_argument("--config", help="設定ファイル(TOML: pyproject.toml など)を読み込み、既定値を上書き")
    p.add_argument("--split-on-space", action="store_true", help="[互換用] 半角スペース1文字で分割する (連続空白をまとめない)")
    p.add_argument("--strip-trailing-byte", action="store_true", help="[互換用] 3文字以上の候補の末尾1文字を取り除く")
    p.add_argument("--fail-on-issue", action="store_true", help="誤記が1件でもあれば終了コード1")
    return p


def apply_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    """TOML の [tool.spelltally] で、既定値のままの引数を補完する。"""
    if not args.config:
        return
    cfg_path = Path(args.config)
    try:
        with cfg_path.open("rb") as f:
            cfg = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"[warn] failed to load config {cfg_path}: {e}", file=sys.stderr)
        return
    tool = cfg.get("tool", {})
    st = tool.get("spelltally", {}) if isinstance(tool, dict) else {}
    if not isinstance(st, dict):
        return
    for key, attr, conv in _CONFIG_KEYS:
        if key not in st or not hasattr(args, attr):
            continue
        if getattr(args, attr) != parser.get_default(attr):
            continue
        try:
            setattr(args, attr, conv(st[key]))
        except (TypeError, ValueError) as e:
            print(f"[warn] invalid config value {key}={st[key]!r}: {e}", file=sys.stderr)
    if getattr(args, "threshold", 1) < 1:
        print("[warn] threshold は1以上である必要があります。1 を使います。", file=sys.stderr)
        args.threshold = 1


@contextmanager
def timed(name: str):
    start = time.perf_counter()
    try:
        yield
    finally:
        print(f"'{name}' took {time.perf_counter() - start:.3f}s")


def _load(args: argparse.Namespace):
    print(f"Loading model '{args.model_path}'")
    with timed("loadModel"):
        model = load_model(args.model_path)
    if args.strip_trailing_byte:
        model = TrailingByteModel(model)
    return model


def _report(counts, args: argparse.Namespace) -> int:
    counts = apply_threshold(counts, args.threshold)
    target = save_results(counts, args.target)
    print(f"Saved {len(counts)} typo(s) to {target}")
    if args.fail_on_issue and counts:
        return 1
    return 0


def run_train(args: argparse.Namespace) -> int:
    if args.backend == "symspell" and not symspell_available():
        print("[warn] --backend symspell が指定されましたが 'symspellpy' が見つかりません。rapidfuzz で学習します。", file=sys.stderr)
        args.backend = "rapidfuzz"
    print(f"Training model using dictionary file {args.dictionary}...")
    print(f"Model will be saved in {args.model_output}")
    with timed("trainModel"):
        words = load_words(args.dictionary)
        if args.skip_apostrophes:
            words = filter_words(words)
        print(f"Training on {len(words)} words. This may take a few minutes...")
        train_from_words(words, args.model_output, backend=args.backend)
    print("Training complete")
    return 0


def run_file(args: argparse.Namespace) -> int:
    if not Path(args.file).exists():
        raise PathError(f"path does not exist: {args.file}")
    model = _load(args)
    with timed("spellcheckFile"):
        counts = check_file(args.file, model, collapse_whitespace=not args.split_on_space)
    return _report(counts, args)


def run_batch(args: argparse.Namespace) -> int:
    if not path_exists(args.directory):
        raise PathError(f"path does not exist: {args.directory}")
    model = _load(args)
    key = None
    if not args.no_cache:
        key = _cache.model_key(
            args.model_path,
            split_on_space=args.split_on_space,
            strip_trailing_byte=args.strip_trailing_byte,
        )
    with timed("spellcheckDir"):
        result = check_paths(
            args.directory,
            model,
            collapse_whitespace=not args.split_on_space,
            use_cache=not args.no_cache,
            model_key=key,
            progress=not args.no_progress,
        )
    print(f"Ran batch job on {result.files} files")
    if result.failures:
        print(f"[warn] {len(result.failures)} file(s) could not be read:", file=sys.stderr)
        for e in result.failures:
            print(f"  {e}", file=sys.stderr)
    if result.cache_error:
        print(f"[warn] failed to save cache {result.cache_error}", file=sys.stderr)
    print("Batch errors calculated, saving results...")
    return _report(result.counts, args)


def main(argv: List[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    mode = "file"
    if argv and argv[0] in MODES:
        mode = argv.pop(0)
    parser = build_parser(mode)
    args = parser.parse_args(argv)
    apply_config(args, parser)
    runner = {"train": run_train, "batch": run_batch}.get(mode, run_file)
    try:
        with timed("main"):
            return runner(args)
    except (SpellTallyError, ValueError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
