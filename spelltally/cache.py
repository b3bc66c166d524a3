"""バッチ検査結果のファイル単位キャッシュ。

モデルや検査オプションが変わった場合 (model キー不一致) はキャッシュ全体を無視する。
保存時は直近のバッチで対象になったファイルの分だけが残る。
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Any

DEFAULT_CACHE = ".spelltally_cache.json"


def load_cache(root: str, model_key: str, filename: str = DEFAULT_CACHE) -> Dict[str, Any]:
    p = Path(root) / filename
    if not p.is_file():
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    if not isinstance(data, dict) or data.get("model") != model_key:
        return {}
    files = data.get("files")
    return files if isinstance(files, dict) else {}


def save_cache(root: str, model_key: str, files: Dict[str, Any], filename: str = DEFAULT_CACHE) -> None:
    p = Path(root) / filename
    data = {"model": model_key, "files": files}
    p.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def file_fingerprint(path: Path) -> str:
    stat = path.stat()
    return f"{stat.st_mtime_ns}:{stat.st_size}"


def model_key(model_path: str, **options: Any) -> str:
    """モデルファイルと検査オプションからキャッシュの識別キーを作る。"""
    p = Path(model_path)
    opts = ",".join(f"{k}={options[k]}" for k in sorted(options))
    return f"{p.resolve()}|{file_fingerprint(p)}|{opts}"


__all__ = ["load_cache", "save_cache", "file_fingerprint", "model_key", "DEFAULT_CACHE"]
