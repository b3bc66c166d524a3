import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from spelltally.cli import main

PKG = 'spelltally'
ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def trained(tmp_path):
    dictionary = tmp_path / "words.txt"
    dictionary.write_text("the\ncat\nsat\non\nmat\n", encoding="utf-8")
    model = tmp_path / "model.json"
    code = main(["train", f"--dictionary={dictionary}", f"--model-output={model}"])
    assert code == 0
    return model


def _results(path):
    return json.loads(Path(path).read_text(encoding="utf-8"))


def test_check_single_file(tmp_path, trained):
    f = tmp_path / "input.txt"
    f.write_text("Teh cat sat on teh mat", encoding="utf-8")
    target = tmp_path / "results.json"
    code = main([f"--model-path={trained}", str(f), f"--target={target}"])
    assert code == 0
    assert _results(target) == [
        {"wrong": "Teh", "correct": "the", "counts": 1},
        {"wrong": "teh", "correct": "the", "counts": 1},
    ]


def test_check_batch(tmp_path, trained):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.txt").write_text("Teh cat", encoding="utf-8")
    (docs / "b.txt").write_text("Teh mat", encoding="utf-8")
    target = tmp_path / "batch.json"
    code = main([
        "batch", f"--model-path={trained}", str(docs / "*.txt"),
        f"--target={target}", "--no-cache", "--no-progress",
    ])
    assert code == 0
    assert _results(target) == [{"wrong": "Teh", "correct": "the", "counts": 2}]


def test_threshold_filters_rare_typos(tmp_path, trained):
    f = tmp_path / "input.txt"
    f.write_text("Teh Teh caat", encoding="utf-8")
    target = tmp_path / "results.json"
    assert main(["--model-path", str(trained), str(f), "--target", str(target), "--threshold", "2"]) == 0
    assert _results(target) == [{"wrong": "Teh", "correct": "the", "counts": 2}]


def test_threshold_from_config(tmp_path, trained):
    cfg = tmp_path / "pyproject.toml"
    cfg.write_text("[tool.spelltally]\nthreshold = 2\nfailOnIssue = true\n", encoding="utf-8")
    f = tmp_path / "input.txt"
    f.write_text("Teh Teh caat", encoding="utf-8")
    target = tmp_path / "results.json"
    code = main(["--model-path", str(trained), str(f), "--target", str(target), "--config", str(cfg)])
    assert code == 1
    assert [r["wrong"] for r in _results(target)] == ["Teh"]


def test_fail_on_issue(tmp_path, trained):
    f = tmp_path / "clean.txt"
    f.write_text("the cat sat", encoding="utf-8")
    target = tmp_path / "results.json"
    assert main(["--model-path", str(trained), str(f), "--target", str(target), "--fail-on-issue"]) == 0
    assert _results(target) == []


def test_missing_input_is_fatal(tmp_path, trained):
    code = main(["--model-path", str(trained), str(tmp_path / "nope.txt")])
    assert code == 2
    code = main(["batch", "--model-path", str(trained), str(tmp_path / "*.nothing")])
    assert code == 2


def test_missing_model_is_fatal(tmp_path, capsys):
    f = tmp_path / "input.txt"
    f.write_text("Teh", encoding="utf-8")
    code = main(["--model-path", str(tmp_path / "missing.model"), str(f)])
    assert code == 2
    assert "[error]" in capsys.readouterr().err


def test_write_failure_is_fatal(tmp_path, trained):
    f = tmp_path / "input.txt"
    f.write_text("Teh", encoding="utf-8")
    code = main(["--model-path", str(trained), str(f), "--target", str(tmp_path / "no" / "such" / "dir.json")])
    assert code == 2


def test_bad_arguments_exit_nonzero():
    with pytest.raises(SystemExit) as exc:
        main(["train"])
    assert exc.value.code != 0
    with pytest.raises(SystemExit) as exc:
        main(["--model-path", "m", "f", "--threshold", "0"])
    assert exc.value.code != 0


def test_smoke_cli_module(tmp_path):
    # python -m で起動できること
    dictionary = tmp_path / "words.txt"
    dictionary.write_text("hello\nworld\n", encoding="utf-8")
    model = tmp_path / "model.json"
    sample = tmp_path / "sample.txt"
    sample.write_text("helo world", encoding="utf-8")
    env = dict(os.environ, PYTHONPATH=str(ROOT))
    exe = [sys.executable, '-m', PKG + '.cli']
    cp = subprocess.run(exe + ['train', '--dictionary', str(dictionary), '--model-output', str(model)],
                        cwd=str(tmp_path), capture_output=True, text=True, env=env)
    assert cp.returncode == 0, cp.stderr
    assert 'Training complete' in cp.stdout
    cp = subprocess.run(exe + ['--model-path', str(model), str(sample)],
                        cwd=str(tmp_path), capture_output=True, text=True, env=env)
    assert cp.returncode == 0, cp.stderr
    assert _results(tmp_path / 'results.json') == [{"wrong": "helo", "correct": "hello", "counts": 1}]


def test_train_into_missing_directory_is_fatal(tmp_path, capsys):
    dictionary = tmp_path / "words.txt"
    dictionary.write_text("the\ncat\n", encoding="utf-8")
    code = main(["train", f"--dictionary={dictionary}", f"--model-output={tmp_path / 'no' / 'model.json'}"])
    assert code == 2
    assert "[error]" in capsys.readouterr().err


def test_train_broken_dictionary_is_fatal(tmp_path, capsys):
    broken = tmp_path / "words.yaml"
    broken.write_text("- the\n- [cat\n", encoding="utf-8")
    code = main(["train", f"--dictionary={broken}", f"--model-output={tmp_path / 'm.json'}"])
    assert code == 2
    err = capsys.readouterr().err
    assert "[error]" in err and "words.yaml" in err
    bad_json = tmp_path / "words.json"
    bad_json.write_text('{"words": [', encoding="utf-8")
    assert main(["train", f"--dictionary={bad_json}", f"--model-output={tmp_path / 'm.json'}"]) == 2


def test_batch_reports_unreadable_files(tmp_path, trained, capsys):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.txt").write_text("Teh cat", encoding="utf-8")
    (docs / "b.txt").write_bytes(bytes(range(0, 8)) * 16)
    target = tmp_path / "batch.json"
    code = main([
        "batch", f"--model-path={trained}", str(docs / "*.txt"),
        f"--target={target}", "--no-cache", "--no-progress",
    ])
    assert code == 0
    err = capsys.readouterr().err
    assert "[warn] 1 file(s) could not be read:" in err
    assert "b.txt" in err
    assert _results(target) == [{"wrong": "Teh", "correct": "the", "counts": 1}]


def test_unreadable_single_file_is_fatal(tmp_path, trained, capsys):
    f = tmp_path / "blob.bin"
    f.write_bytes(bytes(range(0, 8)) * 16)
    target = tmp_path / "results.json"
    code = main(["--model-path", str(trained), str(f), "--target", str(target)])
    assert code == 2
    assert "[error]" in capsys.readouterr().err
    assert not target.exists()


def test_batch_survives_unwritable_cache(tmp_path, trained, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    # キャッシュのパスがディレクトリなので書き込めない
    (tmp_path / ".spelltally_cache.json").mkdir()
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.txt").write_text("Teh cat", encoding="utf-8")
    target = tmp_path / "batch.json"
    code = main(["batch", f"--model-path={trained}", str(docs / "*.txt"), f"--target={target}", "--no-progress"])
    assert code == 0
    assert "[warn] failed to save cache" in capsys.readouterr().err
    assert _results(target) == [{"wrong": "Teh", "correct": "the", "counts": 1}]


def test_config_rejects_non_boolean_values(tmp_path, trained, capsys):
    cfg = tmp_path / "pyproject.toml"
    cfg.write_text('[tool.spelltally]\nfailOnIssue = "false"\n', encoding="utf-8")
    f = tmp_path / "input.txt"
    f.write_text("Teh", encoding="utf-8")
    target = tmp_path / "results.json"
    code = main(["--model-path", str(trained), str(f), "--target", str(target), "--config", str(cfg)])
    assert code == 0
    assert "[warn] invalid config value failOnIssue" in capsys.readouterr().err
