import importlib.util
import json
from pathlib import Path

import pytest

from oraclelab.config import Settings
from oraclelab.exercises import (
    ExerciseReport,
    ExerciseResult,
    list_exercises,
    run_all,
    run_exercise,
)

SHORT_SECRET = b"Did you stop? No, I just drove by\n"

ALL_EXERCISES = [
    "aes_known_answer",
    "aes_roundtrip",
    "pkcs7_padding",
    "cbc_roundtrip",
    "mode_detection",
    "byte_at_a_time",
    "cut_and_paste",
    "byte_at_a_time_prefix",
    "padding_validation",
]


@pytest.fixture
def settings():
    return Settings()


def test_registry_lists_every_exercise():
    assert list_exercises() == ALL_EXERCISES


@pytest.mark.parametrize("name", ALL_EXERCISES)
def test_each_exercise_passes(settings, name):
    result = run_exercise(name, settings, seed=2026, secret=SHORT_SECRET, vectors=20)
    assert isinstance(result, ExerciseResult)
    assert result.name == name
    assert result.passed, result.detail
    assert result.elapsed_seconds >= 0


def test_attack_exercises_count_queries(settings):
    result = run_exercise("byte_at_a_time", settings, seed=1, secret=SHORT_SECRET)
    assert result.passed
    assert result.queries > len(SHORT_SECRET)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_prefix_exercise_across_seeds(settings, seed):
    assert run_exercise("byte_at_a_time_prefix", settings, seed=seed, secret=SHORT_SECRET).passed


def test_sequential_candidate_order(settings):
    seq = Settings(candidate_order="sequential")
    assert run_exercise("byte_at_a_time", seq, seed=5, secret=SHORT_SECRET).passed


def test_byte_at_a_time_secret_starting_with_filler(settings):
    result = run_exercise("byte_at_a_time", settings, seed=3, secret=b"All your base\n")
    assert result.passed, result.detail
    assert "prefix=0" in result.detail



def test_unknown_exercise_raises(settings):
    with pytest.raises(KeyError):
        run_exercise("padding_oracle", settings)
    with pytest.raises(KeyError):
        run_all(settings, ["aes_known_answer", "nope"])


def test_run_all_report(settings):
    calls = []
    report = run_all(
        settings,
        ["aes_known_answer", "pkcs7_padding", "padding_validation"],
        seed=9,
        progress_callback=lambda name, i, total: calls.append((name, i, total)),
    )
    assert isinstance(report, ExerciseReport)
    assert report.all_passed
    assert report.seed == 9
    assert calls == [("aes_known_answer", 0, 3), ("pkcs7_padding", 1, 3), ("padding_validation", 2, 3)]

    d = report.to_dict()
    assert d["summary"] == {"total": 3, "passed": 3, "all_passed": True, "failing": []}
    assert "3/3 exercises pass" in report.to_summary()


def test_secret_path_setting(tmp_path):
    path = tmp_path / "secret.b64"
    path.write_bytes(b"RGlkIHlvdSBzdG9wPyBObywg\nSSBqdXN0IGRyb3ZlIGJ5Cg==\n")
    settings = Settings(secret_path=str(path))
    assert run_exercise("byte_at_a_time", settings, seed=3).passed


def _load_script():
    path = Path(__file__).parent.parent / "scripts" / "run_exercises.py"
    spec = importlib.util.spec_from_file_location("run_exercises", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_cli_writes_results(tmp_path, capsys):
    script = _load_script()
    code = script.main([
        "--exercises", "aes_known_answer", "padding_validation",
        "--output-dir", str(tmp_path),
        "--seed", "11",
    ])
    assert code == 0

    run_dirs = list(tmp_path.iterdir())
    assert len(run_dirs) == 1
    data = json.loads((run_dirs[0] / "results.json").read_text(encoding="utf-8"))
    assert data["seed"] == 11
    assert [e["name"] for e in data["exercises"]] == ["aes_known_answer", "padding_validation"]
    assert (run_dirs[0] / "summary.txt").exists()
    assert "2/2 exercises pass" in capsys.readouterr().out


def test_cli_list(capsys):
    script = _load_script()
    assert script.main(["--list"]) == 0
    assert capsys.readouterr().out.split() == ALL_EXERCISES
