import pytest
from pydantic import ValidationError

from oraclelab.attack.cryptanalysis import frequency_alphabet, sequential_alphabet
from oraclelab.config import Settings, load_settings

_ENV_VARS = [
    "ORACLELAB_SEED",
    "ORACLELAB_FILLER",
    "ORACLELAB_MAX_BLOCK_PROBE",
    "ORACLELAB_CANDIDATE_ORDER",
    "ORACLELAB_SECRET_PATH",
    "ORACLELAB_RUNS_DIR",
    "ORACLELAB_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield monkeypatch
    load_settings.cache_clear()


def test_defaults(clean_env):
    s = load_settings()
    assert s.global_seed == 1337
    assert s.filler == b"A"
    assert s.max_block_probe == 255
    assert s.candidate_order == "frequency"
    assert s.alphabet() == frequency_alphabet()
    assert s.secret_path is None
    assert s.runs_dir == "runs"
    assert s.log_level == "INFO"


def test_environment_overrides(clean_env):
    clean_env.setenv("ORACLELAB_SEED", "7")
    clean_env.setenv("ORACLELAB_FILLER", "B")
    clean_env.setenv("ORACLELAB_CANDIDATE_ORDER", "Sequential")
    clean_env.setenv("ORACLELAB_SECRET_PATH", "data/12.txt")
    clean_env.setenv("ORACLELAB_LOG_LEVEL", "debug")
    s = load_settings()
    assert s.global_seed == 7
    assert s.filler == b"B"
    assert s.candidate_order == "sequential"
    assert s.alphabet() == sequential_alphabet()
    assert s.secret_path == "data/12.txt"
    assert s.log_level == "DEBUG"


def test_load_settings_is_cached(clean_env):
    assert load_settings() is load_settings()


@pytest.mark.parametrize("kwargs", [
    {"candidate_order": "random"},
    {"filler_byte": "AB"},
    {"filler_byte": ""},
    {"filler_byte": "Ā"},
    {"max_block_probe": 0},
    {"max_block_probe": 256},
])
def test_invalid_settings(kwargs):
    with pytest.raises(ValidationError):
        Settings(**kwargs)
