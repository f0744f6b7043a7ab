from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import numpy as np

KEY_SIZE = 16


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Seeded generator for keys, IVs and prefixes; None draws OS entropy."""
    return np.random.default_rng(seed)


def random_bytes(rng: np.random.Generator, n: int) -> bytes:
    return rng.bytes(n) if n > 0 else b""


def random_key(rng: np.random.Generator, size: int = KEY_SIZE) -> bytes:
    return random_bytes(rng, size)


def random_int(rng: np.random.Generator, low: int, high: int) -> int:
    """Uniform integer in [low, high] inclusive."""
    return int(rng.integers(low, high + 1))


def utc_timestamp() -> str:
    # e.g. 2026-01-08T12-34-56Z (safe for filenames)
    return time.strftime("%Y-%m-%dT%H-%M-%SZ", time.gmtime())


@dataclass(frozen=True)
class RunPaths:
    run_dir: Path
    results_json: Path
    summary_txt: Path


def make_run_dir(runs_root: str | Path, run_name: str) -> RunPaths:
    runs_root = Path(runs_root)
    runs_root.mkdir(parents=True, exist_ok=True)
    safe = "".join(ch if ch.isalnum() or ch in {"-", "_"} else "_" for ch in run_name.strip())[:60]
    run_dir = runs_root / f"{utc_timestamp()}_{safe}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return RunPaths(
        run_dir=run_dir,
        results_json=run_dir / "results.json",
        summary_txt=run_dir / "summary.txt",
    )


def write_json(path: str | Path, obj: Any) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, sort_keys=True), encoding="utf-8")


def write_text(path: str | Path, text: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
