from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .attack.cryptanalysis import frequency_alphabet, sequential_alphabet

CANDIDATE_ORDERS = ("frequency", "sequential")


class Settings(BaseModel):
    # Reproducibility
    global_seed: int = Field(default=1337)

    # Attack inputs
    filler_byte: str = Field(default="A", min_length=1, max_length=1, description="Byte used to build probes")
    max_block_probe: int = Field(default=255, ge=1, le=255)
    candidate_order: str = Field(default="frequency")

    # Paths
    secret_path: Optional[str] = Field(default=None, description="Base64 file holding the unknown suffix")
    runs_dir: str = Field(default="runs")

    log_level: str = Field(default="INFO")

    @field_validator("candidate_order")
    @classmethod
    def _known_order(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in CANDIDATE_ORDERS:
            raise ValueError(f"candidate_order must be one of {CANDIDATE_ORDERS}, got {v!r}")
        return v

    @field_validator("filler_byte")
    @classmethod
    def _single_byte(cls, v: str) -> str:
        if ord(v) > 0xFF:
            raise ValueError(f"filler_byte must fit in one byte, got {v!r}")
        return v

    @property
    def filler(self) -> bytes:
        return self.filler_byte.encode("latin-1")

    def alphabet(self) -> bytes:
        if self.candidate_order == "sequential":
            return sequential_alphabet()
        return frequency_alphabet()


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    return Settings(
        global_seed=int(os.getenv("ORACLELAB_SEED", "1337")),
        filler_byte=os.getenv("ORACLELAB_FILLER", "A"),
        max_block_probe=int(os.getenv("ORACLELAB_MAX_BLOCK_PROBE", "255")),
        candidate_order=os.getenv("ORACLELAB_CANDIDATE_ORDER", "frequency"),
        secret_path=os.getenv("ORACLELAB_SECRET_PATH") or None,
        runs_dir=os.getenv("ORACLELAB_RUNS_DIR", "runs"),
        log_level=os.getenv("ORACLELAB_LOG_LEVEL", "INFO").upper(),
    )
