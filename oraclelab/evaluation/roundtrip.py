"""Roundtrip verification P = D(E(P, K), K) for the AES engine and its modes.

Block level: random (plaintext, key) vectors plus every constant-byte block
(00..00 through ff..ff) under a random key. Mode level: padded ECB and CBC
over every plaintext length up to a bound, which covers empty and
block-aligned buffers.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ..cipher.aes import AES128
from ..cipher.modes import Mode, cbc_decrypt_pad, cbc_encrypt_pad, ecb_decrypt_pad, ecb_encrypt_pad
from ..utils.repro import make_rng, random_bytes, random_key


@dataclass
class RoundtripFailure:
    """Details of a single failed roundtrip test vector."""
    vector_index: int
    plaintext_hex: str
    key_hex: str
    ciphertext_hex: str
    decrypted_hex: str       # What decrypt returned (should equal plaintext)
    error: Optional[str]     # Exception message if decrypt/encrypt threw


@dataclass
class RoundtripResult:
    """Aggregate result of one roundtrip run."""
    target: str
    total_vectors: int
    passed: int
    failed: int
    failures: List[RoundtripFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    seed: int = 1337

    @property
    def success_rate(self) -> float:
        return self.passed / self.total_vectors if self.total_vectors > 0 else 0.0

    @property
    def is_perfect(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        status = "PASS" if self.is_perfect else "FAIL"
        return (
            f"[{status}] {self.target}: "
            f"{self.passed}/{self.total_vectors} vectors passed "
            f"({self.elapsed_seconds:.2f}s)"
        )


class _Tally:
    def __init__(self, max_failures_recorded: int):
        self.passed = 0
        self.failed = 0
        self.failures: List[RoundtripFailure] = []
        self._max = max_failures_recorded

    def record(self, i: int, pt: bytes, key: bytes, ct: Optional[bytes], pt2: Optional[bytes],
               error: Optional[str] = None) -> None:
        if error is None and pt == pt2:
            self.passed += 1
            return
        self.failed += 1
        if len(self.failures) < self._max:
            self.failures.append(RoundtripFailure(
                vector_index=i,
                plaintext_hex=pt.hex(),
                key_hex=key.hex(),
                ciphertext_hex=ct.hex() if ct is not None else "<error>",
                decrypted_hex=pt2.hex() if pt2 is not None else "<error>",
                error=error,
            ))


def run_roundtrip_tests(
    *,
    num_vectors: int = 1000,
    seed: int = 1337,
    max_failures_recorded: int = 10,
) -> RoundtripResult:
    """Single-block roundtrips: `num_vectors` random vectors, then all 256 constant blocks.

    Args:
        num_vectors: Number of random (plaintext, key) pairs to test.
        seed: Seed for the vector generator.
        max_failures_recorded: Maximum number of failure details to keep.
    """
    rng = make_rng(seed)
    tally = _Tally(max_failures_recorded)
    start = time.perf_counter()

    vectors = [(random_bytes(rng, 16), random_key(rng)) for _ in range(num_vectors)]
    constant_key = random_key(rng)
    vectors.extend((bytes([b]) * 16, constant_key) for b in range(256))

    for i, (pt, key) in enumerate(vectors):
        ct: Optional[bytes] = None
        try:
            aes = AES128(key)
            ct = aes.encrypt_block(pt)
            tally.record(i, pt, key, ct, aes.decrypt_block(ct))
        except Exception as exc:
            tally.record(i, pt, key, ct, None, error=str(exc))

    return RoundtripResult(
        target="AES-128 block",
        total_vectors=len(vectors),
        passed=tally.passed,
        failed=tally.failed,
        failures=tally.failures,
        elapsed_seconds=round(time.perf_counter() - start, 4),
        seed=seed,
    )


def run_mode_roundtrip_tests(
    mode: Mode,
    *,
    max_length: int = 64,
    seed: int = 1337,
    max_failures_recorded: int = 10,
) -> RoundtripResult:
    """Padded roundtrips in `mode` for every plaintext length 0..max_length."""
    rng = make_rng(seed)
    key = random_key(rng)
    iv = random_key(rng)
    tally = _Tally(max_failures_recorded)
    start = time.perf_counter()

    for n in range(max_length + 1):
        pt = random_bytes(rng, n)
        ct: Optional[bytes] = None
        try:
            if mode is Mode.ECB:
                ct = ecb_encrypt_pad(pt, key)
                pt2 = ecb_decrypt_pad(ct, key)
            else:
                ct = cbc_encrypt_pad(pt, key, iv)
                pt2 = cbc_decrypt_pad(ct, key, iv)
            tally.record(n, pt, key, ct, pt2)
        except Exception as exc:
            tally.record(n, pt, key, ct, None, error=str(exc))

    return RoundtripResult(
        target=f"AES-128 {mode.value} padded",
        total_vectors=max_length + 1,
        passed=tally.passed,
        failed=tally.failed,
        failures=tally.failures,
        elapsed_seconds=round(time.perf_counter() - start, 4),
        seed=seed,
    )
