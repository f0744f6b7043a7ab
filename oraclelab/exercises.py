"""Named exercises that drive the cipher, the oracles and the attacks end to end.

Each exercise builds its own scenario (hidden key, hidden prefix/suffix) from
a seeded numpy generator, runs against it, and reports whether the result
matches what the scenario hid. ``run_all`` sequences them for the CLI.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .attack.cryptanalysis import (
    detect_mode,
    discover_block_size,
    forge_record,
    guess_prefix_length,
    recover_secret,
)
from .attack.oracle import CountingOracle, EcbOracle, FunctionOracle, ProfileOracle, random_encrypt
from .cipher.aes import AES128
from .cipher.modes import Mode, cbc_decrypt_pad, cbc_encrypt_pad
from .cipher.padding import pad_pkcs7, unpad_pkcs7_checked
from .codec import decode_base64_filter, load_secret
from .config import Settings
from .errors import OracleStructureError
from .evaluation.roundtrip import run_mode_roundtrip_tests, run_roundtrip_tests
from .utils.repro import make_rng, random_bytes, random_int, random_key

logger = logging.getLogger(__name__)

# Unknown suffix used when no secret file is configured.
DEFAULT_SECRET_B64 = b"""\
Um9sbGluJyBpbiBteSA1LjAKV2l0aCBteSByYWctdG9wIGRvd24gc28gbXkg
aGFpciBjYW4gYmxvdwpUaGUgZ2lybGllcyBvbiBzdGFuZGJ5IHdhdmluZyBq
dXN0IHRvIHNheSBoaQpEaWQgeW91IHN0b3A/IE5vLCBJIGp1c3QgZHJvdmUg
YnkK"""

# FIPS-197 appendix C.1
KAT_KEY = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
KAT_PLAINTEXT = bytes.fromhex("00112233445566778899aabbccddeeff")
KAT_CIPHERTEXT = bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a")

MODE_DETECTION_TRIALS = 50


def default_secret() -> bytes:
    return decode_base64_filter(DEFAULT_SECRET_B64)


@dataclass
class ExerciseContext:
    settings: Settings
    rng: np.random.Generator
    secret: bytes
    vectors: int = 1000


@dataclass
class ExerciseResult:
    name: str
    passed: bool
    detail: str
    elapsed_seconds: float = 0.0
    queries: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        q = f", {self.queries} queries" if self.queries else ""
        return f"[{status}] {self.name}: {self.detail} ({self.elapsed_seconds:.2f}s{q})"


@dataclass
class ExerciseReport:
    """All exercise results of one run."""
    timestamp: str = ""
    seed: int = 1337
    results: List[ExerciseResult] = field(default_factory=list)

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def all_passed(self) -> bool:
        return all(r.passed for r in self.results)

    def failing(self) -> List[str]:
        return [r.name for r in self.results if not r.passed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "seed": self.seed,
            "exercises": [r.to_dict() for r in self.results],
            "summary": {
                "total": len(self.results),
                "passed": sum(1 for r in self.results if r.passed),
                "all_passed": self.all_passed,
                "failing": self.failing(),
            },
        }

    def to_summary(self) -> str:
        passed = sum(1 for r in self.results if r.passed)
        lines = [f"Exercise Report {self.timestamp} (seed {self.seed})", "=" * 50]
        lines.append(f"{passed}/{len(self.results)} exercises pass")
        for r in self.results:
            lines.append(f"  {r.summary()}")
        return "\n".join(lines)


# (passed, detail, queries)
Outcome = Tuple[bool, str, int]
ExerciseFn = Callable[[ExerciseContext], Outcome]

_REGISTRY: Dict[str, ExerciseFn] = {}


def exercise(name: str) -> Callable[[ExerciseFn], ExerciseFn]:
    def register(fn: ExerciseFn) -> ExerciseFn:
        _REGISTRY[name] = fn
        return fn
    return register


def list_exercises() -> List[str]:
    return list(_REGISTRY)


# ============================================================================
# EXERCISES
# ============================================================================

@exercise("aes_known_answer")
def _aes_known_answer(ctx: ExerciseContext) -> Outcome:
    aes = AES128(KAT_KEY)
    ct = aes.encrypt_block(KAT_PLAINTEXT)
    ok = ct == KAT_CIPHERTEXT and aes.decrypt_block(ct) == KAT_PLAINTEXT
    return ok, f"E(K, P) = {ct.hex()}", 0


@exercise("aes_roundtrip")
def _aes_roundtrip(ctx: ExerciseContext) -> Outcome:
    seed = random_int(ctx.rng, 0, 2**31 - 1)
    result = run_roundtrip_tests(num_vectors=ctx.vectors, seed=seed)
    return result.is_perfect, f"{result.passed}/{result.total_vectors} vectors", 0


@exercise("pkcs7_padding")
def _pkcs7_padding(ctx: ExerciseContext) -> Outcome:
    padded = pad_pkcs7(b"YELLOW SUBMARINE", 20)
    ok = padded == b"YELLOW SUBMARINE\x04\x04\x04\x04"
    ok = ok and pad_pkcs7(b"YELLOW SUBMARINE", 16) is None
    return ok, f"pad to 20 -> {padded!r}", 0


@exercise("cbc_roundtrip")
def _cbc_roundtrip(ctx: ExerciseContext) -> Outcome:
    key, iv = b"YELLOW SUBMARINE", bytes(16)
    ct = cbc_encrypt_pad(ctx.secret, key, iv)
    text_ok = cbc_decrypt_pad(ct, key, iv) == ctx.secret

    seed = random_int(ctx.rng, 0, 2**31 - 1)
    results = [run_mode_roundtrip_tests(mode, seed=seed) for mode in (Mode.ECB, Mode.CBC)]
    ok = text_ok and all(r.is_perfect for r in results)
    detail = "; ".join(f"{r.target} {r.passed}/{r.total_vectors}" for r in results)
    return ok, f"secret roundtrip {'ok' if text_ok else 'mismatch'}; {detail}", 0


@exercise("mode_detection")
def _mode_detection(ctx: ExerciseContext) -> Outcome:
    correct = 0
    for _ in range(MODE_DETECTION_TRIALS):
        used: List[Mode] = []

        def encrypt(data: bytes) -> bytes:
            ct, mode = random_encrypt(data, ctx.rng)
            used.append(mode)
            return ct

        guess = detect_mode(FunctionOracle(encrypt), filler=ctx.settings.filler)
        if guess == used[-1]:
            correct += 1
        else:
            logger.warning("Mode guess %s but oracle used %s", guess.value, used[-1].value)
    ok = correct == MODE_DETECTION_TRIALS
    return ok, f"{correct}/{MODE_DETECTION_TRIALS} modes identified", MODE_DETECTION_TRIALS


def _recover(ctx: ExerciseContext, prefix: bytes, prefix_length: Optional[int] = None) -> Outcome:
    oracle = CountingOracle(EcbOracle(random_key(ctx.rng), prefix=prefix, suffix=ctx.secret))
    try:
        result = recover_secret(
            oracle,
            prefix_length=prefix_length,
            filler=ctx.settings.filler,
            max_probe=ctx.settings.max_block_probe,
            alphabet=ctx.settings.alphabet(),
        )
    except OracleStructureError as e:
        return False, str(e), oracle.queries
    ok = result.recovered == ctx.secret and result.prefix_length == len(prefix)
    detail = result.summary()
    if not ok:
        detail += f"; expected prefix {len(prefix)} and {len(ctx.secret)} bytes"
    return ok, detail, result.queries


@exercise("byte_at_a_time")
def _byte_at_a_time(ctx: ExerciseContext) -> Outcome:
    # Nothing precedes the input here, so prefix inference is skipped.
    return _recover(ctx, b"", prefix_length=0)


@exercise("cut_and_paste")
def _cut_and_paste(ctx: ExerciseContext) -> Outcome:
    profiles = ProfileOracle(random_key(ctx.rng))
    oracle = CountingOracle(profiles)
    filler = ctx.settings.filler

    block_size = discover_block_size(oracle, filler=filler, max_probe=ctx.settings.max_block_probe)
    if block_size is None:
        return False, "block size not found", oracle.queries
    prefix_length = guess_prefix_length(oracle, block_size, filler=filler)
    forged = forge_record(oracle, block_size, prefix_length, filler=filler)

    record = profiles.decrypt_profile(forged.ciphertext)
    role = record.get(b"role", b"")
    return role == b"admin", f"forged record {record!r}", oracle.queries


@exercise("byte_at_a_time_prefix")
def _byte_at_a_time_prefix(ctx: ExerciseContext) -> Outcome:
    filler = ctx.settings.filler
    prefix = random_bytes(ctx.rng, random_int(ctx.rng, 0, 255))
    # A prefix ending in the filler byte hides its own length.
    while prefix.endswith(filler):
        prefix = prefix[:-1] + random_bytes(ctx.rng, 1)
    return _recover(ctx, prefix)


@exercise("padding_validation")
def _padding_validation(ctx: ExerciseContext) -> Outcome:
    valid = unpad_pkcs7_checked(b"ICE ICE BABY\x04\x04\x04\x04")
    bad_count = unpad_pkcs7_checked(b"ICE ICE BABY\x05\x05\x05\x05")
    bad_bytes = unpad_pkcs7_checked(b"ICE ICE BABY\x01\x02\x03\x04")
    ok = valid == b"ICE ICE BABY" and bad_count is None and bad_bytes is None
    return ok, f"valid -> {valid!r}, invalid pads rejected: {bad_count is None and bad_bytes is None}", 0


# ============================================================================
# RUNNER
# ============================================================================

def _context(settings: Settings, seed: Optional[int], secret: Optional[bytes], vectors: int) -> ExerciseContext:
    if secret is None:
        secret = load_secret(settings.secret_path) if settings.secret_path else default_secret()
    return ExerciseContext(
        settings=settings,
        rng=make_rng(settings.global_seed if seed is None else seed),
        secret=secret,
        vectors=vectors,
    )


def _run(name: str, ctx: ExerciseContext) -> ExerciseResult:
    if name not in _REGISTRY:
        raise KeyError(f"Unknown exercise: {name}. Available: {', '.join(_REGISTRY)}")
    start = time.perf_counter()
    passed, detail, queries = _REGISTRY[name](ctx)
    result = ExerciseResult(
        name=name,
        passed=passed,
        detail=detail,
        elapsed_seconds=round(time.perf_counter() - start, 4),
        queries=queries,
    )
    if passed:
        logger.info(result.summary())
    else:
        logger.warning(result.summary())
    return result


def run_exercise(
    name: str,
    settings: Settings,
    *,
    seed: Optional[int] = None,
    secret: Optional[bytes] = None,
    vectors: int = 1000,
) -> ExerciseResult:
    """Run one named exercise in a fresh scenario."""
    return _run(name, _context(settings, seed, secret, vectors))


def run_all(
    settings: Settings,
    names: Optional[Sequence[str]] = None,
    *,
    seed: Optional[int] = None,
    secret: Optional[bytes] = None,
    vectors: int = 1000,
    progress_callback: Optional[Callable[[str, int, int], None]] = None,
) -> ExerciseReport:
    """Run the named exercises (all of them by default) from one seeded generator.

    Args:
        settings: Loaded settings (filler, probe cap, candidate order, secret path).
        names: Exercise names in run order; None runs every registered exercise.
        seed: Overrides ``settings.global_seed``.
        secret: Unknown suffix for the recovery exercises; overrides the secret file.
        vectors: Random vectors for the block roundtrip exercise.
        progress_callback: Optional callback(name, current_index, total).
    """
    names = list(names) if names else list_exercises()
    unknown = [n for n in names if n not in _REGISTRY]
    if unknown:
        raise KeyError(f"Unknown exercise(s): {', '.join(unknown)}. Available: {', '.join(_REGISTRY)}")

    ctx = _context(settings, seed, secret, vectors)
    report = ExerciseReport(seed=settings.global_seed if seed is None else seed)
    for idx, name in enumerate(names):
        if progress_callback:
            progress_callback(name, idx, len(names))
        report.results.append(_run(name, ctx))
    return report
