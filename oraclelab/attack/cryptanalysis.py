"""Chosen-plaintext attacks against block-cipher encryption oracles.

Everything here works purely through ``Oracle.query``: block size discovery,
ECB detection, hidden prefix length inference, byte-at-a-time recovery of an
unknown suffix, and cut-and-paste forgery of ECB records. None of it touches
the cipher internals, so any oracle of the form
``encrypt_pad(prefix ++ input ++ suffix)`` under a stateless block mode is
attackable.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..cipher.modes import Mode, guess_mode
from ..cipher.padding import pad_to_block, unpad_pkcs7
from ..errors import InvalidLength, OracleStructureError
from ..utils.blocks import block_at, chunks
from .oracle import CountingOracle, Oracle

logger = logging.getLogger(__name__)

DEFAULT_FILLER = b"A"
MAX_BLOCK_PROBE = 255

# Most likely bytes of English text first; the rest of 0..255 follows.
_FREQUENCY_HEAD = (
    b" "
    + b"etaoinshrdlcumwfgypbvkjxqz"
    + b"0123456789"
    + b"\n.,!?-'\"/"
    + b"ETAOINSHRDLCUMWFGYPBVKJXQZ"
)


def frequency_alphabet() -> bytes:
    """All 256 byte values, each once, ordered by English letter frequency."""
    return bytes(dict.fromkeys(_FREQUENCY_HEAD + bytes(range(256))))


def sequential_alphabet() -> bytes:
    return bytes(range(256))


def _fill(filler: bytes, n: int) -> bytes:
    return bytes(filler[:1]) * n


# ============================================================================
# STRUCTURE DISCOVERY
# ============================================================================

def discover_block_size(
    oracle: Oracle,
    *,
    filler: bytes = DEFAULT_FILLER,
    max_probe: int = MAX_BLOCK_PROBE,
) -> Optional[int]:
    """Grow the input one byte at a time until the output grows.

    The size of the first jump is the block size. Returns None if the output
    never grows within `max_probe` input lengths (not a block mode).
    """
    out_length: Optional[int] = None
    for i in range(1, max_probe + 1):
        n = len(oracle.query(_fill(filler, i)))
        if out_length is None:
            out_length = n
        elif n > out_length:
            logger.debug("Output grew from %d to %d bytes at input length %d", out_length, n, i)
            return n - out_length
    logger.warning("Oracle output did not grow within %d probes", max_probe)
    return None


def is_ecb(oracle: Oracle, block_size: int, *, filler: bytes = DEFAULT_FILLER) -> bool:
    """One query with two identical filler blocks; ECB iff the first two output blocks match."""
    out = oracle.query(_fill(filler, block_size * 2))
    return block_at(out, 0, block_size) == block_at(out, 1, block_size)


def find_adjacent_match(ciphertext: bytes, block_size: int) -> Optional[Tuple[int, bytes]]:
    """Index and value of the first block that equals the block after it."""
    blocks = chunks(ciphertext, block_size)
    for i in range(len(blocks) - 1):
        if blocks[i] == blocks[i + 1]:
            return i, blocks[i]
    return None


def fixed_length(oracle: Oracle, block_size: int, *, filler: bytes = DEFAULT_FILLER) -> int:
    """Exact number of bytes the oracle adds around the input (prefix + suffix).

    With PKCS#7 the output grows at the first input length n that makes
    fixed + n a multiple of the block size; at that point fixed = base - n.
    """
    base = len(oracle.query(b""))
    for n in range(1, block_size + 1):
        if len(oracle.query(_fill(filler, n))) > base:
            return base - n
    raise OracleStructureError(f"Output did not grow within one block of {block_size} bytes")


def guess_prefix_length(oracle: Oracle, block_size: int, *, filler: bytes = DEFAULT_FILLER) -> int:
    """Infer the length of the hidden prefix the oracle puts before the input.

    Three filler blocks always yield two equal adjacent ciphertext blocks. The
    filler is then shortened one byte at a time until that pair disappears;
    the length at which it disappears tells how many filler bytes were needed
    to round the prefix up to a block boundary.

    A prefix or suffix that itself produces adjacent equal blocks, a prefix
    ending in the filler byte, or a suffix starting with it can give a wrong
    answer. A negative result is impossible and raises OracleStructureError.
    """
    prefix_test = bytearray(_fill(filler, block_size * 3))
    first = find_adjacent_match(oracle.query(bytes(prefix_test)), block_size)
    if first is None:
        raise OracleStructureError("No adjacent equal blocks for three filler blocks; oracle is not ECB")
    ix, to_match = first

    while prefix_test:
        match = find_adjacent_match(oracle.query(bytes(prefix_test)), block_size)
        if match is None or match[1] != to_match:
            break
        prefix_test.pop()

    prefix_pad = (len(prefix_test) + 1) % block_size
    length = ix * block_size - prefix_pad
    if length < 0:
        raise OracleStructureError(
            f"Inferred a negative prefix length ({length}); the input is probably followed by filler bytes"
        )
    logger.debug("Adjacent match at block %d lost at filler length %d: prefix is %d bytes",
                 ix, len(prefix_test), length)
    return length


def detect_mode(oracle: Oracle, block_size: int = 16, *, filler: bytes = DEFAULT_FILLER) -> Mode:
    """Guess ECB vs CBC from one query of four filler blocks.

    Four blocks leave at least two whole identical filler blocks even after a
    hidden prefix shorter than a block.
    """
    return guess_mode(oracle.query(_fill(filler, block_size * 4)), block_size)


# ============================================================================
# BYTE-AT-A-TIME RECOVERY
# ============================================================================

def break_ecb(
    oracle: Oracle,
    block_size: int,
    prefix_length: int = 0,
    *,
    filler: bytes = DEFAULT_FILLER,
    alphabet: Optional[bytes] = None,
) -> bytes:
    """Recover the bytes the oracle appends after the input, one at a time.

    A constant pad first rounds the hidden prefix up to a block boundary, so
    attacker bytes start at block ``prefix_length // block_size + 1``. For
    each position, the filler is sized so the unknown byte is the last byte
    of a block; that block is compared with the first attacker block of
    probes made of the previous ``block_size - 1`` known bytes plus one
    candidate. Recovery stops when no candidate matches, which happens once
    the trailing padding is reached. The result then ends with the first pad
    byte (0x01).
    """
    bs = block_size
    const_pad = bs - (prefix_length % bs)
    start_block = prefix_length // bs + 1
    candidates = alphabet if alphabet is not None else frequency_alphabet()

    known = bytearray()
    block_ix = start_block
    while True:
        for offs in range(1, bs + 1):
            padding = _fill(filler, bs - offs + const_pad)
            actual = block_at(oracle.query(padding), block_ix, bs)
            if len(actual) < bs:
                return bytes(known)

            window = (_fill(filler, bs - 1) + bytes(known))[-(bs - 1):]
            probe = bytearray(_fill(filler, const_pad) + window + b"\x00")

            matched = False
            for candidate in candidates:
                probe[-1] = candidate
                if block_at(oracle.query(bytes(probe)), start_block, bs) == actual:
                    known.append(candidate)
                    matched = True
                    break
            if not matched:
                if known:
                    logger.debug("No candidate matched at byte %d; stopping", len(known))
                else:
                    logger.warning("No candidate matched the first byte; block alignment is wrong")
                return bytes(known)
        logger.debug("Recovered block %d (%d bytes so far)", block_ix - start_block, len(known))
        block_ix += 1


@dataclass
class AttackResult:
    """Outcome of a full byte-at-a-time attack."""
    block_size: int
    prefix_length: int
    recovered: bytes      # Unknown suffix with the trailing padding stripped
    raw: bytes            # Bytes exactly as recovered, including the first pad byte
    queries: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_size": self.block_size,
            "prefix_length": self.prefix_length,
            "recovered_hex": self.recovered.hex(),
            "recovered_length": len(self.recovered),
            "queries": self.queries,
        }

    def summary(self) -> str:
        return (
            f"block_size={self.block_size}, prefix={self.prefix_length}, "
            f"recovered {len(self.recovered)} bytes in {self.queries} queries"
        )


def recover_secret(
    oracle: Oracle,
    *,
    prefix_length: Optional[int] = None,
    filler: bytes = DEFAULT_FILLER,
    max_probe: int = MAX_BLOCK_PROBE,
    alphabet: Optional[bytes] = None,
) -> AttackResult:
    """Block size, ECB check, prefix length, then byte-at-a-time recovery.

    Pass `prefix_length` when it is known (0 for an oracle that adds only a
    suffix) to skip prefix inference, which misjudges a suffix that starts
    with the filler byte.
    """
    counter = CountingOracle(oracle)

    block_size = discover_block_size(counter, filler=filler, max_probe=max_probe)
    if block_size is None:
        raise OracleStructureError("Could not determine a block size")
    logger.info("Block size: %d", block_size)

    if find_adjacent_match(counter.query(_fill(filler, block_size * 3)), block_size) is None:
        raise OracleStructureError("Repeated input blocks do not repeat in the output; oracle is not ECB")

    if prefix_length is None:
        prefix_length = guess_prefix_length(counter, block_size, filler=filler)
        logger.info("Hidden prefix length: %d", prefix_length)

    raw = break_ecb(counter, block_size, prefix_length, filler=filler, alphabet=alphabet)
    # Even an empty suffix yields its first pad byte, so nothing at all means misalignment.
    if not raw:
        raise OracleStructureError(
            f"Recovered no bytes with prefix length {prefix_length}; "
            "the prefix length is wrong (does the suffix start with the filler byte?)"
        )
    recovered = unpad_pkcs7(raw)

    expected = fixed_length(counter, block_size, filler=filler) - prefix_length
    if len(recovered) != expected:
        logger.warning("Recovered %d bytes but the oracle appends %d", len(recovered), expected)
    logger.info("Recovered %d bytes with %d queries", len(recovered), counter.queries)

    return AttackResult(
        block_size=block_size,
        prefix_length=prefix_length,
        recovered=recovered,
        raw=raw,
        queries=counter.queries,
    )


# ============================================================================
# CUT-AND-PASTE FORGERY
# ============================================================================

@dataclass
class ForgeryResult:
    ciphertext: bytes
    forged_block: bytes
    forged_block_index: int   # Block of the first query holding pkcs7(forged_value)
    aligned_filler: int       # Filler length that isolates the replaced value in the last block
    fixed_length: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ciphertext_hex": self.ciphertext.hex(),
            "forged_block_hex": self.forged_block.hex(),
            "forged_block_index": self.forged_block_index,
            "aligned_filler": self.aligned_filler,
            "fixed_length": self.fixed_length,
        }

    def summary(self) -> str:
        return (
            f"spliced block {self.forged_block_index} over the last of "
            f"{len(self.ciphertext) // len(self.forged_block)} blocks (fixed={self.fixed_length})"
        )


def forge_record(
    oracle: Oracle,
    block_size: int,
    prefix_length: int,
    *,
    forged_value: bytes = b"admin",
    replaced_value: bytes = b"user",
    filler: bytes = DEFAULT_FILLER,
) -> ForgeryResult:
    """Splice an encrypted ``pkcs7(forged_value)`` block over the record's last field.

    `replaced_value` must be the value that ends every record the oracle
    encrypts. One query places ``pkcs7(forged_value)`` on a block boundary
    right after the hidden prefix; a second query is sized so that
    `replaced_value` and its padding fill the final block alone. ECB decrypts
    blocks independently, so swapping the final block changes only that field.
    """
    bs = block_size
    forged_plain = pad_to_block(forged_value, bs)
    if len(forged_plain) != bs:
        raise InvalidLength(f"Forged value must be shorter than one {bs}-byte block")

    pad_length = bs - (prefix_length % bs)
    forged_index = prefix_length // bs + 1
    evil = oracle.query(_fill(filler, pad_length) + forged_plain)
    forged_block = block_at(evil, forged_index, bs)

    fixed = fixed_length(oracle, bs, filler=filler)
    aligned = (len(replaced_value) - fixed) % bs
    target = bytearray(oracle.query(_fill(filler, aligned)))
    target[-bs:] = forged_block
    logger.debug("Spliced block %d of the forging query over the last of %d blocks",
                 forged_index, len(target) // bs)

    return ForgeryResult(
        ciphertext=bytes(target),
        forged_block=forged_block,
        forged_block_index=forged_index,
        aligned_filler=aligned,
        fixed_length=fixed,
    )
