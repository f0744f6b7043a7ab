"""AES-128 key expansion (Rijndael key schedule).

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from typing import List

from ..errors import InvalidLength
from .tables import RCON, SBOX

KEY_SIZE = 16
ROUNDS = 10
EXPANDED_SIZE = KEY_SIZE * (ROUNDS + 1)  # 176


def rotate_word(word: List[int]) -> List[int]:
    """Rotate a 4-byte word left by one byte."""
    return word[1:] + word[:1]


def _core(word: List[int], i: int) -> List[int]:
    out = [SBOX[b] for b in rotate_word(word)]
    out[0] ^= RCON[i]
    return out


def expand_key(key: bytes, length: int = EXPANDED_SIZE) -> bytes:
    """Expand a 16-byte key to `length` bytes; the first 16 bytes are the key itself."""
    if len(key) != KEY_SIZE:
        raise InvalidLength(f"AES-128 key must be {KEY_SIZE} bytes, got {len(key)}")

    out = bytearray(key)
    i = 1
    while len(out) < length:
        word = _core(list(out[-4:]), i)
        i += 1
        for _ in range(4):
            behind = len(out) - KEY_SIZE
            word = [w ^ b for w, b in zip(word, out[behind:behind + 4])]
            out.extend(word)
    return bytes(out[:length])


def round_keys(key: bytes) -> List[bytes]:
    """Return the 11 round keys (rounds 0..10) for a 16-byte key."""
    expanded = expand_key(key, EXPANDED_SIZE)
    return [expanded[r * KEY_SIZE:(r + 1) * KEY_SIZE] for r in range(ROUNDS + 1)]
