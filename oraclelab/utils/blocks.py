"""Small byte helpers shared by the modes and the attacks."""
from __future__ import annotations

from typing import List


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """XOR two byte strings of equal length."""
    if len(a) != len(b):
        raise ValueError("xor_bytes length mismatch")
    return bytes(x ^ y for x, y in zip(a, b))


def chunks(data: bytes, size: int = 16) -> List[bytes]:
    """Split into consecutive `size`-byte pieces; the last one may be short."""
    return [bytes(data[i:i + size]) for i in range(0, len(data), size)]


def block_at(data: bytes, index: int, size: int = 16) -> bytes:
    """Return block number `index` of `data`."""
    return bytes(data[index * size:(index + 1) * size])
