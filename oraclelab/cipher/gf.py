"""Arithmetic in GF(2^8) modulo the AES polynomial x^8 + x^4 + x^3 + x + 1."""
from __future__ import annotations

# Low byte of 0x11B; the x^8 term falls off when `a` is masked to 8 bits.
REDUCTION = 0x1B


def xtime(a: int) -> int:
    """Multiply by x (i.e. by 2) in GF(2^8)."""
    a &= 0xFF
    hi = a & 0x80
    a = (a << 1) & 0xFF
    if hi:
        a ^= REDUCTION
    return a


def multiply(a: int, b: int) -> int:
    """GF(2^8) multiplication for AES (shift-and-reduce over 8 bits)."""
    a &= 0xFF
    b &= 0xFF
    res = 0
    for _ in range(8):
        if b & 1:
            res ^= a
        a = xtime(a)
        b >>= 1
    return res
