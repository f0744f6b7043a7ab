"""PKCS#7 padding.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from typing import Optional

from ..errors import InvalidLength


def pad_pkcs7(data: bytes, target_len: int) -> Optional[bytes]:
    """Pad `data` up to `target_len` with bytes equal to the pad count.

    Returns None when the pad amount would be 0 (or negative) or 256 and above,
    since neither can be expressed in a single pad byte.
    """
    diff = target_len - len(data)
    if 0 < diff < 256:
        return bytes(data) + bytes([diff]) * diff
    return None


def pad_to_block(data: bytes, block_size: int = 16) -> bytes:
    """Pad to the next multiple of `block_size` strictly above len(data).

    An already aligned buffer gains a full block of padding.
    """
    new_length = (len(data) // block_size + 1) * block_size
    padded = pad_pkcs7(data, new_length)
    if padded is None:
        raise InvalidLength(f"block_size {block_size} cannot be PKCS#7 padded")
    return padded


def unpad_pkcs7(data: bytes) -> bytes:
    """Strip padding by trusting the last byte as the count. No validation."""
    if not data:
        raise InvalidLength("Cannot unpad an empty buffer")
    count = data[-1]
    return bytes(data[:max(len(data) - count, 0)])


def unpad_pkcs7_checked(data: bytes) -> Optional[bytes]:
    """Strip padding only if every pad byte equals the claimed count.

    Malformed padding is an expected, attacker-inducible condition, so it is
    reported as None rather than raised.
    """
    if not data:
        return None
    count = data[-1]
    if count == 0 or count > len(data):
        return None
    if any(b != count for b in data[-count:]):
        return None
    return bytes(data[:-count])
