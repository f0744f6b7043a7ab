"""Modes of operation over the AES-128 block transform.

ECB encrypts every 16-byte chunk on its own; CBC XORs each plaintext block
with the previous ciphertext block (the IV for the first) before encrypting.
The raw functions never pad: input must already be a multiple of 16 bytes.
The ``*_pad`` variants add PKCS#7 before encrypting and strip it (unchecked)
after decrypting.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Union

from ..errors import InvalidLength
from ..utils.blocks import chunks, xor_bytes
from .aes import AES128
from .padding import pad_to_block, unpad_pkcs7
from .state import BLOCK_SIZE

KeyOrCipher = Union[bytes, AES128]


class Mode(str, Enum):
    ECB = "ECB"
    CBC = "CBC"


def _cipher(key: KeyOrCipher) -> AES128:
    return key if isinstance(key, AES128) else AES128(key)


def _check_aligned(data: bytes, what: str) -> None:
    if len(data) % BLOCK_SIZE != 0:
        raise InvalidLength(
            f"{what} length {len(data)} is not a multiple of {BLOCK_SIZE}. You may need to pad it."
        )


def _check_iv(iv: bytes) -> None:
    if len(iv) != BLOCK_SIZE:
        raise InvalidLength(f"IV must be {BLOCK_SIZE} bytes, got {len(iv)}")


# ============================================================================
# ECB
# ============================================================================

def ecb_encrypt(data: bytes, key: KeyOrCipher) -> bytes:
    _check_aligned(data, "Plaintext")
    aes = _cipher(key)
    return b"".join(aes.encrypt_block(c) for c in chunks(data, BLOCK_SIZE))


def ecb_decrypt(data: bytes, key: KeyOrCipher) -> bytes:
    _check_aligned(data, "Ciphertext")
    aes = _cipher(key)
    return b"".join(aes.decrypt_block(c) for c in chunks(data, BLOCK_SIZE))


def ecb_encrypt_pad(data: bytes, key: KeyOrCipher) -> bytes:
    return ecb_encrypt(pad_to_block(data, BLOCK_SIZE), key)


def ecb_decrypt_pad(data: bytes, key: KeyOrCipher) -> bytes:
    return unpad_pkcs7(ecb_decrypt(data, key))


# ============================================================================
# CBC
# ============================================================================

def cbc_encrypt(data: bytes, key: KeyOrCipher, iv: bytes) -> bytes:
    _check_aligned(data, "Plaintext")
    _check_iv(iv)
    aes = _cipher(key)
    prev = bytes(iv)
    out = []
    for block in chunks(data, BLOCK_SIZE):
        prev = aes.encrypt_block(xor_bytes(block, prev))
        out.append(prev)
    return b"".join(out)


def cbc_decrypt(data: bytes, key: KeyOrCipher, iv: bytes) -> bytes:
    _check_aligned(data, "Ciphertext")
    _check_iv(iv)
    aes = _cipher(key)
    prev = bytes(iv)
    out = []
    for block in chunks(data, BLOCK_SIZE):
        out.append(xor_bytes(aes.decrypt_block(block), prev))
        prev = block
    return b"".join(out)


def cbc_encrypt_pad(data: bytes, key: KeyOrCipher, iv: bytes) -> bytes:
    return cbc_encrypt(pad_to_block(data, BLOCK_SIZE), key, iv)


def cbc_decrypt_pad(data: bytes, key: KeyOrCipher, iv: bytes) -> bytes:
    return unpad_pkcs7(cbc_decrypt(data, key, iv))


# ============================================================================
# ECB DETECTION (advisory)
# ============================================================================

def detect_ecb(data: bytes, block_size: int = BLOCK_SIZE) -> Counter:
    """Count how often each distinct chunk value occurs.

    The more a chunk recurs, the more likely the buffer is ECB ciphertext.
    """
    return Counter(chunks(data, block_size))


def max_repeats(data: bytes, block_size: int = BLOCK_SIZE) -> int:
    counts = detect_ecb(data, block_size)
    return max(counts.values()) if counts else 0


def looks_like_ecb(data: bytes, block_size: int = BLOCK_SIZE) -> bool:
    return max_repeats(data, block_size) > 1


def guess_mode(ciphertext: bytes, block_size: int = BLOCK_SIZE) -> Mode:
    """Guess the mode of a ciphertext whose plaintext had repeated blocks."""
    return Mode.ECB if looks_like_ecb(ciphertext, block_size) else Mode.CBC
