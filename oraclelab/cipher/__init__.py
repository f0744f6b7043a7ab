"""AES-128 cipher engine: field arithmetic, tables, key schedule, rounds and modes.

Research / education only. Do NOT use in production.
"""

from .aes import AES128, BlockCipher, decrypt_block, encrypt_block
from .key_schedule import expand_key, round_keys
from .modes import (
    Mode,
    cbc_decrypt,
    cbc_decrypt_pad,
    cbc_encrypt,
    cbc_encrypt_pad,
    detect_ecb,
    ecb_decrypt,
    ecb_decrypt_pad,
    ecb_encrypt,
    ecb_encrypt_pad,
    guess_mode,
    looks_like_ecb,
    max_repeats,
)
from .padding import pad_pkcs7, pad_to_block, unpad_pkcs7, unpad_pkcs7_checked

__all__ = [
    "AES128",
    "BlockCipher",
    "encrypt_block",
    "decrypt_block",
    "expand_key",
    "round_keys",
    "Mode",
    "ecb_encrypt",
    "ecb_decrypt",
    "ecb_encrypt_pad",
    "ecb_decrypt_pad",
    "cbc_encrypt",
    "cbc_decrypt",
    "cbc_encrypt_pad",
    "cbc_decrypt_pad",
    "detect_ecb",
    "max_repeats",
    "looks_like_ecb",
    "guess_mode",
    "pad_pkcs7",
    "pad_to_block",
    "unpad_pkcs7",
    "unpad_pkcs7_checked",
]
