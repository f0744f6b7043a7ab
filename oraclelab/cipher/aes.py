"""AES-128 block transform: ten rounds over one 16-byte block.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..errors import InvalidLength
from .key_schedule import KEY_SIZE, ROUNDS, round_keys
from .state import (
    BLOCK_SIZE,
    add_round_key,
    from_state,
    inv_add_round_key,
    inv_mix_columns,
    inv_shift_rows,
    inv_sub_bytes,
    mix_columns,
    shift_rows,
    sub_bytes,
    to_state,
)


class BlockCipher:
    block_size: int = BLOCK_SIZE

    def encrypt_block(self, plaintext_block: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError

    def decrypt_block(self, ciphertext_block: bytes) -> bytes:  # pragma: no cover
        raise NotImplementedError


@dataclass
class AES128(BlockCipher):
    """AES-128 bound to one key; the key is expanded once at construction."""

    key: bytes
    _round_keys: List[List[int]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.key) != KEY_SIZE:
            raise InvalidLength(f"Key must be {KEY_SIZE} bytes")
        self.key = bytes(self.key)
        self._round_keys = [list(rk) for rk in round_keys(self.key)]

    def encrypt_block(self, plaintext_block: bytes) -> bytes:
        rks = self._round_keys
        state = add_round_key(to_state(plaintext_block), rks[0])

        for r in range(1, ROUNDS):
            state = sub_bytes(state)
            state = shift_rows(state)
            state = mix_columns(state)
            state = add_round_key(state, rks[r])

        # Final round has no MixColumns.
        state = sub_bytes(state)
        state = shift_rows(state)
        state = add_round_key(state, rks[ROUNDS])
        return from_state(state)

    def decrypt_block(self, ciphertext_block: bytes) -> bytes:
        rks = self._round_keys
        state = inv_add_round_key(to_state(ciphertext_block), rks[ROUNDS])
        state = inv_shift_rows(state)
        state = inv_sub_bytes(state)

        for r in reversed(range(1, ROUNDS)):
            state = inv_add_round_key(state, rks[r])
            state = inv_mix_columns(state)
            state = inv_shift_rows(state)
            state = inv_sub_bytes(state)

        state = inv_add_round_key(state, rks[0])
        return from_state(state)


def encrypt_block(block: bytes, key: bytes) -> bytes:
    return AES128(key).encrypt_block(block)


def decrypt_block(block: bytes, key: bytes) -> bytes:
    return AES128(key).decrypt_block(block)
