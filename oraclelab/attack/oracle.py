"""Encryption oracles: black boxes the attacks may query but not inspect.

Every attack in ``cryptanalysis`` talks to an ``Oracle`` only through
``query``. The concrete oracles here wrap the AES engine with a hidden key
and optional hidden prefix/suffix, so the attacks can be exercised against
ECB, CBC and record-encoding targets, or against any plain callable through
``FunctionOracle``.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Protocol, Tuple, runtime_checkable

import numpy as np

from ..cipher.aes import AES128
from ..cipher.modes import Mode, cbc_encrypt_pad, ecb_decrypt_pad, ecb_encrypt_pad
from ..kv import parse_kv, profile_for
from ..utils.repro import random_bytes, random_int, random_key


@runtime_checkable
class Oracle(Protocol):
    def query(self, data: bytes) -> bytes:
        ...


@dataclass
class FunctionOracle:
    """Adapt any ``bytes -> bytes`` callable to the Oracle protocol."""

    fn: Callable[[bytes], bytes]

    def query(self, data: bytes) -> bytes:
        return self.fn(bytes(data))


@dataclass
class EcbOracle:
    """ECB_encrypt_pad(prefix ++ input ++ suffix) under a fixed hidden key."""

    key: bytes = field(repr=False)
    prefix: bytes = field(default=b"", repr=False)
    suffix: bytes = field(default=b"", repr=False)

    def __post_init__(self) -> None:
        self._aes = AES128(self.key)

    def query(self, data: bytes) -> bytes:
        return ecb_encrypt_pad(self.prefix + bytes(data) + self.suffix, self._aes)


@dataclass
class CbcOracle:
    """CBC_encrypt_pad(prefix ++ input ++ suffix) under a fixed key and IV."""

    key: bytes = field(repr=False)
    iv: bytes = field(repr=False)
    prefix: bytes = field(default=b"", repr=False)
    suffix: bytes = field(default=b"", repr=False)

    def __post_init__(self) -> None:
        self._aes = AES128(self.key)

    def query(self, data: bytes) -> bytes:
        return cbc_encrypt_pad(self.prefix + bytes(data) + self.suffix, self._aes, self.iv)


@dataclass
class ProfileOracle:
    """Encrypts ``email=<input>&uid=10&role=user`` under ECB with a hidden key.

    The attacker controls only the email; '=' and '&' are stripped from it.
    ``decrypt_profile`` is the victim side that trusts whatever decrypts.
    """

    key: bytes = field(repr=False)
    uid: int = 10

    def __post_init__(self) -> None:
        self._aes = AES128(self.key)

    def query(self, data: bytes) -> bytes:
        return ecb_encrypt_pad(profile_for(bytes(data), uid=self.uid), self._aes)

    def decrypt_profile(self, ciphertext: bytes) -> Dict[bytes, bytes]:
        return parse_kv(ecb_decrypt_pad(ciphertext, self._aes))


@dataclass
class CountingOracle:
    """Pass-through wrapper that counts queries."""

    inner: Oracle
    queries: int = 0

    def query(self, data: bytes) -> bytes:
        self.queries += 1
        return self.inner.query(data)


def random_encrypt(plaintext: bytes, rng: np.random.Generator) -> Tuple[bytes, Mode]:
    """Encrypt under a fresh random key, ECB or CBC chosen at random.

    5 to 10 random bytes are added before and after the plaintext, and CBC
    uses a random IV. Returns the ciphertext and the mode actually used, so
    a caller can check a mode guess.
    """
    key = random_key(rng)
    before = random_bytes(rng, random_int(rng, 5, 10))
    after = random_bytes(rng, random_int(rng, 5, 10))
    data = before + bytes(plaintext) + after
    if random_int(rng, 0, 1) == 0:
        return ecb_encrypt_pad(data, key), Mode.ECB
    return cbc_encrypt_pad(data, key, random_key(rng)), Mode.CBC
