"""Base16 and base64 text codecs.

The strict decoders raise ``InvalidEncoding`` naming the first byte outside
their alphabet. The ``*_filter`` decoders instead drop every such byte before
decoding, which is how line-wrapped challenge files are read.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import base64
from pathlib import Path

from .errors import InvalidEncoding, InvalidLength

HEX_ALPHABET = b"0123456789abcdef"
B64_ALPHABET = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
B64_PAD = b"="

_HEX_SET = frozenset(HEX_ALPHABET)
_B64_SET = frozenset(B64_ALPHABET + B64_PAD)


def _first_invalid(data: bytes, allowed: frozenset):
    for b in data:
        if b not in allowed:
            return b
    return None


def encode_base16(data: bytes) -> bytes:
    return bytes(data).hex().encode("ascii")


def decode_base16(data: bytes) -> bytes:
    bad = _first_invalid(data, _HEX_SET)
    if bad is not None:
        raise InvalidEncoding(bad, "base16")
    if len(data) % 2 != 0:
        raise InvalidLength(f"base16 input has odd length {len(data)}")
    return bytes.fromhex(bytes(data).decode("ascii"))


def decode_base16_filter(data: bytes) -> bytes:
    kept = bytes(b for b in data if b in _HEX_SET)
    # A dangling half byte cannot be decoded; drop it like any other noise.
    return decode_base16(kept[:len(kept) - len(kept) % 2])


def encode_base64(data: bytes) -> bytes:
    return base64.b64encode(bytes(data))


def _decode_quartet(quartet: bytes) -> bytes:
    pad = quartet.find(B64_PAD)
    if pad != -1 and (pad < 2 or quartet[pad:] != B64_PAD * (4 - pad)):
        raise InvalidEncoding(B64_PAD[0], "base64")
    return base64.b64decode(quartet, validate=True)


def decode_base64(data: bytes) -> bytes:
    """Strict base64, decoded one quartet at a time.

    A '=' only ends the quartet it sits in, so concatenated padded strings
    decode back to back: ``TQ==TWFu`` gives ``MMan``.
    """
    data = bytes(data)
    bad = _first_invalid(data, _B64_SET)
    if bad is not None:
        raise InvalidEncoding(bad, "base64")
    if len(data) % 4 != 0:
        raise InvalidLength(f"base64 input length {len(data)} is not a whole number of quartets")
    return b"".join(_decode_quartet(data[i:i + 4]) for i in range(0, len(data), 4))


def decode_base64_filter(data: bytes) -> bytes:
    return decode_base64(bytes(b for b in data if b in _B64_SET))


def load_secret(path: str | Path) -> bytes:
    """Read a base64 file (any line wrapping) and return the decoded bytes."""
    return decode_base64_filter(Path(path).read_bytes())
