"""``key=value&key=value`` records, as used by the user-profile oracle.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from typing import Dict, Iterable, Mapping, Tuple, Union

from .errors import InvalidRecord

Pairs = Union[Mapping[bytes, bytes], Iterable[Tuple[bytes, bytes]]]


def sanitize(value: bytes) -> bytes:
    """Strip the record metacharacters '=' and '&' from a field value."""
    return bytes(b for b in value if b not in b"=&")


def encode_kv(pairs: Pairs) -> bytes:
    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    return b"&".join(k + b"=" + v for k, v in items)


def parse_kv(record: bytes) -> Dict[bytes, bytes]:
    """Parse a record into an ordered dict. Later duplicates win."""
    out: Dict[bytes, bytes] = {}
    if not record:
        return out
    for part in record.split(b"&"):
        if b"=" not in part:
            raise InvalidRecord(f"record field without '=': {part!r}")
        key, value = part.split(b"=", 1)
        out[key] = value
    return out


def profile_for(email: bytes, uid: int = 10, role: bytes = b"user") -> bytes:
    """Encode an email=..&uid=..&role=.. profile with the email sanitized."""
    return encode_kv((
        (b"email", sanitize(email)),
        (b"uid", str(uid).encode("ascii")),
        (b"role", role),
    ))
