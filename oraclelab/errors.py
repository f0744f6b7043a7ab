"""Exception hierarchy shared by the cipher, codec and attack modules."""
from __future__ import annotations


class OracleLabError(Exception):
    """Base class for every error raised by oraclelab."""


class InvalidLength(OracleLabError, ValueError):
    """A buffer, key, IV or block has a length the operation cannot accept."""


class InvalidEncoding(OracleLabError, ValueError):
    """A strict decoder met a byte outside its alphabet."""

    def __init__(self, byte: int, alphabet: str):
        self.byte = byte
        self.alphabet = alphabet
        super().__init__(f"Input contained invalid {alphabet} character {chr(byte)!r} (0x{byte:02x})")


class InvalidRecord(OracleLabError, ValueError):
    """A key=value&key=value record could not be parsed."""


class OracleStructureError(OracleLabError):
    """The oracle does not behave like the structure an attack step assumes."""
