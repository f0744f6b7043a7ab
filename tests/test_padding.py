import pytest

from oraclelab.cipher.padding import pad_pkcs7, pad_to_block, unpad_pkcs7, unpad_pkcs7_checked
from oraclelab.errors import InvalidLength


def test_pad_yellow_submarine():
    assert pad_pkcs7(b"YELLOW SUBMARINE", 20) == b"YELLOW SUBMARINE\x04\x04\x04\x04"


@pytest.mark.parametrize("target", [16, 10, 16 + 256, 1000])
def test_pad_out_of_range_returns_none(target):
    assert pad_pkcs7(b"YELLOW SUBMARINE", target) is None


def test_pad_maximum_amount():
    padded = pad_pkcs7(b"", 255)
    assert padded == b"\xff" * 255


def test_pad_to_block_always_grows():
    assert pad_to_block(b"") == b"\x10" * 16
    assert pad_to_block(b"A" * 16) == b"A" * 16 + b"\x10" * 16
    assert pad_to_block(b"A" * 15) == b"A" * 15 + b"\x01"
    assert pad_to_block(b"admin") == b"admin" + b"\x0b" * 11


def test_unpad_trusts_last_byte():
    assert unpad_pkcs7(b"ICE ICE BABY\x04\x04\x04\x04") == b"ICE ICE BABY"
    # No validation: only the count is read.
    assert unpad_pkcs7(b"ICE ICE BABY\x01\x02\x03\x04") == b"ICE ICE BABY"
    assert unpad_pkcs7(b"ab\x09") == b""


def test_unpad_empty_raises():
    with pytest.raises(InvalidLength):
        unpad_pkcs7(b"")


def test_checked_unpad_ice_ice_baby():
    assert unpad_pkcs7_checked(b"ICE ICE BABY\x04\x04\x04\x04") == b"ICE ICE BABY"
    assert unpad_pkcs7_checked(b"ICE ICE BABY\x05\x05\x05\x05") is None
    assert unpad_pkcs7_checked(b"ICE ICE BABY\x01\x02\x03\x04") is None


@pytest.mark.parametrize("data", [b"", b"abc\x00", b"\x05\x05\x05"])
def test_checked_unpad_rejects_malformed(data):
    assert unpad_pkcs7_checked(data) is None


@pytest.mark.parametrize("n", [0, 1, 15, 16, 17, 47])
def test_pad_then_checked_unpad(n):
    data = bytes(range(n))
    assert unpad_pkcs7_checked(pad_to_block(data)) == data
