import pytest

from oraclelab.cipher.aes import AES128
from oraclelab.cipher.modes import (
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
from oraclelab.errors import InvalidLength
from oraclelab.utils.repro import random_bytes, random_key

# NIST SP 800-38A, F.1.1 and F.2.1
KEY = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
IV = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
PT = bytes.fromhex("6bc1bee22e409f96e93d7e117393172a" "ae2d8a571e03ac9c9eb76fac45af8e51")
ECB_CT = bytes.fromhex("3ad77bb40d7a3660a89ecaf32466ef97" "f5d3d58503b9699de785895a96fdbaaf")
CBC_CT = bytes.fromhex("7649abac8119b246cee98e9b12e9197d" "5086cb9b507219ee95db113a917678b2")


def test_ecb_known_answer():
    assert ecb_encrypt(PT, KEY) == ECB_CT
    assert ecb_decrypt(ECB_CT, KEY) == PT


def test_cbc_known_answer():
    assert cbc_encrypt(PT, KEY, IV) == CBC_CT
    assert cbc_decrypt(CBC_CT, KEY, IV) == PT


def test_modes_accept_cipher_object():
    aes = AES128(KEY)
    assert ecb_encrypt(PT, aes) == ECB_CT
    assert cbc_encrypt(PT, aes, IV) == CBC_CT


@pytest.mark.parametrize("n", [1, 15, 17, 33])
def test_raw_modes_reject_unaligned(n):
    with pytest.raises(InvalidLength):
        ecb_encrypt(bytes(n), KEY)
    with pytest.raises(InvalidLength):
        ecb_decrypt(bytes(n), KEY)
    with pytest.raises(InvalidLength):
        cbc_encrypt(bytes(n), KEY, IV)
    with pytest.raises(InvalidLength):
        cbc_decrypt(bytes(n), KEY, IV)


def test_cbc_rejects_bad_iv():
    with pytest.raises(InvalidLength):
        cbc_encrypt(bytes(16), KEY, bytes(15))
    with pytest.raises(InvalidLength):
        cbc_decrypt(bytes(16), KEY, bytes(17))


def test_raw_modes_accept_empty_input():
    assert ecb_encrypt(b"", KEY) == b""
    assert cbc_decrypt(b"", KEY, IV) == b""


@pytest.mark.parametrize("n", [0, 1, 15, 16, 17, 31, 32, 100])
def test_padded_roundtrip(n, rng):
    key = random_key(rng)
    iv = random_key(rng)
    pt = random_bytes(rng, n)

    ecb_ct = ecb_encrypt_pad(pt, key)
    assert len(ecb_ct) == (n // 16 + 1) * 16
    assert ecb_decrypt_pad(ecb_ct, key) == pt

    cbc_ct = cbc_encrypt_pad(pt, key, iv)
    assert len(cbc_ct) == (n // 16 + 1) * 16
    assert cbc_decrypt_pad(cbc_ct, key, iv) == pt


def test_cbc_first_block_depends_on_iv():
    other_iv = bytes(16)
    assert cbc_encrypt(PT, KEY, IV)[:16] != cbc_encrypt(PT, KEY, other_iv)[:16]


def test_detect_ecb_counts_repeated_chunks(rng):
    key = random_key(rng)
    ct = ecb_encrypt(b"YELLOW SUBMARINE" * 3 + bytes(16), key)
    counts = detect_ecb(ct)
    assert sorted(counts.values()) == [1, 3]
    assert max_repeats(ct) == 3
    assert looks_like_ecb(ct)


def test_identical_blocks_distinguish_modes(rng):
    key = random_key(rng)
    iv = random_key(rng)
    pt = b"A" * 64
    ecb_ct = ecb_encrypt_pad(pt, key)
    cbc_ct = cbc_encrypt_pad(pt, key, iv)
    assert guess_mode(ecb_ct) is Mode.ECB
    assert guess_mode(cbc_ct) is Mode.CBC
    assert not looks_like_ecb(cbc_ct)


def test_max_repeats_empty():
    assert max_repeats(b"") == 0
