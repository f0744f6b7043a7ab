import pytest

from oraclelab.codec import (
    decode_base16,
    decode_base16_filter,
    decode_base64,
    decode_base64_filter,
    encode_base16,
    encode_base64,
    load_secret,
)
from oraclelab.errors import InvalidEncoding, InvalidLength
from oraclelab.exercises import default_secret

HEX = (
    b"49276d206b696c6c696e6720796f757220627261696e206c696b65"
    b"206120706f69736f6e6f7573206d757368726f6f6d"
)
B64 = b"SSdtIGtpbGxpbmcgeW91ciBicmFpbiBsaWtlIGEgcG9pc29ub3VzIG11c2hyb29t"


def test_hex_to_base64():
    assert encode_base64(decode_base16(HEX)) == B64
    assert encode_base16(decode_base64(B64)) == HEX


def test_encode_base16_is_lowercase():
    assert encode_base16(b"\x00\xab\xff") == b"00abff"


@pytest.mark.parametrize("data,bad", [(b"4g", b"g"), (b"4A", b"A"), (b"49 27", b" ")])
def test_decode_base16_reports_invalid_byte(data, bad):
    with pytest.raises(InvalidEncoding) as exc:
        decode_base16(data)
    assert exc.value.byte == bad[0]
    assert "base16" in str(exc.value)


def test_decode_base16_odd_length():
    with pytest.raises(InvalidLength):
        decode_base16(b"abc")


def test_decode_base16_filter_drops_noise():
    assert decode_base16_filter(b"49 27\n6d\r\n") == b"I'm"
    assert decode_base16_filter(b"49276dX") == b"I'm"


@pytest.mark.parametrize("data,expected", [
    (b"TWFu", b"Man"),
    (b"TWE=", b"Ma"),
    (b"TQ==", b"M"),
    (b"", b""),
])
def test_decode_base64_padding(data, expected):
    assert decode_base64(data) == expected
    assert encode_base64(expected) == data


def test_decode_base64_reports_invalid_byte():
    with pytest.raises(InvalidEncoding) as exc:
        decode_base64(b"TW!=")
    assert exc.value.byte == ord("!")


def test_decode_base64_truncated_quartet():
    with pytest.raises(InvalidLength):
        decode_base64(b"TWF")


def test_decode_base64_padding_ends_only_its_quartet():
    assert decode_base64(b"TQ==TWFu") == b"MMan"
    assert decode_base64(b"TWE=TQ==") == b"MaM"


@pytest.mark.parametrize("data", [b"T=Fu", b"TW=u", b"====", b"TWFuT===", b"TQ=A"])
def test_decode_base64_rejects_misplaced_padding(data):
    with pytest.raises(InvalidEncoding) as exc:
        decode_base64(data)
    assert exc.value.byte == ord("=")



def test_decode_base64_filter_ignores_line_breaks():
    assert decode_base64_filter(b"TW\nFu\n") == b"Man"
    assert decode_base64_filter(b" TW\r\nE=\n") == b"Ma"


def test_load_secret_reads_wrapped_file(tmp_path):
    path = tmp_path / "secret.txt"
    path.write_bytes(b"Um9sbGlu\nJyBpbiBt\neSA1LjAK\n")
    assert load_secret(path) == b"Rollin' in my 5.0\n"


def test_default_secret_decodes():
    secret = default_secret()
    assert secret.startswith(b"Rollin' in my 5.0\n")
    assert secret.endswith(b"No, I just drove by\n")
