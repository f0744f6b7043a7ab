import pytest

from oraclelab.errors import InvalidRecord
from oraclelab.kv import encode_kv, parse_kv, profile_for, sanitize


def test_parse_kv():
    assert parse_kv(b"foo=bar&baz=qux&zap=zazzle") == {
        b"foo": b"bar",
        b"baz": b"qux",
        b"zap": b"zazzle",
    }


def test_parse_kv_empty_record():
    assert parse_kv(b"") == {}


def test_parse_kv_splits_at_first_equals():
    assert parse_kv(b"a=b=c&d=") == {b"a": b"b=c", b"d": b""}


def test_parse_kv_later_duplicate_wins():
    assert parse_kv(b"role=user&role=admin")[b"role"] == b"admin"


@pytest.mark.parametrize("record", [b"foo", b"foo=bar&baz", b"a=1&&b=2"])
def test_parse_kv_malformed(record):
    with pytest.raises(InvalidRecord):
        parse_kv(record)


def test_encode_kv_keeps_order():
    assert encode_kv({b"b": b"2", b"a": b"1"}) == b"b=2&a=1"
    assert encode_kv([(b"x", b"y")]) == b"x=y"


def test_sanitize_strips_metacharacters():
    assert sanitize(b"foo@bar.com&role=admin") == b"foo@bar.comroleadmin"


def test_profile_for():
    assert profile_for(b"foo@bar.com") == b"email=foo@bar.com&uid=10&role=user"
    assert profile_for(b"a&role=admin") == b"email=aroleadmin&uid=10&role=user"
    assert parse_kv(profile_for(b"x@y.z", uid=42))[b"uid"] == b"42"
