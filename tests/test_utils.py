"""
Tests for utility functions.
"""
import pytest

from tyronzil.utils import (
    base64url, base64url_decode, bare_hex, canonical_json, compact_json, qa_to_zil, sha256_bytes
)


def test_qa_to_zil():
    assert qa_to_zil(100_000_000_000_000) == 100.0
    assert qa_to_zil("2000000000") == 0.002


def test_compact_json_keeps_key_order():
    assert compact_json({"b": 1, "a": [1, 2]}) == '{"b":1,"a":[1,2]}'


def test_compact_json_keeps_unicode():
    assert compact_json({"name": "tyrón"}) == '{"name":"tyrón"}'


def test_canonical_json_sorts_keys():
    assert canonical_json({"y": "2", "x": "1"}) == '{"x":"1","y":"2"}'


def test_sha256_bytes():
    assert sha256_bytes(b"").hex() == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


@pytest.mark.parametrize("data,encoded", [
    (b"", ""),
    (b"\xfb\xff", "-_8"),
    (b"abc", "YWJj"),
    (b"ab", "YWI"),
])
def test_base64url(data, encoded):
    assert base64url(data) == encoded
    assert base64url_decode(encoded) == data


@pytest.mark.parametrize("value,expected", [
    ("0xABCdef", "abcdef"),
    ("ABCdef", "abcdef"),
    ("0X12", "12"),
])
def test_bare_hex(value, expected):
    assert bare_hex(value) == expected
