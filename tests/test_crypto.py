"""
Tests for Zilliqa address derivation and Schnorr signatures.
"""
import pytest

from tyronzil.crypto import keys, schnorr
from conftest import CLIENT_ADDRESS, CLIENT_KEY, CLIENT_PUB_KEY, OTHER_ADDRESS, OTHER_KEY


def test_checksum_address_known_vector():
    address = "0x4baf5fada8e5db92c3d3242618c5b47133ae003c"

    assert keys.to_checksum_address(address) == "0x4BAF5faDA8e5Db92C3d3242618c5B47133AE003C"


def test_checksum_address_ignores_input_case_and_prefix():
    expected = "0x4BAF5faDA8e5Db92C3d3242618c5B47133AE003C"

    assert keys.to_checksum_address("4BAF5FADA8E5DB92C3D3242618C5B47133AE003C") == expected
    assert keys.to_checksum_address(expected) == expected


def test_checksum_address_rejects_invalid():
    with pytest.raises(ValueError, match="Invalid address"):
        keys.to_checksum_address("0x1234")


def test_pub_key_from_private_key():
    assert keys.get_pub_key_from_private_key(CLIENT_KEY) == CLIENT_PUB_KEY


def test_address_from_private_key():
    assert keys.get_address_from_private_key(CLIENT_KEY) == CLIENT_ADDRESS
    assert keys.get_address_from_private_key(OTHER_KEY) == OTHER_ADDRESS


def test_private_key_with_and_without_prefix():
    assert keys.get_address_from_private_key(CLIENT_KEY[2:]) == CLIENT_ADDRESS


def test_invalid_private_key():
    with pytest.raises(ValueError, match="32 bytes"):
        keys.get_address_from_private_key("0xabcd")
    with pytest.raises(ValueError, match="Invalid private key"):
        keys.get_address_from_private_key("not-hex")


def test_addresses_match():
    assert keys.addresses_match(CLIENT_ADDRESS, CLIENT_ADDRESS.lower())
    assert keys.addresses_match(CLIENT_ADDRESS, CLIENT_ADDRESS[2:])
    assert not keys.addresses_match(CLIENT_ADDRESS, OTHER_ADDRESS)
    assert not keys.addresses_match(CLIENT_ADDRESS, None)


def test_schnorr_sign_and_verify():
    private_key = bytes.fromhex(CLIENT_KEY[2:])
    public_key = bytes.fromhex(CLIENT_PUB_KEY)
    message = b"tyronzil transaction"

    signature = schnorr.sign(message, private_key, public_key)

    assert len(signature) == 128
    assert schnorr.verify(message, signature, public_key)


def test_schnorr_verify_rejects_tampering():
    private_key = bytes.fromhex(CLIENT_KEY[2:])
    public_key = bytes.fromhex(CLIENT_PUB_KEY)
    signature = schnorr.sign(b"message", private_key, public_key)

    assert not schnorr.verify(b"other message", signature, public_key)

    tampered = signature[:-1] + ("1" if signature[-1] == "0" else "0")

    assert not schnorr.verify(b"message", tampered, public_key)
    assert not schnorr.verify(b"message", signature[:64], public_key)


def test_schnorr_rejects_zero_key():
    with pytest.raises(ValueError, match="out of range"):
        schnorr.sign(b"message", bytes(32), bytes.fromhex(CLIENT_PUB_KEY))


def test_schnorr_rejects_key_at_curve_order():
    order = bytes.fromhex("fffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141")

    with pytest.raises(ValueError, match="out of range"):
        schnorr.sign(b"message", order, bytes.fromhex(CLIENT_PUB_KEY))


def test_schnorr_largest_key():
    # n - 1 is the last valid secp256k1 private key
    private_key = "fffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364140"
    public_key = bytes.fromhex(keys.get_pub_key_from_private_key(private_key))

    signature = schnorr.sign(b"message", bytes.fromhex(private_key), public_key)

    assert schnorr.verify(b"message", signature, public_key)
