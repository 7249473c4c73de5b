"""
Cryptographic helpers: Zilliqa addresses and Schnorr signatures.
"""
from tyronzil.crypto.keys import (
    addresses_match,
    get_address_from_private_key,
    get_address_from_public_key,
    get_pub_key_from_private_key,
    is_address,
    to_checksum_address,
)
from tyronzil.crypto.schnorr import sign, verify

__all__ = [
    "addresses_match",
    "get_address_from_private_key",
    "get_address_from_public_key",
    "get_pub_key_from_private_key",
    "is_address",
    "to_checksum_address",
    "sign",
    "verify",
]
