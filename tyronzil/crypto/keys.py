"""
Key and address helpers for Zilliqa accounts.
"""
import hashlib
import re

from eth_keys import keys
from eth_utils import decode_hex

from tyronzil.utils import bare_hex

_ADDRESS_RE = re.compile(r"^(0x)?[0-9a-fA-F]{40}$")


def normalize_private_key(private_key: str) -> bytes:
    """
    Decode a hex private key into 32 bytes.

    Raises:
        ValueError: If the key is not 32 bytes of hex
    """
    try:
        key_bytes = decode_hex(private_key.strip())
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid private key format: {e}")
    if len(key_bytes) != 32:
        raise ValueError(f"Private key must be 32 bytes, got {len(key_bytes)}")
    return key_bytes


def get_pub_key_from_private_key(private_key: str) -> str:
    """
    Get the compressed secp256k1 public key (hex, no prefix) for a private key.
    """
    key = keys.PrivateKey(normalize_private_key(private_key))
    return key.public_key.to_compressed_bytes().hex()


def get_address_from_public_key(public_key: str) -> str:
    """
    Derive the checksummed Zilliqa address of a compressed public key.

    The address is the last 20 bytes of sha256(public key).
    """
    digest = hashlib.sha256(decode_hex(public_key)).hexdigest()
    return to_checksum_address(digest[24:])


def get_address_from_private_key(private_key: str) -> str:
    return get_address_from_public_key(get_pub_key_from_private_key(private_key))


def is_address(address: str) -> bool:
    return bool(_ADDRESS_RE.match(address or ""))


def to_checksum_address(address: str) -> str:
    """
    Apply the Zilliqa checksum casing to a hex address.

    Letter ``i`` of the address is uppercased when bit ``255 - 6*i`` of
    sha256(address bytes) is set.

    Raises:
        ValueError: If the value is not a 20-byte hex address
    """
    if not is_address(address):
        raise ValueError(f"Invalid address: {address}")

    address = bare_hex(address)
    v = int(hashlib.sha256(bytes.fromhex(address)).hexdigest(), 16)

    ret = "0x"
    for i, char in enumerate(address):
        if char.isdigit():
            ret += char
        elif v & (1 << (255 - 6 * i)):
            ret += char.upper()
        else:
            ret += char.lower()
    return ret


def addresses_match(a: str, b: str) -> bool:
    """Compare two addresses ignoring case and the 0x prefix."""
    if not a or not b:
        return False
    return bare_hex(a) == bare_hex(b)
