"""
EC-Schnorr signatures over secp256k1, as used by Zilliqa transactions.

Signing picks a random nonce k, computes Q = kG and

    r = sha256(compressed(Q) || pubkey || msg) mod n
    s = (k - r * priv) mod n

Verification recomputes Q = sG + r*pub and checks the hash again.
"""
import hashlib
import secrets
from typing import Optional, Tuple

from eth_keys import keys
from eth_keys.backends.native.jacobian import fast_add, fast_multiply
from eth_keys.constants import SECPK1_G, SECPK1_N

Point = Tuple[int, int]


def _compress(point: Point) -> bytes:
    x, y = point
    prefix = b"\x03" if y & 1 else b"\x02"
    return prefix + x.to_bytes(32, "big")


def _challenge(comp_q: bytes, pub_key: bytes, msg: bytes) -> int:
    digest = hashlib.sha256(comp_q + pub_key + msg).digest()
    return int.from_bytes(digest, "big") % SECPK1_N


def _try_sign(msg: bytes, k: int, priv: int, pub_key: bytes) -> Optional[Tuple[int, int]]:
    if k == 0 or k >= SECPK1_N:
        return None

    q = fast_multiply(SECPK1_G, k)
    r = _challenge(_compress(q), pub_key, msg)
    if r == 0:
        return None

    s = (k - r * priv) % SECPK1_N
    if s == 0:
        return None
    return r, s


def sign(msg: bytes, private_key: bytes, public_key: bytes) -> str:
    """
    Sign a message.

    Args:
        msg: Message bytes, usually the encoded transaction core info
        private_key: 32-byte private key
        public_key: Compressed public key bytes

    Returns:
        Signature as 128 hex characters (r || s)

    Raises:
        ValueError: If the private key is out of range
    """
    priv = int.from_bytes(private_key, "big")
    if priv == 0 or priv >= SECPK1_N:
        raise ValueError("Private key is out of range for secp256k1")

    while True:
        k = secrets.randbelow(SECPK1_N - 1) + 1
        signature = _try_sign(msg, k, priv, public_key)
        if signature is not None:
            r, s = signature
            return format(r, "064x") + format(s, "064x")


def verify(msg: bytes, signature: str, public_key: bytes) -> bool:
    """
    Verify an (r || s) hex signature against a compressed public key.
    """
    if len(signature) != 128:
        return False
    r = int(signature[:64], 16)
    s = int(signature[64:], 16)
    if not (0 < r < SECPK1_N and 0 < s < SECPK1_N):
        return False

    raw = keys.PublicKey.from_compressed_bytes(public_key).to_bytes()
    pub_point = (int.from_bytes(raw[:32], "big"), int.from_bytes(raw[32:], "big"))

    q = fast_add(fast_multiply(SECPK1_G, s), fast_multiply(pub_point, r))
    if q == (0, 0):
        return False
    return _challenge(_compress(q), public_key, msg) == r
