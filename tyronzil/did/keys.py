"""
Operation keys for DID update and recovery.

An operation key is a secp256k1 key pair. Its public JWK is committed to
on-chain as ``commitment``; the next operation reveals ``reveal_value``, whose
sha256 must equal the commitment.

    reveal_value = base64url(sha256(JCS(public JWK)))
    commitment   = base64url(sha256(sha256(JCS(public JWK))))
"""
from dataclasses import dataclass
from typing import Any, Dict

from cryptography.hazmat.primitives.asymmetric import ec

from tyronzil.utils import base64url, base64url_decode, canonical_json, sha256_bytes


def _int_to_b64(value: int) -> str:
    return base64url(value.to_bytes(32, "big"))


@dataclass(frozen=True)
class OperationKey:
    """A secp256k1 operation key with its commitment values"""
    private_key: ec.EllipticCurvePrivateKey

    @classmethod
    def generate(cls) -> "OperationKey":
        return cls(ec.generate_private_key(ec.SECP256K1()))

    @classmethod
    def from_jwk(cls, jwk: Dict[str, Any]) -> "OperationKey":
        """
        Load a key from a private JWK.

        Raises:
            ValueError: If the JWK is not a secp256k1 private key
        """
        if jwk.get("kty") != "EC" or jwk.get("crv") != "secp256k1" or "d" not in jwk:
            raise ValueError("JWK must be a secp256k1 private key")
        d = int.from_bytes(base64url_decode(jwk["d"]), "big")
        return cls(ec.derive_private_key(d, ec.SECP256K1()))

    @property
    def public_jwk(self) -> Dict[str, str]:
        numbers = self.private_key.public_key().public_numbers()
        return {
            "kty": "EC",
            "crv": "secp256k1",
            "x": _int_to_b64(numbers.x),
            "y": _int_to_b64(numbers.y),
        }

    @property
    def private_jwk(self) -> Dict[str, str]:
        jwk = dict(self.public_jwk)
        jwk["d"] = _int_to_b64(self.private_key.private_numbers().private_value)
        return jwk

    @property
    def reveal_value(self) -> str:
        return base64url(sha256_bytes(canonical_json(self.public_jwk).encode("utf-8")))

    @property
    def commitment(self) -> str:
        return commitment_of(self.reveal_value)


def commitment_of(reveal_value: str) -> str:
    """Commitment that a reveal value opens."""
    return base64url(sha256_bytes(base64url_decode(reveal_value)))
