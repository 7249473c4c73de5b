"""
Small helpers shared across tyronzil modules.
"""
import base64
import hashlib
import json
from typing import Any

from eth_utils import remove_0x_prefix

QA_PER_ZIL = 10**12


def qa_to_zil(amount_qa: int) -> float:
    """Convert an amount in Qa to ZIL."""
    return int(amount_qa) / QA_PER_ZIL


def compact_json(value: Any) -> str:
    """
    Serialize to JSON without whitespace, preserving key order.

    This matches the output of JavaScript's JSON.stringify, which is what the
    on-chain transition dispatcher expects.
    """
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False)


def canonical_json(value: Any) -> str:
    """Serialize to JSON with sorted keys and no whitespace."""
    return json.dumps(value, separators=(',', ':'), sort_keys=True, ensure_ascii=False)


def sha256_bytes(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def base64url(data: bytes) -> str:
    """Base64url encoding without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def base64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def bare_hex(value: str) -> str:
    """Lowercase hex string without the 0x prefix."""
    return remove_0x_prefix(value).lower()
