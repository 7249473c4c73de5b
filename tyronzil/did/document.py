"""
DID document assembly.
"""
from typing import Any, Dict, List, Optional

from tyronzil.did.keys import OperationKey
from tyronzil.utils import compact_json

SIGNING_KEY_ID = "primarySigningKey"


def build_document(
    did: str,
    signing_key: OperationKey,
    services: Optional[List[Dict[str, Any]]] = None
) -> Dict[str, Any]:
    """
    Build a DID document with one signing key and optional services.

    Args:
        did: The document's DID
        signing_key: Key published as #primarySigningKey
        services: Service entries, each with "id", "type" and "endpoint"

    Returns:
        The DID document
    """
    document: Dict[str, Any] = {
        "id": did,
        "publicKey": [
            {
                "id": f"{did}#{SIGNING_KEY_ID}",
                "type": "EcdsaSecp256k1VerificationKey2019",
                "publicKeyJwk": signing_key.public_jwk,
                "purpose": ["general", "auth"],
            }
        ],
    }
    if services:
        document["service"] = [
            {
                "id": f"{did}#{service['id']}",
                "type": service["type"],
                "serviceEndpoint": service["endpoint"],
            }
            for service in services
        ]
    return document


def serialize_document(document: Dict[str, Any]) -> str:
    return compact_json(document)


def parse_services(values: List[str]) -> List[Dict[str, Any]]:
    """
    Parse "id=type=endpoint" strings into service entries.

    Raises:
        ValueError: If a value has the wrong shape
    """
    services = []
    for value in values:
        parts = value.split("=", 2)
        if len(parts) != 3 or not all(parts):
            raise ValueError(f"Service must look like id=type=endpoint, got: {value}")
        services.append({"id": parts[0], "type": parts[1], "endpoint": parts[2]})
    return services
