"""
DID method layer: scheme, operation keys, documents, key storage and resolution.
"""
from tyronzil.did.document import build_document, parse_services, serialize_document
from tyronzil.did.key_store import KeyStore
from tyronzil.did.keys import OperationKey, commitment_of
from tyronzil.did.resolver import DidState, resolve
from tyronzil.did.scheme import TyronZilScheme, network_for_namespace

__all__ = [
    "build_document",
    "parse_services",
    "serialize_document",
    "KeyStore",
    "OperationKey",
    "commitment_of",
    "DidState",
    "resolve",
    "TyronZilScheme",
    "network_for_namespace",
]
