"""
Resolves versioned tyron-smart-contract source from the tyron init contract.

The init contract keeps a map field ``tyron_smart_contracts`` from version
tag to the base64-encoded Scilla source of that version.
"""
import base64
import binascii
import logging

from tyronzil.blockchain.api import NetworkClient
from tyronzil.exceptions import ContractCodeError, TyronZilError

logger = logging.getLogger(__name__)

CONTRACTS_FIELD = "tyron_smart_contracts"


def decode(api: NetworkClient, tyron_init: str, version: str) -> str:
    """
    Fetch and decode the contract source for a version tag.

    Args:
        api: Network client
        tyron_init: Address of the tyron init contract
        version: Contract version tag, e.g. "0.4"

    Returns:
        Scilla source code

    Raises:
        ContractCodeError: If the version is unknown or cannot be decoded
    """
    try:
        state = api.get_smart_contract_state(tyron_init)
    except TyronZilError as e:
        raise ContractCodeError(f"Failed to read the tyron init contract state: {e}") from e

    contracts = state.get(CONTRACTS_FIELD) if isinstance(state, dict) else None
    if not contracts:
        raise ContractCodeError(f"The tyron init contract has no {CONTRACTS_FIELD} field")

    encoded = contracts.get(version)
    if encoded is None:
        available = ", ".join(sorted(contracts.keys()))
        raise ContractCodeError(f"Unknown contract version {version}. Available versions: {available}")

    try:
        code = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ContractCodeError(f"Failed to decode contract version {version}: {e}") from e

    logger.info(f"Resolved tyron-smart-contract version {version} ({len(code)} chars)")
    return code
