"""
Resolves tyronZIL DIDs by reading the state of their tyron-smart-contract.
"""
import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tyronzil.blockchain.api import NetworkClient
from tyronzil.did.scheme import TyronZilScheme
from tyronzil.exceptions import DidResolutionError, TyronZilError

logger = logging.getLogger(__name__)


class DidState(BaseModel):
    """State of a tyron-smart-contract as seen by a resolver"""
    did: Optional[str] = Field(None, alias="decentralized_identifier")
    document: Optional[Dict[str, Any]] = None
    status: Optional[str] = Field(None, alias="did_status")
    update_commitment: Optional[str] = Field(None, alias="did_update_commitment")
    recovery_commitment: Optional[str] = Field(None, alias="did_recovery_commitment")
    operation_cost: Optional[int] = None
    contract_address: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_deactivated(self) -> bool:
        return (self.status or "").lower() == "deactivated"


def resolve(api: NetworkClient, did: str) -> DidState:
    """
    Resolve a DID into its contract state and document.

    Args:
        api: Network client for the DID's network
        did: A did:tyron:zil identifier

    Returns:
        DidState

    Raises:
        DidResolutionError: If the DID is malformed, the state cannot be read,
            the stored document is not valid JSON or a field has the wrong type
    """
    try:
        scheme = TyronZilScheme.parse(did)
    except ValueError as e:
        raise DidResolutionError(str(e)) from e

    try:
        state = api.get_smart_contract_state(scheme.contract_address)
    except TyronZilError as e:
        raise DidResolutionError(f"Failed to read the state of {scheme.contract_address}: {e}") from e
    if not isinstance(state, dict):
        raise DidResolutionError(f"Unexpected contract state for {did}: {state!r}")

    fields = dict(state)
    # Scilla ADT values come back as {"constructor": ..., "arguments": [...]}
    status = fields.get("did_status")
    if isinstance(status, dict):
        fields["did_status"] = status.get("constructor")

    raw_document = fields.pop("did_document", None)
    if raw_document:
        try:
            fields["document"] = json.loads(raw_document)
        except (TypeError, ValueError) as e:
            raise DidResolutionError(f"The DID document of {did} is not valid JSON: {e}") from e

    try:
        resolved = DidState.model_validate(fields)
    except ValidationError as e:
        raise DidResolutionError(f"Unexpected contract state for {did}: {e}") from e
    resolved.contract_address = scheme.contract_address
    logger.info(f"Resolved {did} with status {resolved.status}")
    return resolved
