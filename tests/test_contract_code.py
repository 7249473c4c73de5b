"""
Tests for resolving tyron-smart-contract source from the init contract.
"""
import base64
from unittest.mock import MagicMock

import pytest

from tyronzil.blockchain import contract_code
from tyronzil.exceptions import ContractCodeError, ErrorCode, RPCError
from conftest import TYRON_INIT, FakeNetworkClient

SOURCE = "scilla_version 0\n\ncontract Tyron(tyron_init: ByStr20, contract_owner: ByStr20)\n"


def _api(contracts):
    return FakeNetworkClient(states={TYRON_INIT: {"tyron_smart_contracts": contracts}})


def test_decode_known_version():
    api = _api({"0.4": base64.b64encode(SOURCE.encode()).decode()})

    assert contract_code.decode(api, TYRON_INIT, "0.4") == SOURCE


def test_decode_unknown_version_lists_available():
    api = _api({"0.3": "YQ==", "0.4": "Yg=="})

    with pytest.raises(ContractCodeError, match="Available versions: 0.3, 0.4") as exc_info:
        contract_code.decode(api, TYRON_INIT, "0.9")

    assert exc_info.value.error_code == ErrorCode.CONTRACT_CODE_ERROR


def test_decode_invalid_base64():
    api = _api({"0.4": "not base64!"})

    with pytest.raises(ContractCodeError, match="Failed to decode"):
        contract_code.decode(api, TYRON_INIT, "0.4")


def test_decode_missing_field():
    api = FakeNetworkClient(states={TYRON_INIT: {"operation_cost": "1"}})

    with pytest.raises(ContractCodeError, match="tyron_smart_contracts"):
        contract_code.decode(api, TYRON_INIT, "0.4")


def test_decode_state_error():
    api = MagicMock()
    api.get_smart_contract_state.side_effect = RPCError("Address not contract address", code=-5)

    with pytest.raises(ContractCodeError) as exc_info:
        contract_code.decode(api, TYRON_INIT, "0.4")

    assert isinstance(exc_info.value.__cause__, RPCError)
