"""
Pytest fixtures for the tyronzil tests.
"""
import time
from typing import Any, Dict, List, Optional, Tuple

import pytest

from tyronzil.blockchain.orchestrator import TyronTransaction
from tyronzil.config import NetworkConfig
from tyronzil.exceptions import RPCError
from tyronzil.models import ContractInit
from tyronzil.utils import bare_hex

# Keys and the addresses/public keys they derive
CLIENT_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
CLIENT_PUB_KEY = "034646ae5047316b4230d0086c8acec687f00b1cd9d1dc634f6cb358ac0a9a8fff"
CLIENT_ADDRESS = "0x39B19C8B95EB9fABF868Af0775FDf72EF8aEb5d5"

USER_KEY = "fedcba9876543210fedcba9876543210fedcba9876543210fedcba9876543210"
USER_PUB_KEY = "0288e2ddeb04657dbd0edadf9c1f98da3b3895faa1f00527934dd35d17542ffe9b"
USER_ADDRESS = "0xB968986826d01fAC1A42e18c9d3f9866B2716C2F"

OTHER_KEY = "1111111111111111111111111111111111111111111111111111111111111111"
OTHER_ADDRESS = "0x3171a54dA33778C13118108f918E78CD2a8E3c15"

TYRON_INIT = "0x4BAF5faDA8e5Db92C3d3242618c5B47133AE003C"
CONTRACT_ADDRESS = "0x1234567890123456789012345678901234567890"
DEPLOYED_ADDRESS = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd"

TESTNET_VERSION = (333 << 16) + 1
GAS_PRICE = 2000000000
OPERATION_COST = 5000000000000
TYRON_STAKE = 100_000_000_000_000
USER_INIT_COST = 20_000_000_000_000


class FakeNetworkClient:
    """
    In-memory stand-in for ZilliqaAPI.

    Transactions are confirmed on the ``confirm_after``-th GetTransaction call;
    with ``confirm_after=None`` they never are.
    """

    def __init__(
        self,
        balances: Optional[Dict[str, Tuple[int, int]]] = None,
        states: Optional[Dict[str, Dict[str, Any]]] = None,
        gas_price: int = GAS_PRICE,
        confirm_after: Optional[int] = 1,
        receipt: Optional[Dict[str, Any]] = None,
        deployed_address: str = DEPLOYED_ADDRESS,
    ):
        self.version = TESTNET_VERSION
        self.balances = {bare_hex(k): v for k, v in (balances or {}).items()}
        self.states = {bare_hex(k): v for k, v in (states or {}).items()}
        self.gas_price = gas_price
        self.confirm_after = confirm_after
        self.receipt = receipt or {"success": True, "cumulative_gas": "1234", "epoch_num": "42"}
        self.deployed_address = deployed_address
        self.sent: List[Dict[str, Any]] = []
        self.get_transaction_calls = 0
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True

    def get_balance(self, address: str) -> Tuple[int, int]:
        return self.balances.get(bare_hex(address), (0, 0))

    def get_minimum_gas_price(self) -> int:
        return self.gas_price

    def get_smart_contract_state(self, address: str) -> Dict[str, Any]:
        key = bare_hex(address)
        if key not in self.states:
            raise RPCError("Address not contract address", code=-5, method="GetSmartContractState")
        return self.states[key]

    def create_transaction(self, tx_params: Dict[str, Any]) -> Dict[str, Any]:
        self.sent.append(tx_params)
        result = {"Info": "Non-contract txn, sent to shard", "TranID": f"{len(self.sent):064x}"}
        if set(tx_params["toAddr"]) == {"0"}:
            result["Info"] = "Contract Creation txn, sent to shard"
            result["ContractAddress"] = bare_hex(self.deployed_address)
        return result

    def get_transaction(self, tx_id: str) -> Dict[str, Any]:
        self.get_transaction_calls += 1
        if self.confirm_after is None or self.get_transaction_calls < self.confirm_after:
            raise RPCError("Txn Hash not Present", code=-20, method="GetTransaction")
        return {"ID": tx_id, "receipt": dict(self.receipt)}


@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    """Make confirmation polling instantaneous."""
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _reset_network_cache():
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def contract_init():
    return ContractInit(
        tyron_init=TYRON_INIT,
        contract_owner=USER_ADDRESS,
        client_addr=CLIENT_ADDRESS,
    )


@pytest.fixture
def fake_api():
    """A funded client and user with a tyron-smart-contract to submit to."""
    return FakeNetworkClient(
        balances={
            CLIENT_ADDRESS: (TYRON_STAKE, 7),
            USER_ADDRESS: (USER_INIT_COST, 3),
        },
        states={
            CONTRACT_ADDRESS: {"operation_cost": str(OPERATION_COST)},
            DEPLOYED_ADDRESS: {"operation_cost": str(OPERATION_COST)},
        },
    )


@pytest.fixture
def session(fake_api, contract_init):
    """A validated session with both the client and the user account."""
    return TyronTransaction.initialize(
        "testnet", contract_init, CLIENT_KEY, 10000, user_key=USER_KEY, api=fake_api
    )
