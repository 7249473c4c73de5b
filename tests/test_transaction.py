"""
Tests for transaction encoding, signing and confirmation polling.
"""
import logging
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from tyronzil.blockchain.transaction import (
    NIL_ADDRESS, LocalSigner, confirm, encode_transaction_proto, sign_transaction
)
from tyronzil.crypto import schnorr
from tyronzil.exceptions import ConfirmationTimeoutError, NetworkError, RPCError
from tyronzil.models import TxObject
from conftest import (
    CLIENT_ADDRESS, CLIENT_KEY, CLIENT_PUB_KEY, TESTNET_VERSION, TYRON_INIT, USER_KEY, FakeNetworkClient
)

# Hand-encoded ProtoTransactionCoreInfo for _tx()
EXPECTED_PROTO = (
    "088180b40a"
    "1001"
    "1a144baf5fada8e5db92c3d3242618c5b47133ae003c"
    "22230a21034646ae5047316b4230d0086c8acec687f00b1cd9d1dc634f6cb358ac0a9a8fff"
    "2a120a100000000000000000000000e8d4a51000"
    "32120a1000000000000000000000000077359400"
    "3832"
    "4a0178"
)


def _tx(**overrides):
    fields = dict(
        version=TESTNET_VERSION,
        nonce=1,
        to_addr=TYRON_INIT,
        amount=1000000000000,
        pub_key=CLIENT_PUB_KEY,
        gas_price=2000000000,
        gas_limit=50,
        data="x",
    )
    fields.update(overrides)
    return TxObject(**fields)


def test_local_signer_derives_address():
    signer = LocalSigner(CLIENT_KEY)

    assert signer.address == CLIENT_ADDRESS
    assert signer.public_key == CLIENT_PUB_KEY
    assert CLIENT_KEY[2:] not in repr(signer)


def test_encode_transaction_proto():
    assert encode_transaction_proto(_tx()).hex() == EXPECTED_PROTO


def test_encode_omits_empty_code_and_data():
    encoded = encode_transaction_proto(_tx(data="")).hex()

    assert encoded == EXPECTED_PROTO[:-len("4a0178")]


def test_encode_includes_code_before_data():
    encoded = encode_transaction_proto(_tx(code="c")).hex()

    assert encoded.endswith("420163" + "4a0178")


def test_tx_object_is_immutable():
    tx = _tx()

    with pytest.raises(ValidationError):
        tx.nonce = 2


def test_sign_transaction_params():
    signer = LocalSigner(CLIENT_KEY)
    tx = _tx()

    params = sign_transaction(tx, signer)

    assert params["version"] == TESTNET_VERSION
    assert params["nonce"] == 1
    assert params["toAddr"] == "4BAF5faDA8e5Db92C3d3242618c5B47133AE003C"
    assert params["amount"] == "1000000000000"
    assert params["gasPrice"] == "2000000000"
    assert params["gasLimit"] == "50"
    assert params["pubKey"] == CLIENT_PUB_KEY
    assert params["data"] == "x"
    assert params["code"] == ""
    assert params["priority"] is False
    assert schnorr.verify(encode_transaction_proto(tx), params["signature"], bytes.fromhex(CLIENT_PUB_KEY))


def test_sign_deployment_to_nil_address():
    params = sign_transaction(_tx(to_addr=NIL_ADDRESS), LocalSigner(CLIENT_KEY))

    assert params["toAddr"] == "0" * 40


def test_sign_transaction_rejects_foreign_pub_key():
    with pytest.raises(ValueError, match="does not match the signer"):
        sign_transaction(_tx(), LocalSigner(USER_KEY))


def test_custom_signer():
    """Any object with address, public_key and sign() can sign"""
    signer = MagicMock()
    signer.address = CLIENT_ADDRESS
    signer.public_key = CLIENT_PUB_KEY
    signer.sign.return_value = "ab" * 64

    params = sign_transaction(_tx(), signer)

    signer.sign.assert_called_once_with(bytes.fromhex(EXPECTED_PROTO))
    assert params["signature"] == "ab" * 64


def test_confirm_first_attempt():
    api = FakeNetworkClient()

    receipt = confirm(api, "ab" * 32)

    assert receipt.success is True
    assert receipt.cumulative_gas == 1234
    assert receipt.epoch_num == 42
    assert api.get_transaction_calls == 1


def test_confirm_polls_until_found():
    api = FakeNetworkClient(confirm_after=5)

    receipt = confirm(api, "ab" * 32, attempts=10, interval_ms=1)

    assert receipt.success is True
    assert api.get_transaction_calls == 5


def test_confirm_timeout_after_budget():
    api = FakeNetworkClient(confirm_after=None)

    with pytest.raises(ConfirmationTimeoutError) as exc_info:
        confirm(api, "ab" * 32)

    assert api.get_transaction_calls == 33
    assert exc_info.value.attempts == 33
    assert "still not confirmed after 33 attempts" in str(exc_info.value)


def test_confirm_rejects_malformed_receipt():
    api = FakeNetworkClient(receipt={"cumulative_gas": "12"})

    with pytest.raises(RPCError, match="Malformed receipt") as exc_info:
        confirm(api, "ab" * 32)

    assert isinstance(exc_info.value.__cause__, ValidationError)
    assert api.get_transaction_calls == 1


def test_confirm_survives_network_errors():
    api = MagicMock()
    api.get_transaction.side_effect = [
        NetworkError("connection reset"),
        RPCError("Txn Hash not Present"),
        {"receipt": {"success": False, "cumulative_gas": "10"}},
    ]

    receipt = confirm(api, "ab" * 32, attempts=3)

    assert receipt.success is False
    assert receipt.cumulative_gas == 10


def test_confirm_logs_attempts(caplog):
    api = FakeNetworkClient(confirm_after=2)

    with caplog.at_level(logging.DEBUG, logger="tyronzil.blockchain.transaction"):
        confirm(api, "ab" * 32, attempts=3)

    assert "Attempt 1/3" in caplog.text
