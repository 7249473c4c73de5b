"""
Zilliqa transaction construction, signing and confirmation.
"""
import logging
import time
from typing import Any, Dict, Protocol

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from pydantic import ValidationError

from tyronzil.blockchain.api import NetworkClient
from tyronzil.config import CONFIRM_ATTEMPTS, CONFIRM_INTERVAL_MS
from tyronzil.crypto import keys, schnorr
from tyronzil.exceptions import ConfirmationTimeoutError, NetworkError, RPCError
from tyronzil.models import TxObject, TxReceipt
from tyronzil.utils import bare_hex

logger = logging.getLogger(__name__)

# Destination of contract deployments
NIL_ADDRESS = "0x0000000000000000000000000000000000000000"


class Signer(Protocol):
    """Protocol for custom signers"""
    address: str
    public_key: str

    def sign(self, message: bytes) -> str:
        """Sign message bytes and return the (r || s) hex signature"""
        ...


class LocalSigner:
    """Signs with an in-memory private key"""

    def __init__(self, private_key: str):
        self._private_key = keys.normalize_private_key(private_key)
        self.public_key = keys.get_pub_key_from_private_key(private_key)
        self.address = keys.get_address_from_public_key(self.public_key)

    def sign(self, message: bytes) -> str:
        return schnorr.sign(message, self._private_key, bytes.fromhex(self.public_key))

    def __repr__(self) -> str:
        return f"LocalSigner(address={self.address})"


def _build_core_info_class():
    """
    Build the ZilliqaMessage.ProtoTransactionCoreInfo class from a descriptor.

    message ByteArray { required bytes data = 1; }
    message ProtoTransactionCoreInfo {
      optional uint32 version = 1;   optional uint64 nonce = 2;
      optional bytes toaddr = 3;     optional ByteArray senderpubkey = 4;
      optional ByteArray amount = 5; optional ByteArray gasprice = 6;
      optional uint64 gaslimit = 7;  optional bytes code = 8;
      optional bytes data = 9;
    }
    """
    fdp = descriptor_pb2.FileDescriptorProto(
        name="tyronzil/zilliqa_message.proto",
        package="ZilliqaMessage",
        syntax="proto2",
    )
    F = descriptor_pb2.FieldDescriptorProto

    byte_array = fdp.message_type.add(name="ByteArray")
    byte_array.field.add(name="data", number=1, type=F.TYPE_BYTES, label=F.LABEL_REQUIRED)

    core = fdp.message_type.add(name="ProtoTransactionCoreInfo")
    fields = [
        ("version", F.TYPE_UINT32),
        ("nonce", F.TYPE_UINT64),
        ("toaddr", F.TYPE_BYTES),
        ("senderpubkey", F.TYPE_MESSAGE),
        ("amount", F.TYPE_MESSAGE),
        ("gasprice", F.TYPE_MESSAGE),
        ("gaslimit", F.TYPE_UINT64),
        ("code", F.TYPE_BYTES),
        ("data", F.TYPE_BYTES),
    ]
    for number, (name, field_type) in enumerate(fields, start=1):
        field = core.field.add(name=name, number=number, type=field_type, label=F.LABEL_OPTIONAL)
        if field_type == F.TYPE_MESSAGE:
            field.type_name = ".ZilliqaMessage.ByteArray"

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(fdp.SerializeToString())
    return message_factory.GetMessageClass(
        pool.FindMessageTypeByName("ZilliqaMessage.ProtoTransactionCoreInfo")
    )


ProtoTransactionCoreInfo = _build_core_info_class()


def encode_transaction_proto(tx: TxObject) -> bytes:
    """
    Encode the signed portion of a transaction.

    Amounts are 16-byte big-endian integers; code and data are omitted
    when empty.
    """
    msg = ProtoTransactionCoreInfo()
    msg.version = tx.version
    msg.nonce = tx.nonce
    msg.toaddr = bytes.fromhex(bare_hex(tx.to_addr))
    msg.senderpubkey.data = bytes.fromhex(bare_hex(tx.pub_key))
    msg.amount.data = tx.amount.to_bytes(16, "big")
    msg.gasprice.data = tx.gas_price.to_bytes(16, "big")
    msg.gaslimit = tx.gas_limit
    if tx.code:
        msg.code = tx.code.encode("utf-8")
    if tx.data:
        msg.data = tx.data.encode("utf-8")
    return msg.SerializeToString(deterministic=True)


def sign_transaction(tx: TxObject, signer: Signer) -> Dict[str, Any]:
    """
    Sign a transaction and return the CreateTransaction parameters.

    Args:
        tx: Unsigned transaction; its pub_key must belong to the signer
        signer: Signer implementation

    Returns:
        Dictionary of JSON-RPC transaction parameters
    """
    if bare_hex(tx.pub_key) != bare_hex(signer.public_key):
        raise ValueError("Transaction public key does not match the signer")

    signature = signer.sign(encode_transaction_proto(tx))
    return {
        "version": tx.version,
        "nonce": tx.nonce,
        "toAddr": keys.to_checksum_address(tx.to_addr)[2:],
        "amount": str(tx.amount),
        "pubKey": bare_hex(tx.pub_key),
        "gasPrice": str(tx.gas_price),
        "gasLimit": str(tx.gas_limit),
        "code": tx.code,
        "data": tx.data,
        "signature": signature,
        "priority": tx.priority,
    }


def _parse_receipt(tx_id: str, receipt: Any) -> TxReceipt:
    try:
        return TxReceipt.model_validate(receipt)
    except ValidationError as e:
        raise RPCError(f"Malformed receipt for transaction {tx_id}: {e}", method="GetTransaction") from e


def confirm(
    api: NetworkClient,
    tx_id: str,
    attempts: int = CONFIRM_ATTEMPTS,
    interval_ms: int = CONFIRM_INTERVAL_MS
) -> TxReceipt:
    """
    Poll for a transaction until it is included in a block.

    Args:
        api: Network client
        tx_id: Transaction ID returned by CreateTransaction
        attempts: Maximum number of GetTransaction calls
        interval_ms: Wait between calls in milliseconds

    Returns:
        The transaction receipt; ``success`` tells whether it was accepted

    Raises:
        ConfirmationTimeoutError: If no receipt arrives within the budget
        RPCError: If the node returns a receipt that cannot be parsed
    """
    for attempt in range(1, attempts + 1):
        try:
            result = api.get_transaction(tx_id)
        except (RPCError, NetworkError) as e:
            # Pending transactions are reported as errors by the node
            logger.debug(f"Attempt {attempt}/{attempts} for {tx_id}: {e}")
        else:
            receipt = result.get("receipt") if isinstance(result, dict) else None
            if receipt is not None:
                logger.debug(f"Transaction {tx_id} found after {attempt} attempt(s)")
                return _parse_receipt(tx_id, receipt)

        if attempt < attempts:
            time.sleep(interval_ms / 1000)

    raise ConfirmationTimeoutError(tx_id, attempts)
